"""Error taxonomy shared by the domain, service and router layers.

Each error carries the short, player-safe message that is returned to the
client and the HTTP status code it maps to. Raw exception text is only logged.
"""

from fastapi import status


class GameError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(GameError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(GameError):
    """The referenced slate or item does not exist (expired or mistyped key)."""

    status_code = status.HTTP_404_NOT_FOUND


class StoreFailure(GameError):
    """Reading or writing the cache backend failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
