"""Cache key and day-key derivation.

Each game owns its own namespace, so a High Stakes slate and a Pearly Gates
profile for the same day can never collide.
"""

from datetime import date
from enum import Enum

from dailygames.errors import InvalidArgument

# Bump to force a fresh daily slate for every player.
INVEST_DAILY_SEED_VERSION = 3
GATES_DAILY_SEED_VERSION = 1

DAILY_TTL_SECONDS = 60 * 60 * 24 * 30
RANDOM_TTL_SECONDS = 60 * 60 * 24


class GameMode(str, Enum):
    daily = "daily"
    debug_random = "debug-random"


class GameKind(str, Enum):
    invest = "inv"  # High Stakes
    gates = "pg"  # Pearly Gates


def coerce_mode(value) -> GameMode:
    """Anything other than an explicit random request is a daily game."""
    if value == GameMode.debug_random or value == GameMode.debug_random.value:
        return GameMode.debug_random
    return GameMode.daily


def daily_key(kind: GameKind, date_key: str) -> str:
    return f"{kind.value}:daily:{date_key}"


def random_key(kind: GameKind, game_id: str) -> str:
    return f"{kind.value}:random:{game_id}"


def derive_key(kind: GameKind, mode: GameMode, game_id: str, date_key: str | None = None) -> str:
    """Return the cache key for a slate.

    Args:
        kind (GameKind): Which game the slate belongs to
        mode (GameMode): Daily keys use ``date_key``; random keys use ``game_id``
        game_id (str): Random game identity (ignored in daily mode)
        date_key (str | None, optional): Calendar key, required in daily mode. Defaults to None.

    Raises:
        InvalidArgument: Daily mode without a date key

    Returns:
        str: The namespaced cache key
    """
    if mode == GameMode.daily:
        if not date_key or not date_key.strip():
            raise InvalidArgument("Missing dateKey for daily mode")
        return daily_key(kind, date_key.strip())
    if not game_id or not game_id.strip():
        raise InvalidArgument("Missing gameId")
    return random_key(kind, game_id.strip())


def ttl_for(mode: GameMode) -> int:
    return DAILY_TTL_SECONDS if mode == GameMode.daily else RANDOM_TTL_SECONDS


def local_date_key(day: date) -> str:
    """Player's local calendar date as YYYY-MM-DD."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def daily_date_key(day: date, seed_version: int) -> str:
    return f"{local_date_key(day)}-v{seed_version}"


def resolve_action_key(kind: GameKind, mode: GameMode, game_id: str | None, date_key: str | None) -> str:
    """Cache key for a follow-up action (revise, simulate, ask, judge).

    Daily games are addressed by their date key; a missing game id falls back
    to the date key, the same identity the daily slate was started with.
    """
    date_key = (date_key or "").strip()
    game_id = (game_id or "").strip() or date_key
    if mode == GameMode.daily and not date_key:
        raise InvalidArgument("Missing dateKey for daily mode")
    if not game_id:
        raise InvalidArgument("Missing gameId")
    return derive_key(kind, mode, game_id, date_key)
