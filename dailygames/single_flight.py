import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict


class SingleFlight:
    """Collapse concurrent calls for the same key into one running task.

    Callers arriving while a task for their key is in flight await that task
    instead of starting their own. Once it finishes the key is released, so a
    later call runs again (and normally hits the cache).
    """

    def __init__(self):
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def run(self, key: str, func: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``func`` for ``key`` unless it is already running

        Args:
            key (str): Deduplication key (the cache key of the slate)
            func (Callable[[], Awaitable[Any]]): Coroutine factory doing the work

        Returns:
            Any: Result of the single shared execution
        """
        # lookup and insert must stay free of awaits
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._in_flight[key] = task
            task.add_done_callback(lambda _: self._release(key, task))
        else:
            logging.info(f"Joining in-flight generation for {key}")
        return await asyncio.shield(task)

    def _release(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def in_flight(self, key: str) -> bool:
        return key in self._in_flight
