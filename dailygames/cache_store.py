"""Key/value cache for generated slates.

Two interchangeable backends behind one interface:

- ``RedisCacheStore``: durable, shared by every process, TTL enforced by Redis.
- ``MemoryCacheStore``: single-process, non-durable fallback used when no
  Redis is configured. Expiry is an absolute timestamp checked on read.

The backend is chosen once, when the store is built at application startup.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

from redis.asyncio import Redis
from redis.exceptions import RedisError

from dailygames.errors import StoreFailure


class CacheStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the raw stored string, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Store a raw string, overwriting any previous value (last write wins).

        ``ttl_seconds=None`` never expires; zero or less counts as already expired.
        """

    async def get_json(self, key: str) -> Any:
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logging.warning(f"Discarding unparseable cache entry for {key}")
            return None

    async def set_json(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        await self.set(key, json.dumps(value), ttl_seconds)


class RedisCacheStore(CacheStore):
    def __init__(self, redis: Redis):
        self.redis = redis

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except RedisError as e:
            logging.error(f"Failed to read {key} from redis: {e}")
            raise StoreFailure("Storage is unavailable") from e

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        try:
            if ttl_seconds is None:
                await self.redis.set(key, value)
            elif ttl_seconds > 0:
                await self.redis.set(key, value, ex=ttl_seconds)
            else:
                await self.redis.delete(key)
        except RedisError as e:
            logging.error(f"Failed to write {key} to redis: {e}")
            raise StoreFailure("Storage is unavailable") from e

    async def close(self) -> None:
        await self.redis.aclose()


class MemoryCacheStore(CacheStore):
    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self.entries: Dict[str, Tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.clock() > expires_at:
            del self.entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            self.entries.pop(key, None)
            return
        expires_at = self.clock() + ttl_seconds if ttl_seconds is not None else None
        self.entries[key] = (value, expires_at)


def build_cache_store(url: Optional[str], token: Optional[str]) -> CacheStore:
    """Pick the durable backend when both connection values are configured.

    Args:
        url (Optional[str]): Redis URL (redis:// or rediss://)
        token (Optional[str]): Redis password / access token

    Returns:
        CacheStore: Redis-backed store, or the in-process fallback
    """
    if url and token:
        logging.info("Using redis cache store")
        redis = Redis.from_url(url, password=token, decode_responses=True, health_check_interval=30)
        return RedisCacheStore(redis)
    logging.warning("KV_URL/KV_TOKEN not configured: using in-process cache store")
    return MemoryCacheStore()
