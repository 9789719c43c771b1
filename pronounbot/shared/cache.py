"""Cache stores for resolved pronouns.

Two backends share the same small contract:

  1. ``MemoryCacheStore`` — in-process ``cachetools.TLRUCache`` with a
     per-entry expiry. Zero infrastructure; entries are lost on restart.
  2. ``RedisCacheStore`` — Redis via ``redis.asyncio``. Connection is
     created lazily and rebuilt after a failure.

Values are always canonical pronoun strings; the resolver never writes a raw
provider code.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import redis.asyncio as redis
from cachetools import TLRUCache  # type: ignore[import-untyped]
from redis.exceptions import RedisError

from .errors import CacheUnavailable

logger = logging.getLogger("Bot.Cache")

# 1 day
DEFAULT_EXPIRE = 86400


@runtime_checkable
class CacheStore(Protocol):
    name: str

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, *, expire: int = DEFAULT_EXPIRE) -> None: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


def _entry_expiry(key: str, value: tuple[str, float], now: float) -> float:
    return now + value[1]


class MemoryCacheStore:
    """In-process cache with per-entry expiry.

    ``timer`` defaults to ``time.monotonic``; tests pass a fake clock to step
    over the expiry boundary.
    """

    name = "memory"

    def __init__(self, maxsize: int = 4096, timer: Callable[[], float] = time.monotonic):
        # Stored as (value, ttl) so each entry can carry its own expiry
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=timer)

    async def get(self, key: str) -> str | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        return entry[0]

    async def set(self, key: str, value: str, *, expire: int = DEFAULT_EXPIRE) -> None:
        self._cache[key] = (value, float(expire))

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)


class RedisCacheStore:
    """Redis-backed cache.

    The client is built on first use and pinged whenever its health is
    unknown (first use, or after an error). Any ``RedisError`` drops the
    client so the next call reconnects, and is re-raised as
    ``CacheUnavailable``.
    """

    name = "redis"

    def __init__(self, url: str, *, client_factory: Callable[..., redis.Redis] | None = None):
        self._url = url
        self._client_factory = client_factory or redis.from_url
        self._client: redis.Redis | None = None
        self._healthy = False

    async def _connection(self) -> redis.Redis:
        if self._client is None:
            self._client = self._client_factory(self._url, decode_responses=True)
            self._healthy = False

        if not self._healthy:
            await self._client.ping()
            self._healthy = True
            logger.info("Connected to Redis")

        return self._client

    async def _reset(self) -> None:
        client, self._client = self._client, None
        self._healthy = False
        if client is not None:
            try:
                await client.aclose()
            except RedisError as e:
                logger.debug(f"Error closing stale Redis client: {e}")

    async def get(self, key: str) -> str | None:
        try:
            client = await self._connection()
            return await client.get(key)
        except RedisError as e:
            await self._reset()
            raise CacheUnavailable(f"Redis GET failed for {key}: {e}") from e

    async def set(self, key: str, value: str, *, expire: int = DEFAULT_EXPIRE) -> None:
        try:
            client = await self._connection()
            # SET ... EX is atomic; no separate EXPIRE round trip
            await client.set(key, value, ex=expire)
        except RedisError as e:
            await self._reset()
            raise CacheUnavailable(f"Redis SET failed for {key}: {e}") from e

    async def ping(self) -> bool:
        """Round-trip a PING; a failure drops the client like any other error."""
        try:
            client = await self._connection()
            await client.ping()
        except RedisError as e:
            await self._reset()
            logger.warning(f"Redis PING failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self._reset()


def create_cache_store(redis_url: str = "") -> CacheStore:
    """Pick the Redis backend when a URL is configured, otherwise in-process."""
    if redis_url:
        logger.info("Using Redis cache store")
        return RedisCacheStore(redis_url)
    logger.info("REDIS_URL not set, using in-process cache store")
    return MemoryCacheStore()
