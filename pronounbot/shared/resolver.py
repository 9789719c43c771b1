"""Cache-aside pronoun resolution."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Protocol

from .cache import DEFAULT_EXPIRE, CacheStore
from .errors import PronounNotFound, TransportFault
from .models.pronoun import PronounResult
from .providers import ProviderChain
from .pronouns import is_canonical

LOGGER = logging.getLogger("Bot.Resolver")

REGISTRY_URL = "https://pronoundb.org/"


class Notifier(Protocol):
    async def send_reply(self, channel_id: str, message_id: str, text: str) -> None: ...

    async def send_whisper(self, user_id: str, text: str) -> None: ...


@dataclass
class ResolverStats:
    cache_hits: int = 0
    cache_misses: int = 0
    not_found: int = 0
    cache_write_errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class PronounResolver:
    """Resolve a user's pronouns: cache first, then the provider chain.

    A successful provider lookup is written back with ``expire`` seconds to
    live. When nothing is found, or anything underneath fails, the user is
    whispered a pointer to ``registry_url`` and an error result is returned.
    ``resolve`` never raises.

    Cached values that are not canonical display values are treated as a miss
    and overwritten.
    """

    def __init__(
        self,
        cache: CacheStore,
        chain: ProviderChain,
        notifier: Notifier,
        *,
        expire: int = DEFAULT_EXPIRE,
        registry_url: str = REGISTRY_URL,
    ) -> None:
        self.cache = cache
        self.chain = chain
        self.notifier = notifier
        self.expire = expire
        self.registry_url = registry_url
        self.stats = ResolverStats()

    async def resolve(self, user_id: str, username: str) -> PronounResult:
        try:
            cached = await self.cache.get(user_id)
            if is_canonical(cached):
                LOGGER.debug(f"Cache hit for {username} ({user_id}): {cached}")
                self.stats.cache_hits += 1
                return PronounResult(user_id=user_id, username=username, value=cached)
            if cached:
                LOGGER.warning(f"Ignoring non-canonical cache entry for {user_id}: {cached!r}")

            self.stats.cache_misses += 1
            value = await self.chain.lookup(user_id, username)
        except asyncio.CancelledError:
            raise
        except PronounNotFound:
            LOGGER.info(f"No pronouns found for {username} ({user_id})")
            return await self._not_found(user_id, username)
        except TransportFault as e:
            LOGGER.error(f"Lookup for {username} ({user_id}) failed: {e}")
            return await self._not_found(user_id, username)
        except Exception as e:
            LOGGER.exception(f"Unexpected error resolving {username} ({user_id}): {e}")
            return await self._not_found(user_id, username)

        await self._store(user_id, value)
        return PronounResult(user_id=user_id, username=username, value=value)

    async def _store(self, user_id: str, value: str) -> None:
        try:
            await self.cache.set(user_id, value, expire=self.expire)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.warning(f"Failed to cache pronouns for {user_id}: {e}")
            self.stats.cache_write_errors += 1

    async def _not_found(self, user_id: str, username: str) -> PronounResult:
        try:
            await self.notifier.send_whisper(
                user_id, f"Please set your pronouns over at {self.registry_url}"
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.warning(f"Failed to whisper {username} ({user_id}): {e}")

        self.stats.not_found += 1

        return PronounResult(
            user_id=user_id,
            username=username,
            error=f"pronouns not found for user {username}",
        )
