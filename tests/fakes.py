"""Hand-written fakes shared across tests."""

from __future__ import annotations

from pronounbot.shared.models.pronoun import ProviderResult
from pronounbot.shared.providers import ProviderChain
from pronounbot.shared.resolver import PronounResolver


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNotifier:
    def __init__(self, fail: bool = False, fail_replies: bool = False) -> None:
        self.replies: list[tuple[str, str, str]] = []
        self.whispers: list[tuple[str, str]] = []
        self.fail = fail
        self.fail_replies = fail_replies

    async def send_reply(self, channel_id: str, message_id: str, text: str) -> None:
        if self.fail_replies:
            raise RuntimeError("reply rejected")
        self.replies.append((channel_id, message_id, text))

    async def send_whisper(self, user_id: str, text: str) -> None:
        if self.fail:
            raise RuntimeError("whisper rejected")
        self.whispers.append((user_id, text))


class StaticProvider:
    """Returns a fixed result and records every call."""

    def __init__(
        self,
        name: str,
        result: ProviderResult | None = None,
        exc: Exception | None = None,
    ) -> None:
        self.name = name
        self.result = result
        self.exc = exc
        self.calls: list[tuple[str, str]] = []

    async def lookup(self, user_id: str, username: str) -> ProviderResult:
        self.calls.append((user_id, username))
        if self.exc is not None:
            raise self.exc
        assert self.result is not None
        return self.result


class FailingCache:
    """Cache store whose operations raise the given exceptions."""

    name = "failing"

    def __init__(self, get_exc: Exception | None = None, set_exc: Exception | None = None):
        self.get_exc = get_exc
        self.set_exc = set_exc
        self.sets: list[tuple[str, str, int]] = []

    async def get(self, key: str) -> str | None:
        if self.get_exc is not None:
            raise self.get_exc
        return None

    async def set(self, key: str, value: str, *, expire: int = 86400) -> None:
        if self.set_exc is not None:
            raise self.set_exc
        self.sets.append((key, value, expire))

    async def ping(self) -> bool:
        return self.get_exc is None

    async def close(self) -> None:
        pass


def make_resolver(cache, notifier, *providers, **kwargs) -> PronounResolver:
    return PronounResolver(cache, ProviderChain(list(providers)), notifier, **kwargs)
