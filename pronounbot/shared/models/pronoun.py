"""Data models for provider responses and resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LookupStatus(str, Enum):
    FOUND = "found"
    UNSPECIFIED = "unspecified"
    FAULT = "fault"


@dataclass(frozen=True)
class ProviderResult:
    """Tagged outcome of a single provider call.

    ``code`` is the raw provider code and is only set when ``status`` is
    ``FOUND``. ``reason`` describes a ``FAULT`` for the logs.
    """

    provider: str
    status: LookupStatus
    code: str | None = None
    reason: str | None = None

    @classmethod
    def found(cls, provider: str, code: str) -> ProviderResult:
        return cls(provider=provider, status=LookupStatus.FOUND, code=code)

    @classmethod
    def unspecified(cls, provider: str) -> ProviderResult:
        return cls(provider=provider, status=LookupStatus.UNSPECIFIED)

    @classmethod
    def fault(cls, provider: str, reason: str) -> ProviderResult:
        return cls(provider=provider, status=LookupStatus.FAULT, reason=reason)


@dataclass(frozen=True)
class PronounResult:
    """Outcome of resolving one user: either a value or an error message."""

    user_id: str
    username: str
    value: str | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.value is not None
