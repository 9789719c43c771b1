"""Pronoun lookup providers and the ordered fallback chain."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from .errors import PronounNotFound, ProviderFault
from .models.pronoun import LookupStatus, ProviderResult
from .pronouns import UNSPECIFIED, normalize

LOGGER = logging.getLogger("Bot.Providers")

PRONOUNDB_URL = "https://pronoundb.org/api/v1/lookup"
ALEJO_URL = "https://pronouns.alejo.io/api/users"


class PronounProvider(Protocol):
    name: str

    async def lookup(self, user_id: str, username: str) -> ProviderResult: ...


class HTTPProvider:
    """Shared GET-and-decode helper for JSON providers.

    Subclasses implement ``_request_url`` and ``_parse``. Transport errors,
    non-2xx responses and malformed payloads all come back as ``FAULT``.
    """

    name = "http"

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    def _request_url(self, user_id: str, username: str) -> tuple[str, dict[str, str] | None]:
        raise NotImplementedError

    def _parse(self, data: Any) -> ProviderResult:
        raise NotImplementedError

    async def lookup(self, user_id: str, username: str) -> ProviderResult:
        url, params = self._request_url(user_id, username)
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
            LOGGER.debug(f"Data from {self.name}: {data}")
            return self._parse(data)
        except httpx.HTTPError as e:
            return ProviderResult.fault(self.name, f"{type(e).__name__}: {e}")
        except (ValueError, ProviderFault) as e:
            return ProviderResult.fault(self.name, f"Malformed payload: {e}")


class PronounDBProvider(HTTPProvider):
    """Looks users up by Twitch id. Payload: ``{"pronouns": "st"}``."""

    name = "pronoundb"

    def __init__(self, client: httpx.AsyncClient, base_url: str = PRONOUNDB_URL) -> None:
        super().__init__(client, base_url)

    def _request_url(self, user_id: str, username: str) -> tuple[str, dict[str, str] | None]:
        return self._base_url, {"platform": "twitch", "id": user_id}

    def _parse(self, data: Any) -> ProviderResult:
        if not isinstance(data, dict):
            raise ProviderFault(f"expected object, got {type(data).__name__}")

        code = data.get("pronouns")
        if not code or code == UNSPECIFIED:
            return ProviderResult.unspecified(self.name)
        if not isinstance(code, str):
            raise ProviderFault(f"'pronouns' is not a string: {code!r}")
        return ProviderResult.found(self.name, code)


class AlejoProvider(HTTPProvider):
    """Looks users up by login.

    Payload: ``[{"id": "195304642", "login": "...", "pronoun_id": "shethem"}]``
    """

    name = "alejo"

    def __init__(self, client: httpx.AsyncClient, base_url: str = ALEJO_URL) -> None:
        super().__init__(client, base_url)

    def _request_url(self, user_id: str, username: str) -> tuple[str, dict[str, str] | None]:
        return f"{self._base_url}/{quote(username.lower(), safe='')}", None

    def _parse(self, data: Any) -> ProviderResult:
        if not isinstance(data, list):
            raise ProviderFault(f"expected array, got {type(data).__name__}")
        if not data:
            return ProviderResult.unspecified(self.name)

        first = data[0]
        code = first.get("pronoun_id") if isinstance(first, dict) else None
        if not isinstance(code, str) or not code:
            raise ProviderFault(f"first record has no pronoun_id: {first!r}")
        return ProviderResult.found(self.name, code)


class ProviderChain:
    """Query providers in order until one yields a code in the canonical table."""

    def __init__(self, providers: Sequence[PronounProvider]) -> None:
        self.providers = list(providers)

    async def lookup(self, user_id: str, username: str) -> str:
        for provider in self.providers:
            try:
                result = await provider.lookup(user_id, username)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                result = ProviderResult.fault(provider.name, f"{type(e).__name__}: {e}")

            if result.status is LookupStatus.FOUND:
                value = normalize(result.code)
                if value is not None:
                    LOGGER.info(f"[{provider.name}] {username} ({user_id}) -> {value}")
                    return value
                LOGGER.warning(f"[{provider.name}] Unknown pronoun code {result.code!r} for {username}")
            elif result.status is LookupStatus.FAULT:
                LOGGER.warning(f"[{provider.name}] Lookup failed for {username}: {result.reason}")
            else:
                LOGGER.debug(f"[{provider.name}] No pronoun set for {username}")

        raise PronounNotFound(user_id, username)


def create_provider_chain(
    client: httpx.AsyncClient,
    *,
    pronoundb_url: str = PRONOUNDB_URL,
    alejo_url: str = ALEJO_URL,
) -> ProviderChain:
    return ProviderChain(
        [
            PronounDBProvider(client, pronoundb_url),
            AlejoProvider(client, alejo_url),
        ]
    )
