"""Exception hierarchy for the pronoun lookup pipeline."""

from __future__ import annotations


class PronounBotError(Exception):
    """Base class for all bot errors."""


class CommandValidationError(PronounBotError):
    """A chat command was invoked without its required argument."""


class PronounNotFound(PronounBotError):
    """Neither the cache nor any provider has a usable pronoun for the user."""

    def __init__(self, user_id: str, username: str) -> None:
        self.user_id = user_id
        self.username = username
        super().__init__(f"No pronoun found for {username} ({user_id})")


class TransportFault(PronounBotError):
    """An external dependency failed for infrastructural reasons."""


class CacheUnavailable(TransportFault):
    """The cache store could not be reached."""


class ProviderFault(TransportFault):
    """A lookup provider returned an error or a malformed payload."""
