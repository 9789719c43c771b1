"""Chat command handling for ``!pn`` and whispered ``!join``.

Kept free of TwitchIO types so the flows can be driven directly; the
components in ``pronounbot.components`` adapt chat events onto them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .errors import CommandValidationError
from .repositories.channel import ChannelRepository
from .resolver import Notifier, PronounResolver

LOGGER = logging.getLogger("Bot.Commands")

LOOKUP_COMMAND = "pn"
JOIN_COMMAND = "!join"

MISSING_USERNAME = "Please provide a username"
USER_NOT_FOUND = "User not found"
JOINED_CHANNEL = "Joined channel"


@dataclass(frozen=True)
class ChatUser:
    """The parts of a Twitch user the lookup flow needs."""

    id: str
    name: str
    display_name: str


UserFetcher = Callable[[str], Awaitable[ChatUser | None]]
ChannelJoiner = Callable[[str], Awaitable[None]]


def parse_username(argument: str | None) -> str:
    """Extract the target login from ``!pn`` arguments, dropping any ``@``."""
    parts = (argument or "").split()
    if not parts:
        raise CommandValidationError(MISSING_USERNAME)
    username = parts[0].replace("@", "")
    if not username:
        raise CommandValidationError(MISSING_USERNAME)
    return username


def is_join_command(text: str | None) -> bool:
    return (text or "").strip().lower() == JOIN_COMMAND


def format_pronoun_reply(display_name: str, value: str) -> str:
    return f"@{display_name} uses {value} pronouns"


class PronounLookup:
    """``!pn <username>``: resolve the chat user, then their pronouns.

    ``handle`` sends exactly one reply to the triggering message; ``respond``
    only builds its text.
    """

    def __init__(
        self,
        resolver: PronounResolver,
        fetch_user: UserFetcher,
        notifier: Notifier,
    ) -> None:
        self.resolver = resolver
        self.fetch_user = fetch_user
        self.notifier = notifier

    async def handle(self, channel_id: str, message_id: str, argument: str | None) -> str:
        reply = await self.respond(argument)
        try:
            await self.notifier.send_reply(channel_id, message_id, reply)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.warning(f"Failed to reply in {channel_id}: {e}")
        return reply

    async def respond(self, argument: str | None) -> str:
        try:
            username = parse_username(argument)
        except CommandValidationError as e:
            return str(e)

        try:
            user = await self.fetch_user(username)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.warning(f"Failed to fetch Twitch user {username}: {e}")
            user = None

        if user is None:
            LOGGER.info(f"Twitch user not found: {username}")
            return USER_NOT_FOUND

        result = await self.resolver.resolve(user.id, user.name)
        if result.found:
            return format_pronoun_reply(user.display_name, result.value)  # type: ignore[arg-type]
        return result.error or USER_NOT_FOUND


class ChannelJoin:
    """Whispered ``!join``: join the requester's channel and remember it.

    A failed transport join is logged and does not stop the channel being
    persisted. A failed write skips the confirmation whisper.
    """

    def __init__(
        self,
        channels: ChannelRepository,
        join_channel: ChannelJoiner,
        notifier: Notifier,
    ) -> None:
        self.channels = channels
        self.join_channel = join_channel
        self.notifier = notifier

    async def join(self, user_id: str, username: str) -> bool:
        try:
            await self.join_channel(user_id)
            LOGGER.info(f"Joined channel {username} ({user_id})")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.error(f"Failed to join channel {username} ({user_id}): {e}")

        try:
            await self.channels.append(user_id)
        except (OSError, ValueError) as e:
            LOGGER.error(f"Failed to persist channel {username} ({user_id}): {e}")
            return False

        try:
            await self.notifier.send_whisper(user_id, JOINED_CHANNEL)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.warning(f"Failed to whisper join confirmation to {username}: {e}")
        return True
