"""Outbound chat messages sent from the bot account."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from twitchio import Client

LOGGER = logging.getLogger("Bot.Notifier")


class TwitchNotifier:
    """Send channel replies and whispers as the bot user.

    Errors from the Twitch API propagate; callers decide whether a failed
    send matters.
    """

    def __init__(self, client: "Client", bot_id: str) -> None:
        self.client = client
        self.bot_id = bot_id

    async def send_reply(self, channel_id: str, message_id: str, text: str) -> None:
        broadcaster = self.client.create_partialuser(user_id=channel_id)
        await broadcaster.send_message(
            message=text,
            sender=self.bot_id,
            token_for=self.bot_id,
            reply_to_message_id=message_id,
        )
        LOGGER.debug(f"Replied in {channel_id} to {message_id}: {text}")

    async def send_whisper(self, user_id: str, text: str) -> None:
        bot_user = self.client.create_partialuser(user_id=self.bot_id)
        await bot_user.send_whisper(to_user=user_id, message=text)
        LOGGER.info(f"Whispered {user_id}: {text}")
