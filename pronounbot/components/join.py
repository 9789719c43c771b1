import logging

import twitchio
from twitchio.ext import commands

from pronounbot.shared.commands import is_join_command

LOGGER = logging.getLogger("Bot.Join")


class JoinWhispers(commands.Component):
    """Join a channel when its owner whispers ``!join`` to the bot."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @commands.Component.listener()
    async def event_message_whisper(self, payload: twitchio.Whisper) -> None:
        if not is_join_command(payload.text):
            return

        sender = payload.sender
        LOGGER.info(f"Join requested by {sender.name} ({sender.id})")
        await self.bot.channel_join.join(str(sender.id), sender.name or str(sender.id))


async def setup(bot: commands.Bot) -> None:
    """Entry point for the module."""
    await bot.add_component(JoinWhispers(bot))


async def teardown(bot: commands.Bot) -> None:
    """Optional teardown coroutine for cleanup."""
    ...
