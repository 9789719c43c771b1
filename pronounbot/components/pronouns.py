from typing import TYPE_CHECKING

from twitchio.ext import commands

from pronounbot.shared.commands import LOOKUP_COMMAND

if TYPE_CHECKING:
    from pronounbot.core.bot import Bot
else:
    from twitchio.ext.commands import Bot


class PronounCommands(commands.Component):
    """Public pronoun lookup."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @commands.command(name=LOOKUP_COMMAND)
    async def pn(self, ctx: commands.Context[Bot], *, username: str | None = None) -> None:
        """Show a user's pronouns.

        Usage: !pn <username>
        """
        await self.answer(ctx, username)

    async def answer(self, ctx: commands.Context[Bot], username: str | None) -> str:
        """Reply to the triggering message with the lookup result."""
        return await self.bot.pronoun_lookup.handle(
            str(ctx.channel.id), str(ctx.message.id), username
        )


async def setup(bot: commands.Bot) -> None:
    """Entry point for the module."""
    await bot.add_component(PronounCommands(bot))


async def teardown(bot: commands.Bot) -> None:
    """Optional teardown coroutine for cleanup."""
    ...
