import asyncio
import logging
import sys

import httpx

from pronounbot.core.config import get_settings, validate_env_vars
from pronounbot.core.logging import setup_logging
from pronounbot.shared.cache import create_cache_store
from pronounbot.shared.repositories.channel import ChannelRepository

LOGGER: logging.Logger = logging.getLogger("Bot")


def main() -> None:
    try:
        validate_env_vars()
    except ValueError:
        sys.exit(1)

    settings = get_settings()
    setup_logging(settings.log_level)

    # Imported late so a missing config fails before TwitchIO loads
    from pronounbot.core.bot import Bot
    from pronounbot.core.health_server import HealthCheckServer
    from pronounbot.core.subscriptions import get_initial_subscriptions

    async def runner() -> None:
        channels = ChannelRepository(settings.channels_file)
        channel_list = await channels.load()
        joined = channel_list.distinct()
        subs = get_initial_subscriptions(joined, settings.bot_id)

        LOGGER.info(f"Starting bot with {len(joined)} channels ({len(subs)} subscriptions)")

        cache = create_cache_store(settings.redis_url)
        http_client = httpx.AsyncClient(timeout=settings.http_timeout)

        async with Bot(
            settings=settings,
            channels=channels,
            cache=cache,
            http_client=http_client,
            subs=subs,
        ) as bot:
            bot.mark_joined(joined)
            health_server = HealthCheckServer(bot, port=settings.health_port)
            await health_server.start()
            try:
                await bot.start()
            finally:
                await health_server.stop()

    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
