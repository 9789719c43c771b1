"""Health endpoints: bot readiness, cache reachability and lookup counters.

``/health`` answers 200 while the cache is unreachable and reports the bot
as ``degraded``.
"""

import asyncio
import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any

from aiohttp import web

if TYPE_CHECKING:
    from pronounbot.core.bot import Bot

logger = logging.getLogger("Bot.Health")

CACHE_PING_TIMEOUT = 2.0
HEARTBEAT_INTERVAL = 300.0


class HealthCheckServer:
    def __init__(
        self,
        bot: "Bot | None" = None,
        host: str = "0.0.0.0",
        port: int = 4344,
        *,
        heartbeat_interval: float = HEARTBEAT_INTERVAL,
    ):
        self.bot: Any = bot
        self.host = host
        self.port = port
        self.heartbeat_interval = heartbeat_interval
        self.app = web.Application()
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.runner: web.AppRunner | None = None
        self._started = time.monotonic()
        self._heartbeat_task: asyncio.Task | None = None

    @property
    def ready(self) -> bool:
        return self.bot is not None and self.bot.bot_id is not None

    async def cache_reachable(self) -> bool | None:
        """PING the pronoun cache; None before the bot exists."""
        if self.bot is None:
            return None
        try:
            return await asyncio.wait_for(self.bot.cache.ping(), CACHE_PING_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning(f"Cache did not answer PING within {CACHE_PING_TIMEOUT}s")
            return False

    def lookup_stats(self) -> dict[str, int]:
        if self.bot is None:
            return {}
        return self.bot.resolver.stats.as_dict()

    async def handle_health(self, request: web.Request) -> web.Response:
        if not self.ready:
            return web.json_response({"status": "starting", "ready": False, "cache": None})

        reachable = await self.cache_reachable()
        return web.json_response(
            {
                "status": "healthy" if reachable else "degraded",
                "ready": True,
                "cache": "ok" if reachable else "unreachable",
            }
        )

    async def handle_status(self, request: web.Request) -> web.Response:
        bot = self.bot
        return web.json_response(
            {
                "bot_id": bot.bot_id if bot else None,
                "uptime_seconds": int(time.monotonic() - self._started),
                "joined_channels": len(bot.joined_channels) if bot else 0,
                "cache": {
                    "backend": bot.cache.name if bot else None,
                    "reachable": await self.cache_reachable(),
                },
                "lookups": self.lookup_stats(),
            }
        )

    async def _heartbeat(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            stats = self.lookup_stats()
            logger.info(
                f"Heartbeat: channels={len(self.bot.joined_channels) if self.bot else 0} "
                f"hits={stats.get('cache_hits', 0)} misses={stats.get('cache_misses', 0)} "
                f"not_found={stats.get('not_found', 0)}"
            )

    async def start(self) -> None:
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        try:
            await web.TCPSite(self.runner, self.host, self.port).start()
        except OSError:
            logger.exception(f"Could not bind health server to {self.host}:{self.port}")
            await self.runner.cleanup()
            self.runner = None
            raise

        self._heartbeat_task = asyncio.create_task(self._heartbeat())
        logger.info(f"Health server listening on {self.host}:{self.port} (/health, /status)")

    async def stop(self) -> None:
        task, self._heartbeat_task = self._heartbeat_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self.runner is not None:
            runner, self.runner = self.runner, None
            await runner.cleanup()
            logger.info("Health server stopped")
