"""Twitch Bot class — lifecycle, token storage and channel joins."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import twitchio
from twitchio import eventsub
from twitchio.ext import commands

from pronounbot.core.config import (
    BOT_SCOPES,
    BROADCASTER_SCOPES,
    COMPONENTS,
    PronounBotSettings,
    oauth_url,
)
from pronounbot.core.notifier import TwitchNotifier
from pronounbot.core.subscriptions import get_channel_subscriptions
from pronounbot.shared.cache import CacheStore
from pronounbot.shared.commands import ChannelJoin, ChatUser, PronounLookup
from pronounbot.shared.errors import TransportFault
from pronounbot.shared.providers import create_provider_chain
from pronounbot.shared.repositories.channel import ChannelRepository
from pronounbot.shared.resolver import PronounResolver

LOGGER: logging.Logger = logging.getLogger("Bot")


class Bot(commands.AutoBot):
    def __init__(
        self,
        *,
        settings: PronounBotSettings,
        channels: ChannelRepository,
        cache: CacheStore,
        http_client: httpx.AsyncClient,
        subs: list[eventsub.SubscriptionPayload],
    ) -> None:
        self.settings = settings
        self.channels = channels
        self.cache = cache
        self.http_client = http_client
        self._tokens_file = Path(settings.tokens_file)
        self._bot_id = settings.bot_id
        self._joined_channels: set[str] = set()

        self.notifier = TwitchNotifier(self, settings.bot_id)
        self.resolver = PronounResolver(
            cache,
            create_provider_chain(
                http_client,
                pronoundb_url=settings.pronoundb_url,
                alejo_url=settings.alejo_url,
            ),
            self.notifier,
            expire=settings.cache_ttl,
            registry_url=settings.registry_url,
        )
        self.pronoun_lookup = PronounLookup(self.resolver, self.fetch_chat_user, self.notifier)
        self.channel_join = ChannelJoin(channels, self.join_channel, self.notifier)

        init_kwargs: dict = dict(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            bot_id=settings.bot_id,
            owner_id=settings.owner_id or None,
            prefix="!",
            subscriptions=subs,
            force_subscribe=True,
        )
        if settings.conduit_id:
            init_kwargs["conduit_id"] = settings.conduit_id

        super().__init__(**init_kwargs)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def setup_hook(self) -> None:
        for module_name in COMPONENTS:
            try:
                await self.load_module(module_name)
            except Exception as e:
                LOGGER.error(f"Failed to load component {module_name}: {e}")

    async def close(self, **options) -> None:
        try:
            await self.http_client.aclose()
            await self.cache.close()
        except Exception as e:
            LOGGER.warning(f"Error releasing resources: {e}")
        await super().close(**options)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def event_ready(self) -> None:
        LOGGER.info("Successfully logged in as: %s", self.bot_id)

    async def event_eventsub_ready(self) -> None:
        LOGGER.info("EventSub is ready to receive notifications")

    async def event_eventsub_error(self, error: Exception) -> None:
        LOGGER.error(f"EventSub error: {error}")

    async def event_oauth_authorized(
        self, payload: twitchio.authentication.UserTokenPayload
    ) -> None:
        await self.add_token(payload.access_token, payload.refresh_token)

        if payload.user_id == self.bot_id:
            LOGGER.info("Bot account authorized")
        elif payload.user_id:
            LOGGER.info(f"User authorized: {payload.user_id}")

    async def event_message(self, payload: twitchio.ChatMessage) -> None:
        if payload.broadcaster:
            LOGGER.debug(f"[{payload.chatter.name}#{payload.broadcaster.name}]: {payload.text}")
        else:
            LOGGER.debug(f"[{payload.chatter.name}]: {payload.text}")

        # "!PN name" -> "!pn name"
        if payload.text and payload.text.startswith("!"):
            parts = payload.text.split(maxsplit=1)
            if parts:
                parts[0] = parts[0].lower()
                payload.text = " ".join(parts)

        await super().event_message(payload)

    # ------------------------------------------------------------------
    # Token management
    # ------------------------------------------------------------------

    async def load_tokens(self, path: str | None = None) -> None:
        token_path = Path(path) if path else self._tokens_file
        if not token_path.exists():
            LOGGER.warning(f"No token file at {token_path}; authorize the bot account at:")
            LOGGER.warning(oauth_url(self.settings.client_id, BOT_SCOPES))
            LOGGER.warning("Broadcasters can add the bot to their channel at:")
            LOGGER.warning(oauth_url(self.settings.client_id, BROADCASTER_SCOPES))
            return
        await super().load_tokens(str(token_path))

    async def save_tokens(self, path: str | None = None) -> None:
        token_path = Path(path) if path else self._tokens_file
        token_path.parent.mkdir(parents=True, exist_ok=True)
        await super().save_tokens(str(token_path))
        LOGGER.info(f"Saved tokens to {token_path}")

    # ------------------------------------------------------------------
    # Users & channels
    # ------------------------------------------------------------------

    async def fetch_chat_user(self, login: str) -> ChatUser | None:
        users = await self.fetch_users(logins=[login])
        if not users:
            return None
        user = users[0]
        name = user.name or login
        return ChatUser(id=str(user.id), name=name, display_name=user.display_name or name)

    async def join_channel(self, broadcaster_user_id: str) -> None:
        """Subscribe to a channel's chat. Already-existing subscriptions are fine."""
        subs = get_channel_subscriptions(broadcaster_user_id, self._bot_id)
        resp = await self.multi_subscribe(subs)
        if resp.errors:
            non_conflict = [
                e for e in resp.errors if "409" not in str(e) and "already exists" not in str(e)
            ]
            if non_conflict:
                raise TransportFault(f"Subscription errors: {non_conflict}")

        self._joined_channels.add(broadcaster_user_id)
        LOGGER.info(f"Subscribed to chat for channel: {broadcaster_user_id}")

    def mark_joined(self, channel_ids: list[str]) -> None:
        self._joined_channels.update(channel_ids)

    @property
    def joined_channels(self) -> set[str]:
        return set(self._joined_channels)
