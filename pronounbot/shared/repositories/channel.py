"""Repository for the joined-channel list, persisted as a JSON file."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from ..models.channel import ChannelList

logger = logging.getLogger("Bot.Channels")


class ChannelRepository:
    """File operations for ``{"users": [...]}``.

    The file is rewritten wholesale on every change. Appends do not check for
    an existing entry.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> ChannelList:
        if not self.path.exists():
            self._write(ChannelList())
            logger.info(f"Created empty channel list at {self.path}")
        with self.path.open(encoding="utf-8") as f:
            return ChannelList.from_dict(json.load(f))

    def _write(self, channels: ChannelList) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(channels.to_dict()), encoding="utf-8")
        tmp.replace(self.path)

    async def load(self) -> ChannelList:
        """Read the channel list, creating an empty file if there is none."""
        async with self._lock:
            channels = await asyncio.to_thread(self._read)
        logger.info(f"Loaded {len(channels.users)} channels from {self.path}")
        return channels

    async def append(self, user_id: str) -> ChannelList:
        """Append a channel and persist the whole list."""
        async with self._lock:
            channels = await asyncio.to_thread(self._read)
            channels.users.append(user_id)
            await asyncio.to_thread(self._write, channels)
        logger.info(f"Added channel {user_id} to {self.path}")
        return channels
