"""Data model for the persisted channel list."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ChannelList:
    """Channels the bot has joined, in join order. Duplicates are kept."""

    users: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: object) -> ChannelList:
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        users = data.get("users", [])
        if not isinstance(users, list):
            raise ValueError("'users' must be a list")
        return cls(users=[str(u) for u in users])

    def to_dict(self) -> dict[str, list[str]]:
        return {"users": list(self.users)}

    def distinct(self) -> list[str]:
        """Channel ids in first-seen order without repeats."""
        return list(dict.fromkeys(self.users))
