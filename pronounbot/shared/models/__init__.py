"""Data models for the pronoun bot."""

from .channel import ChannelList
from .pronoun import LookupStatus, PronounResult, ProviderResult

__all__ = [
    "ChannelList",
    "LookupStatus",
    "PronounResult",
    "ProviderResult",
]
