"""Persistence for the pronoun bot."""

from .channel import ChannelRepository

__all__ = ["ChannelRepository"]
