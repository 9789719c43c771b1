"""Twitch chat bot that looks up viewers' pronouns."""

__version__ = "0.1.0"
