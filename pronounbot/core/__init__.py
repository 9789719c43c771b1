"""Core modules for the Twitch bot."""

from .config import (
    BOT_SCOPES,
    BROADCASTER_SCOPES,
    COMPONENTS,
    get_settings,
    oauth_url,
    validate_env_vars,
)
from .logging import setup_logging

__all__ = [
    # Settings
    "get_settings",
    "validate_env_vars",
    # Constants
    "COMPONENTS",
    "BOT_SCOPES",
    "BROADCASTER_SCOPES",
    # Setup functions
    "oauth_url",
    "setup_logging",
]
