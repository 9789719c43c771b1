"""Pronoun bot configuration"""

import logging
from functools import lru_cache
from pathlib import Path
from urllib.parse import quote

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# === Path Configuration ===
PACKAGE_DIR = Path(__file__).parent.parent
PROJECT_DIR = PACKAGE_DIR.parent
DATA_DIR = PROJECT_DIR / "data"

COMPONENTS = [
    "pronounbot.components.pronouns",
    "pronounbot.components.join",
]

BOT_SCOPES = [
    "user:bot",  # Bot identifier
    "user:read:chat",  # Read chat messages
    "user:write:chat",  # Send chat messages
    "user:read:whispers",  # Receive !join
    "user:manage:whispers",  # Send whispers
]

BROADCASTER_SCOPES = [
    "channel:bot",  # Allow bot to join channel
]

OAUTH_REDIRECT_URI = "http://localhost:4343/oauth/callback"


def oauth_url(client_id: str, scopes: list[str], redirect_uri: str = OAUTH_REDIRECT_URI) -> str:
    """Twitch authorize URL for the given scopes; the callback lands on the TwitchIO adapter."""
    scope = "+".join(s.replace(":", "%3A") for s in scopes)
    return (
        f"https://id.twitch.tv/oauth2/authorize?client_id={client_id}"
        f"&redirect_uri={quote(redirect_uri, safe='')}&response_type=code&scope={scope}"
    )


class PronounBotSettings(BaseSettings):
    """Pronoun bot settings"""

    model_config = SettingsConfigDict(
        env_file=PROJECT_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Twitch OAuth
    client_id: str = Field(..., description="Twitch OAuth Client ID")
    client_secret: str = Field(..., description="Twitch OAuth Client Secret")

    # Bot Configuration
    bot_id: str = Field(..., description="Bot User ID")
    owner_id: str = Field(default="", description="Owner User ID")

    # EventSub
    conduit_id: str = Field(default="", description="Twitch EventSub Conduit ID")

    # Cache
    redis_url: str = Field(default="", description="Redis URL; empty uses the in-process cache")
    cache_ttl: int = Field(default=86400, gt=0, description="Seconds a resolved pronoun is cached")

    # Storage
    channels_file: Path = Field(default=DATA_DIR / "config.json", description="Joined channel list")
    tokens_file: Path = Field(default=DATA_DIR / "tokens.json", description="OAuth token store")

    # Lookup providers
    pronoundb_url: str = Field(default="https://pronoundb.org/api/v1/lookup")
    alejo_url: str = Field(default="https://pronouns.alejo.io/api/users")
    registry_url: str = Field(
        default="https://pronoundb.org/", description="Where users are sent to set pronouns"
    )
    http_timeout: float = Field(default=10.0, gt=0, description="Provider request timeout")

    # Health server (Render sets PORT)
    health_port: int = Field(default=4344, validation_alias="PORT")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """Validate redis URL scheme when set"""
        if v and not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must start with 'redis://', 'rediss://' or 'unix://'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


@lru_cache
def get_settings() -> PronounBotSettings:
    """Get cached settings instance"""
    return PronounBotSettings()  # type: ignore[call-arg]


def validate_env_vars() -> None:
    """Validate required environment variables, logging any failure."""
    try:
        get_settings()
        logger.info("All required environment variables validated successfully")
    except Exception as e:
        bot_logger = logging.getLogger("Bot")
        bot_logger.error(f"Environment validation failed: {e}")
        raise ValueError(str(e)) from e
