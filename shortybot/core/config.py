"""ShortyBot configuration"""

import logging
from functools import lru_cache
from pathlib import Path
from urllib.parse import quote

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# === Path Configuration ===
PACKAGE_DIR = Path(__file__).parent.parent
ROOT_DIR = PACKAGE_DIR.parent

BOT_SCOPES = [
    # Core bot functionality
    "user:bot",  # Bot identifier
    "user:read:chat",  # Read chat messages
    "user:write:chat",  # Send chat messages
    # Moderation (requires bot to be mod in channel)
    "moderator:read:chatters",  # !thanos chatter list
    "moderator:manage:banned_users",  # !thanos timeouts
]

BROADCASTER_SCOPES = [
    "channel:bot",  # Allow bot to join channel
    "channel:manage:broadcast",  # !title and game presets
    "channel:manage:predictions",  # !prediction, !cancel
    "channel:manage:polls",  # !poll, !cancel
    "clips:edit",  # !clip
]


class ShortyBotSettings(BaseSettings):
    """ShortyBot settings"""

    model_config = SettingsConfigDict(
        env_file=ROOT_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Twitch OAuth
    client_id: str = Field(..., description="Twitch OAuth Client ID")
    client_secret: str = Field(..., description="Twitch OAuth Client Secret")

    # Bot Configuration
    bot_id: str = Field(..., description="Bot User ID")
    owner_id: str = Field(..., description="Broadcaster User ID")
    channel_name: str = Field(..., description="Broadcaster login the bot serves")
    oauth_redirect_uri: str = Field(
        default="http://localhost:4343/oauth/callback", description="OAuth redirect URI"
    )

    # Database
    database_url: str = Field(..., description="PostgreSQL database URL")

    # Shoutouts
    exempt_chatters: list[str] = Field(
        default_factory=list, description="Extra logins never shouted out or snapped"
    )
    skip_present_chatters: bool = Field(
        default=False, description="Treat chatters present at startup as already greeted"
    )

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL starts with postgresql://"""
        if not v.startswith("postgresql://"):
            raise ValueError("DATABASE_URL must start with 'postgresql://'")
        return v

    @field_validator("channel_name")
    @classmethod
    def normalize_channel_name(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("exempt_chatters")
    @classmethod
    def normalize_exempt_chatters(cls, v: list[str]) -> list[str]:
        return [name.strip().lower() for name in v if name.strip()]

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
def get_settings() -> ShortyBotSettings:
    """Get cached settings instance"""
    return ShortyBotSettings()  # type: ignore[call-arg]


def validate_env_vars() -> None:
    """Validate required environment variables, logging the failure before raising."""
    try:
        get_settings()
        logger.info("All required environment variables validated successfully")
    except Exception as e:
        bot_logger = logging.getLogger("Bot")
        bot_logger.error(f"Environment validation failed: {e}")
        raise ValueError(str(e)) from e


def oauth_url(client_id: str, redirect_uri: str, scopes: list[str]) -> str:
    """Authorization URL a Twitch account opens to grant ``scopes`` to the bot."""
    scope_param = "+".join(scope.replace(":", "%3A") for scope in scopes)
    return (
        f"https://id.twitch.tv/oauth2/authorize?client_id={client_id}"
        f"&redirect_uri={quote(redirect_uri, safe='')}&response_type=code&scope={scope_param}"
    )
