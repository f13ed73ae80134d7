"""Core modules for ShortyBot."""

from .config import (
    BOT_SCOPES,
    BROADCASTER_SCOPES,
    get_settings,
    oauth_url,
    validate_env_vars,
)
from .engagement import EngagementSession, Outcome, Poll, Prediction
from .errors import (
    CommandValidationError,
    ErrorTranslator,
    InvalidOutcomeError,
    OtherError,
    PlatformError,
    StructuredApiError,
)
from .guards import InvocationContext, has_role, is_broadcaster, is_moderator
from .logging import setup_logging
from .shoutouts import ShoutoutTracker
from .subscriptions import get_channel_subscriptions

__all__ = [
    # Settings
    "get_settings",
    "validate_env_vars",
    "oauth_url",
    # Scope Constants
    "BOT_SCOPES",
    "BROADCASTER_SCOPES",
    # Setup functions
    "setup_logging",
    # Twitch specific
    "get_channel_subscriptions",
    # Guards
    "InvocationContext",
    "has_role",
    "is_broadcaster",
    "is_moderator",
    # Engagement state
    "EngagementSession",
    "Outcome",
    "Poll",
    "Prediction",
    "ShoutoutTracker",
    # Errors
    "CommandValidationError",
    "InvalidOutcomeError",
    "PlatformError",
    "StructuredApiError",
    "OtherError",
    "ErrorTranslator",
]
