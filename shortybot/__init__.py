"""ShortyBot: single-channel Twitch chat assistant."""

__version__ = "1.0.0"
