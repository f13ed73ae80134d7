"""Error kinds raised by command handlers and the translator that reports them in chat."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

LOGGER = logging.getLogger("ErrorTranslator")

GENERIC_ERROR_REPLY = "An error occurred"


class CommandValidationError(Exception):
    """Command arguments rejected locally, before any platform call."""

    def __init__(self, reply: str) -> None:
        super().__init__(reply)
        self.reply = reply


class InvalidOutcomeError(CommandValidationError):
    """Prediction outcome selector is missing, non-numeric, or out of range."""

    def __init__(self, raw: str | None, outcome_count: int) -> None:
        choices = " or ".join(f"!prediction {i}" for i in range(1, outcome_count + 1))
        super().__init__(f"Invalid outcome! Use {choices}")
        self.raw = raw
        self.outcome_count = outcome_count


class PlatformError(Exception):
    """A control-surface call failed."""


class StructuredApiError(PlatformError):
    """The platform answered with an HTTP error status and a body."""

    def __init__(self, status_code: int, body: dict[str, Any] | str | None) -> None:
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body

    @property
    def message(self) -> str | None:
        """The ``message`` field of the error body, if there is one."""
        body = self.body
        if isinstance(body, str):
            try:
                body = json.loads(body)
            except ValueError:
                return None
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message:
                return message
        return None


class OtherError(PlatformError):
    """The call failed without a structured HTTP payload."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def translate_error(error: BaseException) -> str:
    """Return the chat reply for a failed control-surface call."""
    if isinstance(error, StructuredApiError) and error.message:
        return error.message
    return GENERIC_ERROR_REPLY


class ErrorTranslator:
    """Single reporting path for failed control-surface calls.

    Every error is logged; the reply goes out against the message that
    triggered the command.
    """

    def __init__(self, reply: Callable[[str, str], Awaitable[None]]) -> None:
        self._reply = reply

    async def report(self, error: BaseException, message_id: str) -> None:
        LOGGER.error(f"Command failed: {type(error).__name__}: {error}")
        text = translate_error(error)
        try:
            await self._reply(text, message_id)
        except Exception as e:
            LOGGER.error(f"Failed to send error reply: {type(e).__name__}: {e}")
