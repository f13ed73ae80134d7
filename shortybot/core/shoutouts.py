"""Per-session shoutout bookkeeping: who has already been greeted with !so."""

from __future__ import annotations

import logging
from collections.abc import Iterable

LOGGER = logging.getLogger("Shoutouts")


class ShoutoutTracker:
    """Maps chatter login -> whether they were shouted out since the last reset.

    Logins are compared lower-cased. A chatter is shouted out at most once
    between ``initialize``/``reset`` calls. ``should_shout_out`` only answers
    the question; the caller marks the chatter once the shoutout was posted.
    """

    def __init__(self, exempt: Iterable[str] = ()) -> None:
        self._exempt = frozenset(name.lower() for name in exempt)
        self._records: dict[str, bool] = {}
        self._initialized = False

    @property
    def exempt(self) -> frozenset[str]:
        return self._exempt

    def initialize(self, already_greeted: Iterable[str] = ()) -> None:
        """Start a fresh session. ``already_greeted`` logins count as shouted out."""
        self._records = {name.lower(): True for name in already_greeted}
        self._initialized = True
        LOGGER.info(f"Shoutout tracker ready ({len(self._records)} pre-greeted)")

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("ShoutoutTracker used before initialize()")

    def is_exempt(self, login: str) -> bool:
        return login.lower() in self._exempt

    def observe(self, login: str) -> bool:
        """Record that ``login`` was seen. Returns True on first sight."""
        self._ensure_initialized()
        key = login.lower()
        if key in self._records:
            return False
        self._records[key] = False
        return True

    def should_shout_out(self, login: str) -> bool:
        self._ensure_initialized()
        if self.is_exempt(login):
            return False
        return not self._records.get(login.lower(), False)

    def mark_shouted_out(self, login: str) -> None:
        self._ensure_initialized()
        self._records[login.lower()] = True

    def reset(self) -> None:
        self._ensure_initialized()
        count = len(self._records)
        self._records.clear()
        LOGGER.info(f"Shoutout tracker reset ({count} records cleared)")
