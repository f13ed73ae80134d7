"""Prediction and poll state for the channel: at most one of each at a time."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import InvalidOutcomeError

LOGGER = logging.getLogger("Engagement")

PREDICTION_TITLE = "Win the next game?"
PREDICTION_OUTCOMES = ("Yes", "No")
PREDICTION_AUTO_LOCK_SECONDS = 60

POLL_TITLE = "Whose fault is it if this poll doesn't work?"
POLL_CHOICES = ("Rick", "Faded", "QQobes33")
POLL_DURATION_SECONDS = 60
POLL_CHANNEL_POINTS_PER_VOTE = 10


@dataclass(frozen=True)
class Outcome:
    id: str
    title: str
    index: int  # 1-based, as typed in chat


@dataclass(frozen=True)
class Prediction:
    id: str
    title: str
    outcomes: tuple[Outcome, ...]
    auto_lock_after: int


@dataclass(frozen=True)
class Poll:
    id: str
    title: str
    choices: tuple[str, ...]
    duration: int
    channel_points_per_vote: int


class EngagementSession:
    """Holds the active prediction and poll.

    No I/O happens here. Callers set a slot only after the platform confirmed
    the creation, and clear it only after the platform confirmed the end.
    """

    def __init__(self) -> None:
        self.prediction: Prediction | None = None
        self.poll: Poll | None = None

    @property
    def has_prediction(self) -> bool:
        return self.prediction is not None

    @property
    def has_poll(self) -> bool:
        return self.poll is not None

    def select_outcome(self, args: Sequence[str]) -> Outcome:
        """Resolve the 1-based outcome index in ``args[0]`` against the active prediction.

        Raises:
            InvalidOutcomeError: missing, non-numeric, or out-of-range index.
            RuntimeError: no prediction is active.
        """
        if self.prediction is None:
            raise RuntimeError("No active prediction to resolve")

        outcomes = self.prediction.outcomes
        raw = args[0].strip() if args else None
        if not raw:
            raise InvalidOutcomeError(raw, len(outcomes))

        try:
            index = int(raw)
        except ValueError:
            raise InvalidOutcomeError(raw, len(outcomes)) from None

        if index < 1 or index > len(outcomes):
            raise InvalidOutcomeError(raw, len(outcomes))

        return outcomes[index - 1]

    def set_prediction(self, prediction: Prediction) -> None:
        self.prediction = prediction
        LOGGER.info(f"Prediction active: {prediction.title} ({prediction.id})")

    def clear_prediction(self) -> None:
        if self.prediction is not None:
            LOGGER.info(f"Prediction cleared: {self.prediction.id}")
        self.prediction = None

    def set_poll(self, poll: Poll) -> None:
        self.poll = poll
        LOGGER.info(f"Poll active: {poll.title} ({poll.id})")

    def clear_poll(self) -> None:
        if self.poll is not None:
            LOGGER.info(f"Poll cleared: {self.poll.id}")
        self.poll = None
