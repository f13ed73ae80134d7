from __future__ import annotations

import random
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

ROOT = str(Path(__file__).resolve().parents[1])
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from shortybot.core.control_surface import Chatter  # noqa: E402
from shortybot.core.engagement import Outcome, Poll, Prediction  # noqa: E402
from shortybot.core.guards import InvocationContext  # noqa: E402
from shortybot.core.orchestrator import CommandOrchestrator  # noqa: E402
from shortybot.core.shoutouts import ShoutoutTracker  # noqa: E402


class FakeControlSurface:
    """In-memory control surface recording every call.

    ``failures`` maps a method name to the exception that method raises.
    ``timeout_failures`` holds logins whose timeout raises.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, BaseException] = {}
        self.timeout_failures: set[str] = set()
        self.chatters: list[Chatter] = []
        self.said: list[str] = []
        self.replies: list[tuple[str, str]] = []
        self._next_id = 0

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.failures:
            raise self.failures[name]

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}{self._next_id}"

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def update_channel_info(
        self, *, title: str | None = None, game_id: str | None = None
    ) -> None:
        self._record("update_channel_info", title, game_id)

    async def create_prediction(
        self, *, title: str, outcomes: Sequence[str], auto_lock_after: int
    ) -> Prediction:
        self._record("create_prediction", title, tuple(outcomes), auto_lock_after)
        pid = self._new_id("p")
        return Prediction(
            id=pid,
            title=title,
            outcomes=tuple(
                Outcome(id=f"{pid}-o{i}", title=t, index=i) for i, t in enumerate(outcomes, 1)
            ),
            auto_lock_after=auto_lock_after,
        )

    async def resolve_prediction(self, prediction_id: str, outcome_id: str) -> None:
        self._record("resolve_prediction", prediction_id, outcome_id)

    async def cancel_prediction(self, prediction_id: str) -> None:
        self._record("cancel_prediction", prediction_id)

    async def create_poll(
        self,
        *,
        title: str,
        choices: Sequence[str],
        duration: int,
        channel_points_per_vote: int,
    ) -> Poll:
        self._record("create_poll", title, tuple(choices), duration, channel_points_per_vote)
        return Poll(
            id=self._new_id("poll"),
            title=title,
            choices=tuple(choices),
            duration=duration,
            channel_points_per_vote=channel_points_per_vote,
        )

    async def end_poll(self, poll_id: str) -> None:
        self._record("end_poll", poll_id)

    async def create_clip(self) -> str:
        self._record("create_clip")
        return "AwkwardHelplessSalamanderSwiftRage"

    async def fetch_chatters(self) -> list[Chatter]:
        self._record("fetch_chatters")
        return list(self.chatters)

    async def timeout(self, chatter: Chatter, duration: int, reason: str) -> None:
        self.calls.append(("timeout", (chatter.user_name, duration, reason)))
        if chatter.user_name in self.timeout_failures:
            raise RuntimeError(f"cannot time out {chatter.user_name}")

    async def say(self, message: str) -> None:
        self._record("say", message)
        self.said.append(message)

    async def reply(self, message: str, message_id: str) -> None:
        # Error replies; not counted as an API call
        self.replies.append((message, message_id))


class ReplyRecorder:
    def __init__(self) -> None:
        self.messages: list[str] = []

    async def __call__(self, text: str) -> None:
        self.messages.append(text)


@pytest.fixture
def surface() -> FakeControlSurface:
    return FakeControlSurface()


@pytest.fixture
def tracker() -> ShoutoutTracker:
    t = ShoutoutTracker({"nightbot", "shortybot"})
    t.initialize()
    return t


@pytest.fixture
def orchestrator(surface: FakeControlSurface, tracker: ShoutoutTracker) -> CommandOrchestrator:
    return CommandOrchestrator(
        surface,
        tracker,
        channel_name="faded",
        bot_name="shortybot",
        rng=random.Random(1234),
    )


@pytest.fixture
def make_ctx():
    def _make(
        *args: str,
        role: str = "moderator",
        user_name: str = "someone",
        message_id: str = "msg-1",
    ) -> tuple[InvocationContext, ReplyRecorder]:
        recorder = ReplyRecorder()
        ctx = InvocationContext(
            user_name=user_name,
            message_id=message_id,
            reply=recorder,
            args=tuple(args),
            is_broadcaster=role == "broadcaster",
            is_moderator=role == "moderator",
        )
        return ctx, recorder

    return _make
