"""Twitch control surface: the calls the commands make against the platform.

``ControlSurface`` is what the orchestrator depends on. ``TwitchControlSurface``
implements it on top of a twitchio client and converts twitchio's exceptions
into ``PlatformError`` at this boundary, so nothing above it has to know
about twitchio.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import twitchio

from .engagement import Outcome, Poll, Prediction
from .errors import OtherError, StructuredApiError

if TYPE_CHECKING:
    from twitchio.ext import commands

LOGGER = logging.getLogger("ControlSurface")


@dataclass(frozen=True)
class Chatter:
    user_id: str
    user_name: str


class ControlSurface(Protocol):
    async def update_channel_info(
        self, *, title: str | None = None, game_id: str | None = None
    ) -> None: ...

    async def create_prediction(
        self, *, title: str, outcomes: Sequence[str], auto_lock_after: int
    ) -> Prediction: ...

    async def resolve_prediction(self, prediction_id: str, outcome_id: str) -> None: ...

    async def cancel_prediction(self, prediction_id: str) -> None: ...

    async def create_poll(
        self,
        *,
        title: str,
        choices: Sequence[str],
        duration: int,
        channel_points_per_vote: int,
    ) -> Poll: ...

    async def end_poll(self, poll_id: str) -> None: ...

    async def create_clip(self) -> str: ...

    async def fetch_chatters(self) -> list[Chatter]: ...

    async def timeout(self, chatter: Chatter, duration: int, reason: str) -> None: ...

    async def say(self, message: str) -> None: ...

    async def reply(self, message: str, message_id: str) -> None: ...


@contextmanager
def platform_errors(action: str) -> Iterator[None]:
    """Re-raise twitchio failures as ``PlatformError`` variants."""
    try:
        yield
    except twitchio.HTTPException as e:
        LOGGER.debug(f"{action} failed with HTTP {e.status}")
        raise StructuredApiError(e.status, e.extra) from e
    except twitchio.TwitchioException as e:
        LOGGER.debug(f"{action} failed: {e}")
        raise OtherError(str(e) or type(e).__name__) from e


class TwitchControlSurface:
    """Control surface for the broadcaster's channel.

    Channel, prediction, poll and clip calls use the broadcaster's token;
    chat messages, chatter listing and timeouts go out as the bot, which
    must be a moderator in the channel.
    """

    def __init__(self, bot: commands.Bot, broadcaster_id: str) -> None:
        self.bot = bot
        self.broadcaster = bot.create_partialuser(user_id=broadcaster_id)

    @property
    def bot_id(self) -> str:
        return self.bot.bot_id  # type: ignore[return-value]

    async def update_channel_info(
        self, *, title: str | None = None, game_id: str | None = None
    ) -> None:
        with platform_errors("update_channel_info"):
            await self.broadcaster.modify_channel(title=title, game_id=game_id)

    async def create_prediction(
        self, *, title: str, outcomes: Sequence[str], auto_lock_after: int
    ) -> Prediction:
        with platform_errors("create_prediction"):
            created = await self.broadcaster.create_prediction(
                title=title,
                outcomes=list(outcomes),
                prediction_window=auto_lock_after,
            )
        return Prediction(
            id=created.id,
            title=created.title or title,
            outcomes=tuple(
                Outcome(id=o.id, title=o.title, index=i)
                for i, o in enumerate(created.outcomes, start=1)
            ),
            auto_lock_after=auto_lock_after,
        )

    async def resolve_prediction(self, prediction_id: str, outcome_id: str) -> None:
        with platform_errors("resolve_prediction"):
            await self.broadcaster.end_prediction(
                id=prediction_id, status="RESOLVED", winning_outcome_id=outcome_id
            )

    async def cancel_prediction(self, prediction_id: str) -> None:
        with platform_errors("cancel_prediction"):
            await self.broadcaster.end_prediction(id=prediction_id, status="CANCELED")

    async def create_poll(
        self,
        *,
        title: str,
        choices: Sequence[str],
        duration: int,
        channel_points_per_vote: int,
    ) -> Poll:
        with platform_errors("create_poll"):
            created = await self.broadcaster.create_poll(
                title=title,
                choices=list(choices),
                duration=duration,
                channel_points_voting_enabled=True,
                channel_points_per_vote=channel_points_per_vote,
            )
        return Poll(
            id=created.id,
            title=created.title or title,
            choices=tuple(choice.title for choice in created.choices),
            duration=duration,
            channel_points_per_vote=channel_points_per_vote,
        )

    async def end_poll(self, poll_id: str) -> None:
        # TERMINATED ends the poll early and keeps the results visible
        with platform_errors("end_poll"):
            await self.broadcaster.end_poll(id=poll_id, status="TERMINATED")

    async def create_clip(self) -> str:
        with platform_errors("create_clip"):
            clip = await self.broadcaster.create_clip(
                token_for=self.broadcaster.id, has_delay=False
            )
        return clip.id

    async def fetch_chatters(self) -> list[Chatter]:
        with platform_errors("fetch_chatters"):
            result = await self.broadcaster.fetch_chatters(
                moderator=self.bot_id, token_for=self.bot_id, first=1000
            )
            return [
                Chatter(user_id=user.id, user_name=user.name or "")
                async for user in result.users
            ]

    async def timeout(self, chatter: Chatter, duration: int, reason: str) -> None:
        with platform_errors("timeout"):
            await self.broadcaster.timeout_user(
                moderator=self.bot_id,
                user=chatter.user_id,
                duration=duration,
                reason=reason,
                token_for=self.bot_id,
            )

    async def say(self, message: str) -> None:
        with platform_errors("say"):
            await self.broadcaster.send_message(
                message=message,
                sender=self.bot_id,
                token_for=self.bot_id,
            )

    async def reply(self, message: str, message_id: str) -> None:
        with platform_errors("reply"):
            await self.broadcaster.send_message(
                message=message,
                sender=self.bot_id,
                token_for=self.bot_id,
                reply_to_message_id=message_id,
            )
