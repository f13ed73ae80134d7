"""Command orchestrator: one handler per chat command plus the chat, raid and end events.

The orchestrator owns the engagement session and the shoutout tracker. It
talks to Twitch only through an injected ``ControlSurface`` and answers the
invoker through ``InvocationContext.reply``, so it can be driven without a
live connection.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterable

from .constants import SNAP_TIMEOUT_SECONDS, clip_edit_url, random_quote
from .control_surface import Chatter, ControlSurface
from .engagement import (
    POLL_CHANNEL_POINTS_PER_VOTE,
    POLL_CHOICES,
    POLL_DURATION_SECONDS,
    POLL_TITLE,
    PREDICTION_AUTO_LOCK_SECONDS,
    PREDICTION_OUTCOMES,
    PREDICTION_TITLE,
    EngagementSession,
    Prediction,
)
from .errors import CommandValidationError, ErrorTranslator
from .guards import InvocationContext, is_broadcaster, is_moderator
from .shoutouts import ShoutoutTracker

LOGGER = logging.getLogger("Orchestrator")

STREAM_INFO_UPDATED = "Stream info updated!"
NOTHING_TO_CANCEL = (
    "Nothing to cancel! If a prediction or poll was made without ShortyBot, "
    "please cancel it manually."
)
POLL_ALREADY_RUNNING = "A poll is already running! Use !cancel to end it."

DENY_PREDICTION = "Only the broadcaster / mods can make and resolve predictions!"
DENY_POLL = "Only the broadcaster / mods can make polls ;)"
DENY_CANCEL = "Only the broadcaster / mods can cancel!"
DENY_RESET = "Only the broadcaster can reset!"
DENY_THANOS = "Only the broadcaster can snap ;)"


def select_snap_targets(
    chatters: Iterable[Chatter], exempt: Iterable[str], rng: random.Random | None = None
) -> list[Chatter]:
    """Shuffle the non-exempt chatters and keep the first half (rounded down)."""
    exempt_names = {name.lower() for name in exempt}
    eligible = [c for c in chatters if c.user_name.lower() not in exempt_names]
    (rng or random).shuffle(eligible)
    return eligible[: len(eligible) // 2]


class CommandOrchestrator:
    def __init__(
        self,
        surface: ControlSurface,
        tracker: ShoutoutTracker,
        *,
        channel_name: str,
        bot_name: str = "",
        rng: random.Random | None = None,
    ) -> None:
        self.surface = surface
        self.tracker = tracker
        self.session = EngagementSession()
        self.errors = ErrorTranslator(surface.reply)
        self.channel_name = channel_name
        self.bot_name = bot_name.lower()
        self._rng = rng or random.Random()

    async def initialize(self, *, skip_present_chatters: bool = False) -> None:
        """Warm up the shoutout tracker. Must finish before chat is processed."""
        greeted: list[str] = []
        if skip_present_chatters:
            try:
                greeted = [c.user_name for c in await self.surface.fetch_chatters()]
            except Exception as e:
                LOGGER.warning(f"Could not load present chatters, starting empty: {e}")
        self.tracker.initialize(greeted)

    async def _reply(self, ctx: InvocationContext, text: str) -> None:
        try:
            await ctx.reply(text)
        except Exception as e:
            LOGGER.error(f"Reply to {ctx.user_name} failed: {type(e).__name__}: {e}")

    async def _deny(self, ctx: InvocationContext, text: str) -> None:
        LOGGER.debug(
            f"Denied {ctx.user_name} "
            f"(broadcaster={ctx.is_broadcaster}, mod={ctx.is_moderator})"
        )
        await self._reply(ctx, text)

    # ------------------------------------------------------------------
    # Stream metadata
    # ------------------------------------------------------------------

    async def title(self, ctx: InvocationContext) -> None:
        text = " ".join(ctx.args).strip()
        if not text:
            return

        try:
            await self.surface.update_channel_info(title=text)
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        LOGGER.info(f"{ctx.user_name} set title: {text}")
        await self._reply(ctx, STREAM_INFO_UPDATED)

    async def set_game(self, ctx: InvocationContext, game_id: str) -> None:
        try:
            await self.surface.update_channel_info(game_id=game_id)
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        LOGGER.info(f"{ctx.user_name} set game: {game_id}")
        await self._reply(ctx, STREAM_INFO_UPDATED)

    async def clip(self, ctx: InvocationContext) -> None:
        try:
            clip_id = await self.surface.create_clip()
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        await self._reply(ctx, f"You may edit the clip here: {clip_edit_url(clip_id)}")

    # ------------------------------------------------------------------
    # Predictions and polls
    # ------------------------------------------------------------------

    async def prediction(self, ctx: InvocationContext) -> None:
        """Create a prediction, or resolve the active one with ``args[0]`` as outcome."""
        if not is_moderator(ctx):
            await self._deny(ctx, DENY_PREDICTION)
            return

        prediction = self.session.prediction
        if prediction is None:
            await self._create_prediction(ctx)
        else:
            await self._resolve_prediction(ctx, prediction)

    async def _create_prediction(self, ctx: InvocationContext) -> None:
        try:
            prediction = await self.surface.create_prediction(
                title=PREDICTION_TITLE,
                outcomes=PREDICTION_OUTCOMES,
                auto_lock_after=PREDICTION_AUTO_LOCK_SECONDS,
            )
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        self.session.set_prediction(prediction)

    async def _resolve_prediction(self, ctx: InvocationContext, prediction: Prediction) -> None:
        try:
            outcome = self.session.select_outcome(ctx.args)
        except CommandValidationError as e:
            LOGGER.info(f"Rejected prediction args from {ctx.user_name}: {list(ctx.args)}")
            await self._reply(ctx, e.reply)
            return

        try:
            await self.surface.resolve_prediction(prediction.id, outcome.id)
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        if self.session.prediction is prediction:
            self.session.clear_prediction()
        await self._reply(ctx, f"Prediction resolved: {outcome.title}!")

    async def poll(self, ctx: InvocationContext) -> None:
        if not is_moderator(ctx):
            await self._deny(ctx, DENY_POLL)
            return

        if self.session.has_poll:
            await self._reply(ctx, POLL_ALREADY_RUNNING)
            return

        try:
            poll = await self.surface.create_poll(
                title=POLL_TITLE,
                choices=POLL_CHOICES,
                duration=POLL_DURATION_SECONDS,
                channel_points_per_vote=POLL_CHANNEL_POINTS_PER_VOTE,
            )
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        self.session.set_poll(poll)

    async def cancel(self, ctx: InvocationContext) -> None:
        """Cancel the active prediction and end the active poll, whichever exist."""
        if not is_moderator(ctx):
            await self._deny(ctx, DENY_CANCEL)
            return

        if not (self.session.has_prediction or self.session.has_poll):
            await self._reply(ctx, NOTHING_TO_CANCEL)
            return

        prediction = self.session.prediction
        poll = self.session.poll

        if prediction is not None:
            try:
                await self.surface.cancel_prediction(prediction.id)
            except Exception as e:
                await self.errors.report(e, ctx.message_id)
            else:
                if self.session.prediction is prediction:
                    self.session.clear_prediction()
                await self._reply(ctx, "Prediction cancelled!")

        if poll is not None:
            try:
                await self.surface.end_poll(poll.id)
            except Exception as e:
                await self.errors.report(e, ctx.message_id)
            else:
                if self.session.poll is poll:
                    self.session.clear_poll()
                await self._reply(ctx, "Poll cancelled!")

    def on_prediction_ended(self, prediction_id: str) -> None:
        """Platform reports a prediction ended (resolved or cancelled elsewhere)."""
        if self.session.prediction is not None and self.session.prediction.id == prediction_id:
            self.session.clear_prediction()

    def on_poll_ended(self, poll_id: str) -> None:
        """Platform reports a poll ended (expired or terminated elsewhere)."""
        if self.session.poll is not None and self.session.poll.id == poll_id:
            self.session.clear_poll()

    # ------------------------------------------------------------------
    # Shoutouts
    # ------------------------------------------------------------------

    async def reset(self, ctx: InvocationContext) -> None:
        if not is_broadcaster(ctx):
            await self._deny(ctx, DENY_RESET)
            return

        self.tracker.reset()
        await self._reply(ctx, "Shoutout reset triggered!")

    def on_join(self, channel_name: str, user_name: str) -> None:
        LOGGER.info(f"{user_name} has joined chat! (#{channel_name})")

    async def on_message(self, user_name: str) -> None:
        """Shout out a chatter the first time they talk this session."""
        if not user_name or user_name.lower() == self.bot_name:
            return

        if self.tracker.observe(user_name):
            self.on_join(self.channel_name, user_name)

        if not self.tracker.should_shout_out(user_name):
            return

        try:
            await self.surface.say(f"!so {user_name}")
        except Exception as e:
            LOGGER.warning(f"Shoutout for {user_name} failed: {e}")
            return

        self.tracker.mark_shouted_out(user_name)
        LOGGER.info(f"Shouted out {user_name}")

    async def on_raid(self, raider: str, viewer_count: int) -> None:
        LOGGER.info(f"Raid from {raider} with {viewer_count} viewers")
        for message in (
            f"HOLY THANK YOU @{raider} for the BIG RAID of {viewer_count}!",
            f"!so @{raider}",
        ):
            try:
                await self.surface.say(message)
            except Exception as e:
                LOGGER.warning(f"Raid message failed ({message!r}): {e}")

    # ------------------------------------------------------------------
    # Thanos
    # ------------------------------------------------------------------

    async def thanos(self, ctx: InvocationContext) -> None:
        """Time out a random half of the chatters, then quote the snap."""
        if not is_broadcaster(ctx):
            await self._deny(ctx, DENY_THANOS)
            return

        try:
            chatters = await self.surface.fetch_chatters()
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
            return

        targets = select_snap_targets(chatters, self.tracker.exempt, self._rng)
        if not targets:
            LOGGER.info(f"Snap skipped: no eligible chatters among {len(chatters)}")
            return

        results = await asyncio.gather(
            *(self.surface.timeout(c, SNAP_TIMEOUT_SECONDS, "Snapped") for c in targets),
            return_exceptions=True,
        )
        failed = 0
        for chatter, result in zip(targets, results):
            if isinstance(result, BaseException):
                failed += 1
                LOGGER.warning(f"Snap timeout for {chatter.user_name} failed: {result}")
        LOGGER.info(f"Snapped {len(targets) - failed}/{len(targets)} chatters")

        try:
            await self.surface.say(random_quote())
        except Exception as e:
            await self.errors.report(e, ctx.message_id)
