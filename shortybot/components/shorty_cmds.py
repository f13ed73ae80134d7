"""ShortyBot chat commands and channel events.

Usage:
    !prediction [n]   Start a prediction, or resolve the running one with outcome n (mod+)
    !poll             Start the channel poll (mod+)
    !cancel           Cancel the running prediction and end the running poll (mod+)
    !clip             Clip the last moments of the stream
    !title <text>     Change the stream title
    !lol / !valorant / !tft / !ow2   Switch the stream category
    !reset            Make every chatter eligible for a shoutout again (broadcaster)
    !thanos           Time out a random half of chat (broadcaster)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import twitchio
from twitchio.ext import commands

from shortybot.core.constants import EXEMPT_CHATTERS, GAME_PRESETS
from shortybot.core.control_surface import TwitchControlSurface
from shortybot.core.guards import InvocationContext
from shortybot.core.orchestrator import CommandOrchestrator
from shortybot.core.shoutouts import ShoutoutTracker

if TYPE_CHECKING:
    from shortybot.core.bot import Bot

LOGGER = logging.getLogger("ShortyCommands")


def build_context(ctx: commands.Context, args: tuple[str, ...]) -> InvocationContext:
    chatter = ctx.chatter
    return InvocationContext(
        user_name=chatter.name or "",
        message_id=str(ctx.message.id) if ctx.message else "",
        reply=ctx.reply,
        args=args,
        is_broadcaster=bool(chatter.broadcaster),  # type: ignore[attr-defined]
        is_moderator=bool(chatter.moderator),  # type: ignore[attr-defined]
    )


class ShortyCommands(commands.Component):
    def __init__(self, bot: Bot) -> None:
        self.bot = bot
        settings = bot.settings

        bot_name = ""
        if bot.user is not None and bot.user.name:
            bot_name = bot.user.name

        exempt = set(EXEMPT_CHATTERS) | set(settings.exempt_chatters) | {settings.channel_name}
        if bot_name:
            exempt.add(bot_name.lower())

        self.orchestrator = CommandOrchestrator(
            TwitchControlSurface(bot, settings.owner_id),
            ShoutoutTracker(exempt),
            channel_name=settings.channel_name,
            bot_name=bot_name,
        )

    async def component_load(self) -> None:
        await self.orchestrator.initialize(
            skip_present_chatters=self.bot.settings.skip_present_chatters
        )
        LOGGER.info("ShortyCommands loaded")

    # ==================== Predictions / polls ====================

    @commands.command()
    async def prediction(self, ctx: commands.Context[Bot], *args: str) -> None:
        """Usage: !prediction, then !prediction 1 or !prediction 2 to resolve"""
        await self.orchestrator.prediction(build_context(ctx, args))

    @commands.command()
    async def poll(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.poll(build_context(ctx, ()))

    @commands.command()
    async def cancel(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.cancel(build_context(ctx, ()))

    # ==================== Stream ====================

    @commands.command()
    async def clip(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.clip(build_context(ctx, ()))

    @commands.command()
    async def title(self, ctx: commands.Context[Bot], *args: str) -> None:
        """Usage: !title <new stream title>"""
        await self.orchestrator.title(build_context(ctx, args))

    @commands.command()
    async def lol(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.set_game(build_context(ctx, ()), GAME_PRESETS["lol"])

    @commands.command()
    async def valorant(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.set_game(build_context(ctx, ()), GAME_PRESETS["valorant"])

    @commands.command()
    async def tft(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.set_game(build_context(ctx, ()), GAME_PRESETS["tft"])

    @commands.command()
    async def ow2(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.set_game(build_context(ctx, ()), GAME_PRESETS["ow2"])

    # ==================== Broadcaster only ====================

    @commands.command()
    async def reset(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.reset(build_context(ctx, ()))

    @commands.command()
    async def thanos(self, ctx: commands.Context[Bot]) -> None:
        await self.orchestrator.thanos(build_context(ctx, ()))

    # ==================== EventSub ====================

    @commands.Component.listener()
    async def event_message(self, payload: twitchio.ChatMessage) -> None:
        if payload.chatter.id == self.bot.bot_id:
            return
        await self.orchestrator.on_message(payload.chatter.name or "")

    @commands.Component.listener()
    async def event_raid(self, payload: twitchio.ChannelRaid) -> None:
        raider = payload.from_broadcaster
        await self.orchestrator.on_raid(raider.display_name or raider.name or "", payload.viewer_count)

    @commands.Component.listener()
    async def event_prediction_end(self, payload: twitchio.ChannelPredictionEnd) -> None:
        LOGGER.debug(f"Prediction {payload.id} ended on Twitch")
        self.orchestrator.on_prediction_ended(payload.id)

    @commands.Component.listener()
    async def event_poll_end(self, payload: twitchio.ChannelPollEnd) -> None:
        LOGGER.debug(f"Poll {payload.id} ended on Twitch")
        self.orchestrator.on_poll_ended(payload.id)


async def setup(bot: Bot) -> None:
    """Entry point for the module."""
    await bot.add_component(ShortyCommands(bot))


async def teardown(bot: Bot) -> None:
    """Optional teardown coroutine for cleanup."""
    ...
