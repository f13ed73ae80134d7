"""Twitch Bot class: lifecycle, token persistence and EventSub setup."""

from __future__ import annotations

import asyncio
import logging

import asyncpg
import twitchio
from twitchio.ext import commands

from .config import BOT_SCOPES, BROADCASTER_SCOPES, ShortyBotSettings, oauth_url
from .database import TokenRepository
from .subscriptions import get_channel_subscriptions

LOGGER: logging.Logger = logging.getLogger("Bot")

COMPONENT_MODULES = ("shortybot.components.shorty_cmds",)


class Bot(commands.Bot):
    token_database: asyncpg.Pool

    def __init__(self, *, settings: ShortyBotSettings, token_database: asyncpg.Pool) -> None:
        self.settings = settings
        self.token_database = token_database
        self.tokens = TokenRepository(token_database)

        super().__init__(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            bot_id=settings.bot_id,
            owner_id=settings.owner_id,
            prefix="!",
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def setup_hook(self) -> None:
        for module_name in COMPONENT_MODULES:
            await self.load_module(module_name)

        await self._log_missing_authorizations()
        await self._subscribe_channel_events()

    async def _log_missing_authorizations(self) -> None:
        stored = {tok.user_id for tok in await self.tokens.list_tokens()}
        uri = self.settings.oauth_redirect_uri

        if self.settings.bot_id not in stored:
            LOGGER.warning(
                "Bot account has no token, authorize it at: "
                f"{oauth_url(self.settings.client_id, uri, BOT_SCOPES)}"
            )
        if self.settings.owner_id not in stored:
            LOGGER.warning(
                "Broadcaster has no token, authorize the channel at: "
                f"{oauth_url(self.settings.client_id, uri, BROADCASTER_SCOPES)}"
            )

    async def _subscribe_channel_events(self) -> None:
        broadcaster_id = self.settings.owner_id
        for sub in get_channel_subscriptions(broadcaster_id, self.settings.bot_id):
            try:
                await self.subscribe_websocket(payload=sub)
            except Exception as e:
                LOGGER.warning(f"Failed to subscribe {type(sub).__name__}: {e}")
        LOGGER.info(f"Subscribed to events for channel: {self.settings.channel_name}")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def event_ready(self) -> None:
        LOGGER.info("Bot is connected to chat!")
        LOGGER.info("Successfully logged in as: %s", self.bot_id)

    async def event_oauth_authorized(
        self, payload: twitchio.authentication.UserTokenPayload
    ) -> None:
        await self.add_token(payload.access_token, payload.refresh_token)

        if not payload.user_id:
            return

        if payload.user_id == self.bot_id:
            LOGGER.info("Bot account authorized")
        elif payload.user_id == self.owner_id:
            LOGGER.info("Broadcaster account authorized")
        else:
            LOGGER.warning(f"Token stored for unexpected user: {payload.user_id}")

    # ------------------------------------------------------------------
    # Token management
    # ------------------------------------------------------------------

    async def add_token(
        self, token: str, refresh: str
    ) -> twitchio.authentication.ValidateTokenPayload:
        resp: twitchio.authentication.ValidateTokenPayload = await super().add_token(token, refresh)

        if resp.user_id:
            for attempt in range(1, 4):
                try:
                    await self.tokens.upsert_token(resp.user_id, token, refresh)
                    break
                except Exception as e:
                    if attempt < 3:
                        LOGGER.warning(f"save_token attempt {attempt}/3 failed: {e}")
                        await asyncio.sleep(2)
                    else:
                        LOGGER.error(f"save_token failed after 3 attempts: {e}")

        login = resp.login or "unknown"
        LOGGER.info(f"Added token to database: {login} ({resp.user_id})")
        return resp

    async def load_tokens(self, path: str | None = None) -> None:
        tokens = await self.tokens.list_tokens()

        for tok in tokens:
            try:
                await self.add_token(tok.token, tok.refresh)
            except twitchio.exceptions.InvalidTokenException as e:
                LOGGER.warning(
                    f"Invalid token for user_id {tok.user_id}, skipping. "
                    f"User needs to re-authenticate: {e}"
                )

    async def save_tokens(self, path: str | None = None) -> None:
        # Tokens are written to the database as they are added
        pass
