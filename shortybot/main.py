import asyncio
import logging

import asyncpg

from shortybot.core.bot import Bot
from shortybot.core.config import get_settings, validate_env_vars
from shortybot.core.database import setup_database_schema
from shortybot.core.logging import setup_logging

LOGGER: logging.Logger = logging.getLogger("Bot")


def main() -> None:
    validate_env_vars()
    settings = get_settings()
    setup_logging(settings.log_level)

    async def runner() -> None:
        pool = await asyncpg.create_pool(
            settings.database_url, min_size=1, max_size=5, statement_cache_size=0
        )
        if pool is None:
            LOGGER.error("Failed to create database connection pool")
            return

        try:
            async with pool.acquire() as connection:
                await setup_database_schema(connection)

            LOGGER.info(f"Starting ShortyBot for #{settings.channel_name}")

            async with Bot(settings=settings, token_database=pool) as bot:
                await bot.start()
        finally:
            await pool.close()

    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
