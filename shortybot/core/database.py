"""Token storage: the only table the bot keeps in PostgreSQL."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import asyncpg


@dataclass
class Token:
    """OAuth token record."""

    user_id: str
    token: str
    refresh: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


async def setup_database_schema(connection: asyncpg.Connection) -> None:
    """Initialize database tables."""
    await connection.execute(
        """CREATE TABLE IF NOT EXISTS tokens(
            user_id TEXT PRIMARY KEY,
            token TEXT NOT NULL,
            refresh TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        )"""
    )


class TokenRepository:
    """Pure SQL operations for the tokens table."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def upsert_token(self, user_id: str, token: str, refresh: str) -> None:
        """Insert or update an OAuth token."""
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO tokens (user_id, token, refresh)
                VALUES ($1, $2, $3)
                ON CONFLICT (user_id) DO UPDATE SET
                    token      = EXCLUDED.token,
                    refresh    = EXCLUDED.refresh,
                    updated_at = NOW()
                """,
                user_id,
                token,
                refresh,
            )

    async def list_tokens(self) -> list[Token]:
        """Return all tokens."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT user_id, token, refresh, created_at, updated_at FROM tokens"
            )
            return [Token(**dict(r)) for r in rows]
