"""
keygate.db.init_db

Schema bootstrap.

Responsibilities:
- Create the registry and access-log tables if they don't exist yet.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from keygate.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from keygate.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Idempotent: safe to run from both the server startup and every admin command,
    whichever touches a fresh database first.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
