"""
marketplace.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from marketplace.db import models  # noqa: F401  # registers tables on Base.metadata
from marketplace.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production schemas are managed outside this service.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
