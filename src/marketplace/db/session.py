"""
marketplace.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Create the async sessionmaker with safe defaults.
- Provide a transactional session scope used by repositories.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from marketplace.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if settings.database_url.startswith("sqlite") and ":memory:" in settings.database_url:
        # An in-memory SQLite DB lives in a single connection; share it across sessions.
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return create_async_engine(settings.database_url, **kwargs)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False avoids surprising lazy loads after commits.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    One session, one transaction: commit on success, roll back on any error
    (including cancellation).
    """

    async with session_factory() as session:
        async with session.begin():
            yield session


# --- Module Notes -----------------------------------------------------------
# Repositories open a scope per call, so a single repository instance can be
# shared by concurrent requests.
