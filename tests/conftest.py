"""
tests.conftest

Shared fixtures.

Responsibilities:
- Build test settings backed by a throwaway SQLite file (real UNIQUE constraints,
  real concurrent connections).
- Provide in-memory cache fakes and a call-counting repository wrapper.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketplace.auth.passwords import PasswordHasher
from marketplace.auth.tokens import TokenManager
from marketplace.cache.client import CacheUnavailable
from marketplace.db.init_db import init_db
from marketplace.db.records import AdChanges, AdDraft, AdRecord
from marketplace.db.repositories.ads import AdRepo
from marketplace.db.repositories.base import AdRepository, ListAdsParams
from marketplace.db.repositories.users import UserRepo
from marketplace.db.session import create_engine, create_sessionmaker
from marketplace.services.auth_service import AuthService
from marketplace.settings import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789"


class FakeCache:
    """Dict-backed cache with call counters and a switchable outage."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.gets = 0
        self.sets = 0
        self.down = False

    async def get(self, key: str) -> bytes | None:
        self.gets += 1
        if self.down:
            raise CacheUnavailable("get failed: ConnectionError")
        return self.data.get(key)

    async def set(self, key: str, value: bytes, *, ttl_seconds: int) -> None:
        self.sets += 1
        if self.down:
            raise CacheUnavailable("set failed: ConnectionError")
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    async def ping(self) -> bool:
        return not self.down


class CountingAdRepo:
    """Delegates to a real repository and counts list reads."""

    def __init__(self, inner: AdRepository) -> None:
        self._inner = inner
        self.list_calls = 0

    async def list_page(self, params: ListAdsParams) -> list[AdRecord]:
        self.list_calls += 1
        return await self._inner.list_page(params)

    async def create(self, *, owner_id: int, draft: AdDraft) -> AdRecord:
        return await self._inner.create(owner_id=owner_id, draft=draft)

    async def get(self, ad_id: int) -> AdRecord | None:
        return await self._inner.get(ad_id)

    async def update(self, *, ad_id: int, owner_id: int, changes: AdChanges) -> AdRecord | None:
        return await self._inner.update(ad_id=ad_id, owner_id=owner_id, changes=changes)

    async def delete(self, *, ad_id: int, owner_id: int) -> bool:
        return await self._inner.delete(ad_id=ad_id, owner_id=owner_id)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'marketplace-test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        cache_enabled=False,
    )


@pytest_asyncio.fixture
async def sessions(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenManager:
    return TokenManager(secret=TEST_SECRET, issuer="marketplace", audience="marketplace-api")


@pytest.fixture
def auth_service(
    sessions: async_sessionmaker[AsyncSession], hasher: PasswordHasher, tokens: TokenManager
) -> AuthService:
    return AuthService(
        users=UserRepo(sessions),
        hasher=hasher,
        tokens=tokens,
        token_ttl=timedelta(hours=1),
    )


@pytest.fixture
def counting_ads(sessions: async_sessionmaker[AsyncSession]) -> CountingAdRepo:
    return CountingAdRepo(AdRepo(sessions))
