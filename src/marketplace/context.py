"""
marketplace.context

Composition root for shared infrastructure.

Responsibilities:
- Build every long-lived object exactly once (engine, session factory, cache
  client, token manager, hasher, services) from an explicit `Settings`.
- Choose the durable or cached listing repository at construction time.
- Dispose pools on shutdown.

There are no module-level singletons: the API app owns one `AppContext` and
hands it to request handlers through dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from marketplace.auth.passwords import PasswordHasher
from marketplace.auth.tokens import TokenManager
from marketplace.cache.ads import CachedAdRepo
from marketplace.cache.client import CacheClient, RedisCache
from marketplace.db.repositories.ads import AdRepo
from marketplace.db.repositories.base import AdRepository
from marketplace.db.repositories.users import UserRepo
from marketplace.db.session import create_engine, create_sessionmaker
from marketplace.services.ad_service import AdService
from marketplace.services.auth_service import AuthService
from marketplace.settings import Settings


@dataclass(frozen=True, slots=True)
class AppContext:
    settings: Settings
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]
    tokens: TokenManager
    auth: AuthService
    ads: AdService
    # The active cache client, None when caching is disabled.
    cache: CacheClient | None = None
    # Set only when the client was built here; caller-supplied clients stay open.
    owned_cache: RedisCache | None = None

    async def aclose(self) -> None:
        if self.owned_cache is not None:
            await self.owned_cache.close()
        await self.engine.dispose()


def build_context(settings: Settings, *, cache: CacheClient | None = None) -> AppContext:
    """
    Wire the object graph. Raises `ConfigError` on a bad signing secret, so a
    misconfigured process fails before serving.

    `cache` overrides the Redis client built from settings (tests pass fakes).
    """

    tokens = TokenManager(
        secret=settings.jwt_secret,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        alg=settings.jwt_alg,
    )
    engine = create_engine(settings)
    sessions = create_sessionmaker(engine)

    redis_cache: RedisCache | None = None
    ad_repo: AdRepository = AdRepo(sessions)
    if settings.cache_enabled:
        if cache is None:
            redis_cache = RedisCache.from_url(
                settings.redis_url, timeout_seconds=settings.cache_timeout_seconds
            )
            cache = redis_cache
        ad_repo = CachedAdRepo(ad_repo, cache, ttl_seconds=settings.cache_ttl_seconds)

    auth = AuthService(
        users=UserRepo(sessions),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=tokens,
        token_ttl=timedelta(minutes=settings.token_ttl_minutes),
    )
    return AppContext(
        settings=settings,
        engine=engine,
        sessionmaker=sessions,
        tokens=tokens,
        auth=auth,
        ads=AdService(ads=ad_repo),
        cache=cache if settings.cache_enabled else None,
        owned_cache=redis_cache,
    )
