"""
marketplace.api.app

FastAPI app factory for the marketplace service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Own the `AppContext` (DB engine, cache client, services) for the app lifetime.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from marketplace.api.errors import register_error_handlers
from marketplace.api.routers.ads import router as ads_router
from marketplace.api.routers.auth import router as auth_router
from marketplace.api.routers.health import router as health_router
from marketplace.cache.client import CacheClient
from marketplace.context import build_context
from marketplace.db.init_db import init_db
from marketplace.observability.logging import configure_logging, get_logger
from marketplace.observability.middleware import DeadlineMiddleware, RequestContextMiddleware
from marketplace.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, cache: CacheClient | None = None) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    # Built eagerly: a bad signing secret raises ConfigError here, before serving.
    context = build_context(settings, cache=cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, cache_enabled=settings.cache_enabled)
        app.state.context = context
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(context.engine)
        try:
            yield
        finally:
            await context.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="Marketplace API",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(DeadlineMiddleware, timeout_seconds=settings.request_timeout_seconds)
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(ads_router)
    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business rules live in `marketplace.services`.
