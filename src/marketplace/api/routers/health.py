"""
marketplace.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text

from marketplace.api.deps import context_dep
from marketplace.context import AppContext
from marketplace.db.session import session_scope

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(ctx: AppContext = Depends(context_dep)) -> dict[str, str]:
    # The database is required; the cache is reported but never blocks readiness.
    async with session_scope(ctx.sessionmaker) as session:
        await session.execute(text("SELECT 1"))
    if ctx.cache is None:
        cache_status = "disabled"
    else:
        cache_status = "ok" if await ctx.cache.ping() else "unavailable"
    return {"status": "ready", "cache": cache_status}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
