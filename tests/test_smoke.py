"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and DB readiness probe works in test mode.
- Ensure a bad signing secret stops the app before it serves.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

import marketplace.auth
from marketplace.api.app import create_app
from marketplace.errors import ConfigError
from marketplace.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(settings: Settings) -> None:
    app = create_app(settings=settings)

    # httpx ASGITransport does not manage lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/healthz")
            assert r.status_code == 200
            assert r.json()["status"] == "ok"
            assert r.headers["x-request-id"]

            r = await client.get("/readyz")
            assert r.status_code == 200
            assert r.json() == {"status": "ready", "cache": "disabled"}


def test_auth_package_does_not_import_the_api_layer() -> None:
    package_dir = Path(marketplace.auth.__file__).parent

    for module in package_dir.glob("*.py"):
        assert "marketplace.api" not in module.read_text(), module.name


def test_short_secret_refuses_to_start(settings: Settings) -> None:
    with pytest.raises(ConfigError):
        create_app(settings=settings.model_copy(update={"jwt_secret": "too-short"}))


# --- Module Notes -----------------------------------------------------------
# Endpoint behavior is covered in `tests/test_api.py`.
