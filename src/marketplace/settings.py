"""
marketplace.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT signing secret).
- Offer a cached settings instance for the process entry point.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration with defaults that are safe for local dev.

    Built once by the application root and passed explicitly into every
    component that needs it.
    """

    model_config = SettingsConfigDict(env_prefix="MARKETPLACE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "marketplace"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "marketplace"
    jwt_audience: str = "marketplace-api"
    jwt_secret: str = Field(default="dev-secret-change-me-0123456789abcdef", repr=False)
    token_ttl_minutes: int = Field(default=60, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./marketplace.db"

    # Listing cache
    redis_url: str = "redis://localhost:6379/0"
    cache_enabled: bool = True
    cache_ttl_seconds: int = Field(default=600, ge=1)
    cache_timeout_seconds: float = Field(default=0.25, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars when the entry point asks twice.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Only `api.__main__` calls `get_settings()`; the rest of the code receives the
# Settings instance from `marketplace.context.AppContext`.
