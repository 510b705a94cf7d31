"""
marketplace.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the application context and its services to route handlers.
- Convert an `Authorization: Bearer <token>` header into a typed `Principal`.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from marketplace.auth.models import Principal
from marketplace.context import AppContext
from marketplace.errors import InvalidToken
from marketplace.services.ad_service import AdService
from marketplace.services.auth_service import AuthService

_bearer = HTTPBearer(auto_error=False)


def context_dep(request: Request) -> AppContext:
    # Built once in the app lifespan (see `marketplace.api.app.create_app`).
    return request.app.state.context  # type: ignore[no-any-return]


def auth_service_dep(ctx: AppContext = Depends(context_dep)) -> AuthService:
    return ctx.auth


def ad_service_dep(ctx: AppContext = Depends(context_dep)) -> AdService:
    return ctx.ads


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(auth_service_dep),
) -> Principal:
    # Missing/malformed header and bad tokens share one error kind (401).
    if creds is None or not creds.credentials:
        raise InvalidToken("Missing bearer token")
    return auth.authenticate(creds.credentials)
