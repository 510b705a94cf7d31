"""
marketplace.api.errors

Exception handlers mapping domain errors to HTTP responses.

Responsibilities:
- Render every `MarketplaceError` as `{"kind", "message"}` with its status code.
- Log store failures with their operation name, never the driver message.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from marketplace.errors import MarketplaceError, TransientStoreError
from marketplace.observability.logging import get_logger

log = get_logger(__name__)


async def _handle_domain_error(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, MarketplaceError)
    if isinstance(exc, TransientStoreError):
        cause = type(exc.__cause__).__name__ if exc.__cause__ is not None else None
        log.error("store_error", operation=exc.operation, cause=cause)
    elif exc.status_code >= 500:
        log.error("internal_error", kind=exc.kind)
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "message": exc.message},
    )


async def _handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "internal_error", "message": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, _handle_domain_error)
    app.add_exception_handler(Exception, _handle_unexpected)
