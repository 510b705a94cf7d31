"""
marketplace.observability.middleware

HTTP middleware for request-scoped logging context and deadlines.

Responsibilities:
- Generate/propagate request IDs.
- Bind request metadata into structlog contextvars.
- Enforce a per-request deadline that cancels in-flight work.
"""

from __future__ import annotations

import asyncio
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_504_GATEWAY_TIMEOUT
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from marketplace.observability.logging import get_logger

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    - Ensures every request has a request id
    - Binds request-scoped contextvars for structured logs
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        # Prefer a caller-provided request id for trace continuity; otherwise generate one.
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        try:
            response: Response = await call_next(request)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


class DeadlineMiddleware:
    """
    Runs the downstream app under `asyncio.timeout` in the same task, so an
    expired deadline cancels every awaited DB, cache and hashing call.
    """

    def __init__(self, app: ASGIApp, *, timeout_seconds: float) -> None:
        self.app = app
        self._timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            async with asyncio.timeout(self._timeout_seconds):
                await self.app(scope, receive, send_tracking)
        except TimeoutError:
            log.warning("request_timeout", timeout_seconds=self._timeout_seconds)
            if response_started:
                # Headers already went out; the client sees a truncated body.
                return
            response = JSONResponse(
                status_code=HTTP_504_GATEWAY_TIMEOUT,
                content={"kind": "timeout", "message": "Request timed out"},
            )
            await response(scope, receive, send)


# --- Module Notes -----------------------------------------------------------
# Order matters: `create_app` adds DeadlineMiddleware first so it runs inside
# RequestContextMiddleware and its timeout log line carries the request id.
