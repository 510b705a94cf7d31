"""
marketplace.observability.logging

JSON logging for the marketplace service.

Responsibilities:
- Route structlog events through stdlib logging, one JSON object per line.
- Stamp every event with the service name and request context.
- Mask credential-bearing fields before rendering.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

# Field names that may carry a password, a digest or a bearer token.
SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "password_hash", "digest", "token", "access_token", "authorization"}
)
REDACTED = "[REDACTED]"


def configure_logging(*, service_name: str, level: str) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=build_processors(service_name),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_processors(service_name: str) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_name(service_name),
        redact_secrets,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def _add_service_name(service_name: str) -> Processor:
    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Replace the value of any sensitive key, whatever its case."""

    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via contextvars in `observability.middleware`.
# Redaction matches top-level keys only; do not nest secrets inside dict fields.
