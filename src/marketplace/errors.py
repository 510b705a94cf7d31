"""
marketplace.errors

Domain error taxonomy.

Responsibilities:
- Give every surfaced failure a stable machine-readable `kind` and a safe message.
- Carry the HTTP status the API layer maps each kind to.

Messages are fixed per class; callers never pass driver or library text into them.
"""

from __future__ import annotations


class MarketplaceError(Exception):
    kind: str = "internal_error"
    message: str = "Internal server error"
    status_code: int = 500

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UserExists(MarketplaceError):
    kind = "user_exists"
    message = "User with this username already exists"
    status_code = 409


class InvalidCredentials(MarketplaceError):
    kind = "invalid_credentials"
    message = "Invalid username or password"
    status_code = 401


class InvalidToken(MarketplaceError):
    kind = "invalid_token"
    message = "Invalid or expired token"
    status_code = 401


class AccessDenied(MarketplaceError):
    kind = "access_denied"
    message = "Access denied"
    status_code = 403


class NotFound(MarketplaceError):
    kind = "not_found"
    message = "Resource not found"
    status_code = 404


class TransientStoreError(MarketplaceError):
    """
    I/O failure in the durable store.

    `operation` names the repository call (e.g. "users.create") for logs; the
    underlying driver error is chained via `raise ... from` and never rendered.
    """

    kind = "store_unavailable"
    message = "Storage is temporarily unavailable"
    status_code = 503

    def __init__(self, operation: str) -> None:
        super().__init__()
        self.operation = operation

    def __str__(self) -> str:
        return f"{self.operation}: {self.message}"


class HashingError(MarketplaceError):
    kind = "internal_error"
    message = "Internal server error"
    status_code = 500


class ConfigError(MarketplaceError):
    # Startup-only; the process should refuse to serve.
    kind = "config_error"
    message = "Invalid configuration"
    status_code = 500


# --- Module Notes -----------------------------------------------------------
# Cache failures are intentionally absent from this taxonomy: they are absorbed
# by `marketplace.cache.ads.CachedAdRepo` and never reach callers.
