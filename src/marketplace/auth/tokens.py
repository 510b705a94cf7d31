"""
marketplace.auth.tokens

Signed, time-bound session tokens (JWT, HMAC).

Responsibilities:
- Hold the process-wide signing secret, validated once at construction.
- Issue tokens carrying user id, username, iat and exp.
- Verify structure, signature, registered claims and expiry; collapse every
  failure into `InvalidToken`.

Verification is stateless: there is no revocation list, so rotating the secret
is the only way to invalidate outstanding tokens.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from marketplace.auth.models import SessionClaims
from marketplace.errors import ConfigError, InvalidToken
from marketplace.observability.logging import get_logger

log = get_logger(__name__)

MIN_SECRET_LENGTH = 32
_HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class TokenManager:
    def __init__(
        self,
        *,
        secret: str,
        issuer: str,
        audience: str,
        alg: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not isinstance(secret, str) or not secret.strip():
            raise ConfigError("JWT secret is not set")
        if len(secret) < MIN_SECRET_LENGTH:
            raise ConfigError(f"JWT secret must be at least {MIN_SECRET_LENGTH} characters")
        if alg not in _HMAC_ALGORITHMS:
            raise ConfigError(f"Unsupported JWT algorithm: {alg}")

        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._alg = alg
        self._clock = clock

    def issue(self, *, user_id: int, username: str, ttl: timedelta) -> str:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        if ttl % timedelta(seconds=1):
            # iat/exp are whole seconds; a fractional ttl could not round-trip.
            raise ValueError("ttl must be a whole number of seconds")

        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "aud": self._audience,
            "sub": str(user_id),
            "username": username,
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._alg)

    def verify(self, token: str) -> SessionClaims:
        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._alg],
                issuer=self._issuer,
                audience=self._audience,
                options={
                    "require": ["exp", "iat", "iss", "aud", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            claims = _claims_from_payload(payload)
        except (InvalidTokenError, KeyError, TypeError, ValueError) as e:
            log.info("token_rejected", reason=type(e).__name__)
            raise InvalidToken() from e

        if not self._clock() < claims.expires_at:
            log.info("token_rejected", reason="expired")
            raise InvalidToken()
        return claims


def _claims_from_payload(payload: dict[str, Any]) -> SessionClaims:
    username = payload["username"]
    iat = payload["iat"]
    exp = payload["exp"]
    if not isinstance(username, str) or not username:
        raise ValueError("username claim")
    if type(iat) is not int or type(exp) is not int:
        raise TypeError("timestamp claims")
    return SessionClaims(
        user_id=int(payload["sub"]),
        username=username,
        issued_at=datetime.fromtimestamp(iat, tz=UTC),
        expires_at=datetime.fromtimestamp(exp, tz=UTC),
    )


# --- Module Notes -----------------------------------------------------------
# One TokenManager is built at startup (see `marketplace.context`) and shared by
# all requests; it holds no mutable state after construction.
