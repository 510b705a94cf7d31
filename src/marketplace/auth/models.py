"""
marketplace.auth.models

Auth domain models.

Responsibilities:
- Define the decoded token payload (`SessionClaims`).
- Define the authenticated caller identity (`Principal`) threaded into services.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SessionClaims:
    """
    Verified payload of a session token. Never persisted server-side.
    """

    user_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, passed explicitly to resource operations.
    """

    user_id: int
    username: str

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> Principal:
        return cls(user_id=claims.user_id, username=claims.username)
