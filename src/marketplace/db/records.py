"""
marketplace.db.records

Plain records returned by repositories.

Responsibilities:
- Decouple callers from ORM rows (no lazy loads, no session lifetime coupling).
- Give durable and cached repositories one shared, serializable return type.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class UserRecord:
    id: int
    username: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class UserView:
    """
    Public view of an identity; the password digest is deliberately absent.
    """

    id: int
    username: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: UserRecord) -> UserView:
        return cls(id=record.id, username=record.username, created_at=record.created_at)


@dataclass(frozen=True, slots=True)
class AdRecord:
    id: int
    owner_id: int
    title: str
    description: str
    price: float
    image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class AdDraft:
    title: str
    description: str
    price: float
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class AdChanges:
    # None means "leave unchanged".
    title: str | None = None
    description: str | None = None
    price: float | None = None
    image_url: str | None = None

    def as_values(self) -> dict[str, object]:
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("price", self.price),
                ("image_url", self.image_url),
            )
            if value is not None
        }
