"""
marketplace.db.repositories.base

Repository protocols and list query parameters.

Responsibilities:
- Define the `UserRepository` and `AdRepository` capability sets.
- Normalize pagination/sort parameters so equivalent queries look identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from marketplace.db.records import AdChanges, AdDraft, AdRecord, UserRecord

SortField = Literal["created_at", "price"]
SortOrder = Literal["asc", "desc"]

ALLOWED_SORT_FIELDS: frozenset[str] = frozenset({"created_at", "price"})
# Keeps offset well inside the 64-bit range every driver can bind.
MAX_PAGE = 1_000_000
MAX_LIMIT = 100


@dataclass(frozen=True, slots=True)
class ListAdsParams:
    limit: int = 10
    offset: int = 0
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"

    @classmethod
    def build(
        cls,
        *,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> ListAdsParams:
        # Unknown sort fields fall back to newest-first; only "asc" sorts ascending.
        if sort_by not in ALLOWED_SORT_FIELDS:
            sort_by, sort_order = "created_at", "desc"
        order: SortOrder = "asc" if sort_order.lower() == "asc" else "desc"
        if not 1 <= page <= MAX_PAGE or not 1 <= limit <= MAX_LIMIT:
            raise ValueError(f"page must be in [1, {MAX_PAGE}] and limit in [1, {MAX_LIMIT}]")
        return cls(
            limit=limit,
            offset=(page - 1) * limit,
            sort_by=sort_by,  # type: ignore[arg-type]
            sort_order=order,
        )

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1


class UserRepository(Protocol):
    async def get_by_username(self, username: str) -> UserRecord | None: ...

    async def create(self, *, username: str, password_hash: str) -> UserRecord: ...


class AdRepository(Protocol):
    async def create(self, *, owner_id: int, draft: AdDraft) -> AdRecord: ...

    async def list_page(self, params: ListAdsParams) -> list[AdRecord]: ...

    async def get(self, ad_id: int) -> AdRecord | None: ...

    async def update(self, *, ad_id: int, owner_id: int, changes: AdChanges) -> AdRecord | None:
        """Owner-scoped update; None when no row with that id and owner exists."""
        ...

    async def delete(self, *, ad_id: int, owner_id: int) -> bool:
        """Owner-scoped delete; False when no row was removed."""
        ...
