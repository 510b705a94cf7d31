"""
marketplace.db.repositories.ads

Durable repository for `Ad` entities.

Responsibilities:
- CRUD for listings, returning `AdRecord` values.
- Paginated, sorted listing queries.
- Owner-scoped update/delete statements, so a write can never touch another
  user's row even if the service-level check raced.
"""

from __future__ import annotations

from sqlalchemy import asc, delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketplace.db.models import Ad, utcnow
from marketplace.db.records import AdChanges, AdDraft, AdRecord
from marketplace.db.repositories.base import ListAdsParams
from marketplace.db.session import session_scope
from marketplace.errors import TransientStoreError


def _to_record(ad: Ad) -> AdRecord:
    return AdRecord(
        id=ad.id,
        owner_id=ad.owner_id,
        title=ad.title,
        description=ad.description,
        price=ad.price,
        image_url=ad.image_url,
        created_at=ad.created_at,
        updated_at=ad.updated_at,
    )


class AdRepo:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = session_factory

    async def create(self, *, owner_id: int, draft: AdDraft) -> AdRecord:
        try:
            async with session_scope(self._sessions) as session:
                ad = Ad(
                    owner_id=owner_id,
                    title=draft.title,
                    description=draft.description,
                    price=draft.price,
                    image_url=draft.image_url,
                )
                session.add(ad)
                await session.flush()
                return _to_record(ad)
        except SQLAlchemyError as e:
            raise TransientStoreError("ads.create") from e

    async def list_page(self, params: ListAdsParams) -> list[AdRecord]:
        direction = asc if params.sort_order == "asc" else desc
        column = Ad.price if params.sort_by == "price" else Ad.created_at
        # Tie-break on id so pages are stable between identical queries.
        stmt = (
            select(Ad)
            .order_by(direction(column), direction(Ad.id))
            .limit(params.limit)
            .offset(params.offset)
        )
        try:
            async with session_scope(self._sessions) as session:
                rows = (await session.execute(stmt)).scalars().all()
                return [_to_record(ad) for ad in rows]
        except SQLAlchemyError as e:
            raise TransientStoreError("ads.list_page") from e

    async def get(self, ad_id: int) -> AdRecord | None:
        try:
            async with session_scope(self._sessions) as session:
                ad = await session.get(Ad, ad_id)
                return _to_record(ad) if ad is not None else None
        except SQLAlchemyError as e:
            raise TransientStoreError("ads.get") from e

    async def update(self, *, ad_id: int, owner_id: int, changes: AdChanges) -> AdRecord | None:
        stmt = select(Ad).where(Ad.id == ad_id, Ad.owner_id == owner_id).with_for_update()
        try:
            async with session_scope(self._sessions) as session:
                ad = (await session.execute(stmt)).scalar_one_or_none()
                if ad is None:
                    return None
                for name, value in changes.as_values().items():
                    setattr(ad, name, value)
                ad.updated_at = utcnow()
                await session.flush()
                return _to_record(ad)
        except SQLAlchemyError as e:
            raise TransientStoreError("ads.update") from e

    async def delete(self, *, ad_id: int, owner_id: int) -> bool:
        stmt = delete(Ad).where(Ad.id == ad_id, Ad.owner_id == owner_id)
        try:
            async with session_scope(self._sessions) as session:
                result = await session.execute(stmt)
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise TransientStoreError("ads.delete") from e


# --- Module Notes -----------------------------------------------------------
# `marketplace.cache.ads.CachedAdRepo` wraps this class behind the same protocol.
