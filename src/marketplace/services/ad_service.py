"""
marketplace.services.ad_service

Listing operations with single-owner access control.

Responsibilities:
- Create listings on behalf of the authenticated caller.
- Read listings (list pages go through whichever repository variant was configured).
- Update/delete only when the caller owns the listing.

Every mutation is fetch -> ownership check -> owner-scoped write. The write is
not atomic with the check: if the listing disappears in between, the
owner-scoped write affects nothing and the caller gets `NotFound`.
"""

from __future__ import annotations

from marketplace.auth.models import Principal
from marketplace.db.records import AdChanges, AdDraft, AdRecord
from marketplace.db.repositories.base import AdRepository, ListAdsParams
from marketplace.errors import AccessDenied, NotFound
from marketplace.observability.logging import get_logger

log = get_logger(__name__)


class AdService:
    def __init__(self, *, ads: AdRepository) -> None:
        self._ads = ads

    async def create_ad(self, *, actor: Principal, draft: AdDraft) -> AdRecord:
        ad = await self._ads.create(owner_id=actor.user_id, draft=draft)
        log.info("ad_created", ad_id=ad.id, owner_id=actor.user_id)
        return ad

    async def list_ads(self, params: ListAdsParams) -> list[AdRecord]:
        return await self._ads.list_page(params)

    async def get_ad(self, ad_id: int) -> AdRecord:
        ad = await self._ads.get(ad_id)
        if ad is None:
            raise NotFound("Ad not found")
        return ad

    async def update_ad(self, *, ad_id: int, actor: Principal, changes: AdChanges) -> AdRecord:
        await self._authorize(ad_id=ad_id, actor=actor)
        updated = await self._ads.update(ad_id=ad_id, owner_id=actor.user_id, changes=changes)
        if updated is None:
            # Deleted between the check and the write.
            raise NotFound("Ad not found")
        log.info("ad_updated", ad_id=ad_id, owner_id=actor.user_id)
        return updated

    async def delete_ad(self, *, ad_id: int, actor: Principal) -> None:
        await self._authorize(ad_id=ad_id, actor=actor)
        if not await self._ads.delete(ad_id=ad_id, owner_id=actor.user_id):
            raise NotFound("Ad not found")
        log.info("ad_deleted", ad_id=ad_id, owner_id=actor.user_id)

    async def _authorize(self, *, ad_id: int, actor: Principal) -> AdRecord:
        ad = await self.get_ad(ad_id)
        if ad.owner_id != actor.user_id:
            log.info("ad_access_denied", ad_id=ad_id, actor_id=actor.user_id)
            raise AccessDenied()
        return ad
