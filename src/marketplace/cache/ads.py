"""
marketplace.cache.ads

Read-through cache in front of the durable listing repository.

Responsibilities:
- Serve list queries from the cache when possible, populating it on miss.
- Delegate every write (and single-ad reads) unchanged to the durable store.
- Absorb every cache failure: log it and fall through to the durable store.

Consistency: entries expire only by TTL. Writes do not invalidate list pages,
so a list may be stale for up to one TTL window after a create/update/delete.
"""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from marketplace.cache.client import CacheClient, CacheUnavailable
from marketplace.db.records import AdChanges, AdDraft, AdRecord
from marketplace.db.repositories.base import AdRepository, ListAdsParams
from marketplace.observability.logging import get_logger

log = get_logger(__name__)

_AD_LIST = TypeAdapter(list[AdRecord])


def ad_list_cache_key(params: ListAdsParams) -> str:
    return (
        f"ads:page={params.page}&limit={params.limit}"
        f"&sort_by={params.sort_by}&sort_order={params.sort_order}"
    )


def encode_ad_list(ads: list[AdRecord]) -> bytes:
    return _AD_LIST.dump_json(ads)


def decode_ad_list(raw: bytes) -> list[AdRecord]:
    return _AD_LIST.validate_json(raw)


class CachedAdRepo:
    def __init__(self, inner: AdRepository, cache: CacheClient, *, ttl_seconds: int) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    async def list_page(self, params: ListAdsParams) -> list[AdRecord]:
        key = ad_list_cache_key(params)

        cached = await self._cache_get(key)
        if cached is not None:
            return cached

        ads = await self._inner.list_page(params)
        await self._cache_set(key, ads)
        return ads

    async def _cache_get(self, key: str) -> list[AdRecord] | None:
        try:
            raw = await self._cache.get(key)
        except CacheUnavailable as e:
            log.warning("ads_cache_error", op="get", key=key, error=str(e))
            return None
        if raw is None:
            return None
        try:
            return decode_ad_list(raw)
        except ValidationError:
            log.warning("ads_cache_corrupt_entry", key=key)
            return None

    async def _cache_set(self, key: str, ads: list[AdRecord]) -> None:
        try:
            await self._cache.set(key, encode_ad_list(ads), ttl_seconds=self._ttl_seconds)
        except CacheUnavailable as e:
            log.warning("ads_cache_error", op="set", key=key, error=str(e))

    # Writes and single reads go straight through; no invalidation.

    async def create(self, *, owner_id: int, draft: AdDraft) -> AdRecord:
        return await self._inner.create(owner_id=owner_id, draft=draft)

    async def get(self, ad_id: int) -> AdRecord | None:
        return await self._inner.get(ad_id)

    async def update(self, *, ad_id: int, owner_id: int, changes: AdChanges) -> AdRecord | None:
        return await self._inner.update(ad_id=ad_id, owner_id=owner_id, changes=changes)

    async def delete(self, *, ad_id: int, owner_id: int) -> bool:
        return await self._inner.delete(ad_id=ad_id, owner_id=owner_id)
