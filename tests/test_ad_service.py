from __future__ import annotations

import warnings
from datetime import UTC, datetime, timedelta

import pytest

from marketplace.auth.models import Principal
from marketplace.db.models import utcnow
from marketplace.db.records import AdChanges, AdDraft, AdRecord
from marketplace.db.repositories.ads import AdRepo
from marketplace.db.repositories.base import MAX_LIMIT, MAX_PAGE, ListAdsParams
from marketplace.errors import AccessDenied, NotFound
from marketplace.services.ad_service import AdService
from marketplace.services.auth_service import AuthService

DRAFT = AdDraft(title="Bike", description="Red city bike", price=120.0)


async def _users(auth_service: AuthService) -> tuple[Principal, Principal]:
    alice = await auth_service.register(username="alice", password="password123")
    bob = await auth_service.register(username="bob-the-buyer", password="password456")
    return (
        Principal(user_id=alice.id, username=alice.username),
        Principal(user_id=bob.id, username=bob.username),
    )


class DeleteBeforeWriteRepo(AdRepo):
    """Deletes the row right before the owner-scoped write, like a concurrent request would."""

    async def update(self, *, ad_id: int, owner_id: int, changes: AdChanges) -> AdRecord | None:
        await super().delete(ad_id=ad_id, owner_id=owner_id)
        return await super().update(ad_id=ad_id, owner_id=owner_id, changes=changes)

    async def delete(self, *, ad_id: int, owner_id: int) -> bool:
        await super().delete(ad_id=ad_id, owner_id=owner_id)
        return await super().delete(ad_id=ad_id, owner_id=owner_id)


@pytest.mark.asyncio
async def test_owner_is_always_the_actor(sessions, auth_service: AuthService) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))

    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    assert ad.owner_id == alice.user_id
    assert (await ads.get_ad(ad.id)).title == "Bike"


@pytest.mark.asyncio
async def test_non_owner_update_is_denied_and_nothing_changes(
    sessions, auth_service: AuthService
) -> None:
    alice, bob = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))
    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    with pytest.raises(AccessDenied):
        await ads.update_ad(ad_id=ad.id, actor=bob, changes=AdChanges(title="stolen"))

    assert (await ads.get_ad(ad.id)).title == "Bike"


@pytest.mark.asyncio
async def test_non_owner_delete_is_denied(sessions, auth_service: AuthService) -> None:
    alice, bob = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))
    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    with pytest.raises(AccessDenied):
        await ads.delete_ad(ad_id=ad.id, actor=bob)

    assert (await ads.get_ad(ad.id)).id == ad.id


@pytest.mark.asyncio
async def test_owner_partial_update_is_visible(sessions, auth_service: AuthService) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))
    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    updated = await ads.update_ad(
        ad_id=ad.id, actor=alice, changes=AdChanges(price=99.5, image_url="https://img/1.png")
    )
    fetched = await ads.get_ad(ad.id)

    assert updated == fetched
    assert fetched.price == 99.5
    assert fetched.image_url == "https://img/1.png"
    assert fetched.title == "Bike"
    assert fetched.updated_at >= ad.updated_at


@pytest.mark.asyncio
async def test_owner_delete_removes_the_ad(sessions, auth_service: AuthService) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))
    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    await ads.delete_ad(ad_id=ad.id, actor=alice)

    with pytest.raises(NotFound):
        await ads.get_ad(ad.id)


@pytest.mark.asyncio
async def test_missing_ad_is_not_found_for_every_operation(
    sessions, auth_service: AuthService
) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))

    with pytest.raises(NotFound):
        await ads.get_ad(404)
    with pytest.raises(NotFound):
        await ads.update_ad(ad_id=404, actor=alice, changes=AdChanges(title="x"))
    with pytest.raises(NotFound):
        await ads.delete_ad(ad_id=404, actor=alice)


@pytest.mark.asyncio
async def test_delete_between_check_and_write_is_not_found(
    sessions, auth_service: AuthService
) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=DeleteBeforeWriteRepo(sessions))
    first = await ads.create_ad(actor=alice, draft=DRAFT)
    second = await ads.create_ad(actor=alice, draft=DRAFT)

    with pytest.raises(NotFound):
        await ads.update_ad(ad_id=first.id, actor=alice, changes=AdChanges(title="x"))
    with pytest.raises(NotFound):
        await ads.delete_ad(ad_id=second.id, actor=alice)


@pytest.mark.asyncio
async def test_list_sorts_and_paginates(sessions, auth_service: AuthService) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))
    for price in (30.0, 10.0, 20.0):
        await ads.create_ad(actor=alice, draft=AdDraft(title="t", description="d", price=price))

    cheapest_first = await ads.list_ads(
        ListAdsParams.build(page=1, limit=2, sort_by="price", sort_order="asc")
    )
    second_page = await ads.list_ads(
        ListAdsParams.build(page=2, limit=2, sort_by="price", sort_order="asc")
    )

    assert [a.price for a in cheapest_first] == [10.0, 20.0]
    assert [a.price for a in second_page] == [30.0]


def test_list_params_normalize_unknown_sort() -> None:
    params = ListAdsParams.build(page=3, limit=5, sort_by="title; DROP TABLE ads", sort_order="ASC")

    assert params == ListAdsParams(limit=5, offset=10, sort_by="created_at", sort_order="desc")
    assert params.page == 3
    assert ListAdsParams.build(sort_by="price", sort_order="ASC").sort_order == "asc"


@pytest.mark.parametrize(
    "page, limit", [(0, 10), (MAX_PAGE + 1, 10), (10**19, 10), (1, 0), (1, MAX_LIMIT + 1)]
)
def test_list_params_reject_out_of_range_paging(page: int, limit: int) -> None:
    with pytest.raises(ValueError):
        ListAdsParams.build(page=page, limit=limit)


@pytest.mark.asyncio
async def test_marketplace_scenario(sessions, auth_service: AuthService, tokens) -> None:
    alice_view = await auth_service.register(username="alice", password="password123")
    bob_view = await auth_service.register(username="bobby", password="password456")
    assert alice_view.id == 1
    assert bob_view.id == 2

    token = await auth_service.login(username="alice", password="password123")
    claims = tokens.verify(token)
    assert (claims.user_id, claims.username) == (1, "alice")

    alice = auth_service.authenticate(token)
    bob = Principal(user_id=2, username="bobby")
    ads = AdService(ads=AdRepo(sessions))
    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    with pytest.raises(AccessDenied):
        await ads.update_ad(ad_id=ad.id, actor=bob, changes=AdChanges(title="x"))
    await ads.update_ad(ad_id=ad.id, actor=alice, changes=AdChanges(title="x"))

    assert (await ads.get_ad(ad.id)).title == "x"


def test_row_timestamps_are_naive_utc() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        now = utcnow()

    assert now.tzinfo is None
    assert abs(datetime.now(UTC).replace(tzinfo=None) - now) < timedelta(seconds=5)


@pytest.mark.asyncio
async def test_update_stamps_updated_at(sessions, auth_service: AuthService) -> None:
    alice, _ = await _users(auth_service)
    ads = AdService(ads=AdRepo(sessions))
    ad = await ads.create_ad(actor=alice, draft=DRAFT)

    updated = await ads.update_ad(ad_id=ad.id, actor=alice, changes=AdChanges(title="x"))

    assert updated.updated_at.tzinfo is None
    assert updated.updated_at >= ad.created_at
