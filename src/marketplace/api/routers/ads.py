"""
marketplace.api.routers.ads

Listing endpoints.

Responsibilities:
- Public reads: paginated list and single ad.
- Authenticated writes: create, partial update and delete (owner only; the
  ownership check itself lives in `AdService`).
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field, HttpUrl
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from marketplace.api.deps import ad_service_dep, get_principal
from marketplace.auth.models import Principal
from marketplace.db.records import AdChanges, AdDraft, AdRecord
from marketplace.db.repositories.base import MAX_LIMIT, MAX_PAGE, ListAdsParams
from marketplace.services.ad_service import AdService

router = APIRouter(prefix="/api/v1/ads", tags=["ads"])


class CreateAdRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(max_length=1000)
    price: float = Field(ge=0)
    image_url: HttpUrl | None = None


class CreateAdResponse(BaseModel):
    id: int


class UpdateAdRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    price: float | None = Field(default=None, ge=0)
    image_url: HttpUrl | None = None


class AdResponse(BaseModel):
    id: int
    title: str
    description: str
    price: float
    image_url: str | None
    author_id: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, ad: AdRecord) -> AdResponse:
        return cls(
            id=ad.id,
            title=ad.title,
            description=ad.description,
            price=ad.price,
            image_url=ad.image_url,
            author_id=ad.owner_id,
            created_at=ad.created_at,
            updated_at=ad.updated_at,
        )


@router.get("", response_model=list[AdResponse])
async def list_ads(
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=10, ge=1, le=MAX_LIMIT),
    sort_by: str = Query(default="created_at"),
    sort_order: str = Query(default="desc"),
    ads: AdService = Depends(ad_service_dep),
) -> list[AdResponse]:
    params = ListAdsParams.build(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
    return [AdResponse.from_record(ad) for ad in await ads.list_ads(params)]


@router.get("/{ad_id}", response_model=AdResponse)
async def get_ad(ad_id: int, ads: AdService = Depends(ad_service_dep)) -> AdResponse:
    return AdResponse.from_record(await ads.get_ad(ad_id))


@router.post("", response_model=CreateAdResponse, status_code=HTTP_201_CREATED)
async def create_ad(
    body: CreateAdRequest,
    principal: Principal = Depends(get_principal),
    ads: AdService = Depends(ad_service_dep),
) -> CreateAdResponse:
    draft = AdDraft(
        title=body.title,
        description=body.description,
        price=body.price,
        image_url=str(body.image_url) if body.image_url is not None else None,
    )
    ad = await ads.create_ad(actor=principal, draft=draft)
    return CreateAdResponse(id=ad.id)


@router.patch("/{ad_id}", response_model=AdResponse)
async def update_ad(
    ad_id: int,
    body: UpdateAdRequest,
    principal: Principal = Depends(get_principal),
    ads: AdService = Depends(ad_service_dep),
) -> AdResponse:
    changes = AdChanges(
        title=body.title,
        description=body.description,
        price=body.price,
        image_url=str(body.image_url) if body.image_url is not None else None,
    )
    ad = await ads.update_ad(ad_id=ad_id, actor=principal, changes=changes)
    return AdResponse.from_record(ad)


@router.delete("/{ad_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_ad(
    ad_id: int,
    principal: Principal = Depends(get_principal),
    ads: AdService = Depends(ad_service_dep),
) -> Response:
    await ads.delete_ad(ad_id=ad_id, actor=principal)
    return Response(status_code=HTTP_204_NO_CONTENT)
