"""
Category and tag endpoints.

Both kinds expose the same routes, so one builder makes a router per kind.
"""

import uuid
from typing import Callable, List

from fastapi import APIRouter, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.api.deps import CurrentPrincipal, DbSession, get_client_ip, raise_failure, unwrap
from artibrain.schemas.taxonomy import TaxonomyCreate, TaxonomyListItem, TaxonomyResponse, TaxonomyUpdate
from artibrain.services.taxonomy import TaxonomyService


def _listing(entry, count: int) -> TaxonomyListItem:
    return TaxonomyListItem(id=entry.id, name=entry.name, slug=entry.slug, post_count=count)


def build_router(service_for: Callable[[AsyncSession], TaxonomyService]) -> APIRouter:
    router = APIRouter()

    @router.get("", response_model=List[TaxonomyListItem])
    async def list_entries(db: DbSession):
        """Every entry with its number of published posts."""
        rows = await service_for(db).list_with_counts()
        return [_listing(entry, count) for entry, count in rows]

    @router.get("/{slug}", response_model=TaxonomyListItem)
    async def get_entry(slug: str, db: DbSession):
        entry, count = unwrap(await service_for(db).get_by_slug(slug))
        return _listing(entry, count)

    @router.post("", response_model=TaxonomyResponse, status_code=status.HTTP_201_CREATED)
    async def create_entry(
        request: Request,
        data: TaxonomyCreate,
        principal: CurrentPrincipal,
        db: DbSession,
    ):
        entry = unwrap(await service_for(db).create(principal, data, ip_address=get_client_ip(request)))
        return TaxonomyResponse.model_validate(entry)

    @router.put("/{entry_id}", response_model=TaxonomyResponse)
    async def update_entry(
        request: Request,
        entry_id: uuid.UUID,
        data: TaxonomyUpdate,
        principal: CurrentPrincipal,
        db: DbSession,
    ):
        entry = unwrap(await service_for(db).update(principal, entry_id, data, ip_address=get_client_ip(request)))
        return TaxonomyResponse.model_validate(entry)

    @router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(
        request: Request,
        entry_id: uuid.UUID,
        principal: CurrentPrincipal,
        db: DbSession,
    ):
        failure = await service_for(db).delete(principal, entry_id, ip_address=get_client_ip(request))
        if failure is not None:
            raise_failure(failure)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


categories_router = build_router(TaxonomyService.categories)
tags_router = build_router(TaxonomyService.tags)
