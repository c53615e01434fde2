"""
Post management endpoints for signed-in staff.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query, Request, Response, status

from artibrain.api.deps import CurrentPrincipal, DbSession, get_client_ip, raise_failure, unwrap
from artibrain.schemas.post import PostCreate, PostResponse, PostSummary, PostUpdate, StatusChangeRequest
from artibrain.services.posts import PostService

router = APIRouter()


@router.get("", response_model=List[PostSummary])
async def list_posts(
    principal: CurrentPrincipal,
    db: DbSession,
    status_filter: Optional[str] = Query(None, alias="status"),
    author_id: Optional[uuid.UUID] = None,
):
    """All posts in every status (readers only see what is public)."""
    posts = unwrap(await PostService(db).list_managed(principal, status=status_filter, author_id=author_id))
    return [PostSummary.model_validate(p) for p in posts]


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: Request,
    data: PostCreate,
    principal: CurrentPrincipal,
    db: DbSession,
):
    post = unwrap(await PostService(db).create(principal, data, ip_address=get_client_ip(request)))
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: uuid.UUID, principal: CurrentPrincipal, db: DbSession):
    post = unwrap(await PostService(db).get_managed(principal, post_id))
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    request: Request,
    post_id: uuid.UUID,
    data: PostUpdate,
    principal: CurrentPrincipal,
    db: DbSession,
):
    """Partial edit. Authors may only edit their own posts."""
    post = unwrap(await PostService(db).update(principal, post_id, data, ip_address=get_client_ip(request)))
    return PostResponse.model_validate(post)


@router.post("/{post_id}/status", response_model=PostResponse)
async def change_status(
    request: Request,
    post_id: uuid.UUID,
    data: StatusChangeRequest,
    principal: CurrentPrincipal,
    db: DbSession,
):
    """
    Move a post to DRAFT, PUBLISHED or SCHEDULED.
    
    SCHEDULED needs a future ``publish_at``. A scheduled post stays hidden
    until it is explicitly published.
    """
    post = unwrap(
        await PostService(db).change_status(
            principal,
            post_id,
            data.status,
            publish_at=data.publish_at,
            ip_address=get_client_ip(request),
        )
    )
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    request: Request,
    post_id: uuid.UUID,
    principal: CurrentPrincipal,
    db: DbSession,
):
    failure = await PostService(db).delete(principal, post_id, ip_address=get_client_ip(request))
    if failure is not None:
        raise_failure(failure)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
