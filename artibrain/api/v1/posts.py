"""
Public post endpoints. Only publicly visible posts are ever returned.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query

from artibrain.api.deps import DbSession, unwrap
from artibrain.schemas.post import PostResponse, PostSummary
from artibrain.services.posts import PostService

router = APIRouter()


@router.get("", response_model=List[PostSummary])
async def list_posts(
    db: DbSession,
    author_id: Optional[uuid.UUID] = None,
    category: Optional[str] = Query(None, description="Category slug"),
    tag: Optional[str] = Query(None, description="Tag slug"),
):
    posts = await PostService(db).list_public(author_id=author_id, category_slug=category, tag_slug=tag)
    return [PostSummary.model_validate(p) for p in posts]


@router.get("/{slug}", response_model=PostResponse)
async def get_post(slug: str, db: DbSession):
    """A published post by slug. Drafts and scheduled posts are 404."""
    post = unwrap(await PostService(db).get_public_by_slug(slug))
    return PostResponse.model_validate(post)
