"""
Public author pages.
"""

import uuid

from fastapi import APIRouter

from artibrain.api.deps import DbSession, unwrap
from artibrain.schemas.post import PostSummary
from artibrain.schemas.user import AuthorProfileResponse
from artibrain.services.users import UserService

router = APIRouter()


@router.get("/{user_id}", response_model=AuthorProfileResponse)
async def get_author(user_id: uuid.UUID, db: DbSession):
    user, posts = unwrap(await UserService(db).get_author_profile(user_id))
    return AuthorProfileResponse(
        id=user.id,
        name=user.name,
        avatar_url=user.avatar_url,
        bio=user.bio,
        posts=[PostSummary.model_validate(p) for p in posts],
    )
