"""
User administration endpoints (ADMIN only).
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, Response, status

from artibrain.api.deps import CurrentPrincipal, DbSession, get_client_ip, raise_failure, unwrap
from artibrain.schemas.user import UserCreate, UserResponse, UserUpdate
from artibrain.services.users import UserService

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(principal: CurrentPrincipal, db: DbSession):
    users = unwrap(await UserService(db).list_users(principal))
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    data: UserCreate,
    principal: CurrentPrincipal,
    db: DbSession,
):
    user = unwrap(await UserService(db).create(principal, data, ip_address=get_client_ip(request)))
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: uuid.UUID, principal: CurrentPrincipal, db: DbSession):
    user = unwrap(await UserService(db).get_user(principal, user_id))
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    request: Request,
    user_id: uuid.UUID,
    data: UserUpdate,
    principal: CurrentPrincipal,
    db: DbSession,
):
    """
    Edit an account. Changing the role invalidates the user's existing
    session tokens, since tokens carry the role they were issued with.
    """
    user = unwrap(await UserService(db).update(principal, user_id, data, ip_address=get_client_ip(request)))
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    request: Request,
    user_id: uuid.UUID,
    principal: CurrentPrincipal,
    db: DbSession,
):
    failure = await UserService(db).delete(principal, user_id, ip_address=get_client_ip(request))
    if failure is not None:
        raise_failure(failure)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
