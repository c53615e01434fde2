"""
User administration and public author pages.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.kernel.errors import CONFLICT, FORBIDDEN, NOT_FOUND, Failure
from artibrain.kernel.events.event_store import EventStore
from artibrain.kernel.identity.identity_service import normalize_email
from artibrain.kernel.identity.password import hash_password
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.event_log import EventType
from artibrain.kernel.models.post import Post
from artibrain.kernel.models.user import User
from artibrain.kernel.permissions.policy import Action, ResourceKind, authorize_principal
from artibrain.logging_config import get_logger
from artibrain.schemas.user import UserCreate, UserUpdate
from artibrain.services.posts import PostService
from artibrain.services.store import exists_where, flush_or_conflict

logger = get_logger(__name__)


class UserService:
    """
    Account management. Every operation except the public author page
    requires the policy's permission on ``user``, which only ADMIN holds.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    async def list_users(self, principal: Optional[Principal]) -> Union[List[User], Failure]:
        if not authorize_principal(principal, Action.READ, ResourceKind.USER).allowed:
            return FORBIDDEN
        result = await self.session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def get_user(self, principal: Optional[Principal], user_id: uuid.UUID) -> Union[User, Failure]:
        if not authorize_principal(principal, Action.READ, ResourceKind.USER).allowed:
            return FORBIDDEN
        user = await self.session.get(User, user_id)
        return user if user is not None else NOT_FOUND

    async def create(
        self,
        principal: Optional[Principal],
        data: UserCreate,
        ip_address: Optional[str] = None,
    ) -> Union[User, Failure]:
        """
        Create an account.

        Returns:
            The new user, FORBIDDEN for non-admins, or CONFLICT when the
            email is already registered
        """
        if not authorize_principal(principal, Action.CREATE, ResourceKind.USER).allowed:
            return FORBIDDEN

        email = normalize_email(data.email)
        if await exists_where(self.session, User, User.email == email):
            return CONFLICT

        user = User(
            name=data.name,
            email=email,
            password_hash=hash_password(data.password),
            role=data.role,
            avatar_url=data.avatar_url,
            bio=data.bio,
        )
        self.session.add(user)
        conflict = await flush_or_conflict(self.session)
        if conflict is not None:
            return conflict
        await self.session.refresh(user)

        await self.event_store.log(
            event_type=EventType.USER_CREATED,
            entity_type="user",
            entity_id=user.id,
            user_id=principal.id,
            payload={"email": user.email, "role": data.role},
            ip_address=ip_address,
        )
        logger.info("User created", extra={"target_user_id": user.id, "role": data.role})
        return user

    async def update(
        self,
        principal: Optional[Principal],
        user_id: uuid.UUID,
        data: UserUpdate,
        ip_address: Optional[str] = None,
    ) -> Union[User, Failure]:
        if not authorize_principal(principal, Action.UPDATE, ResourceKind.USER).allowed:
            return FORBIDDEN

        user = await self.session.get(User, user_id)
        if user is None:
            return NOT_FOUND

        fields = data.model_dump(exclude_unset=True)
        changes: Dict[str, Any] = {}

        if fields.get("email") is not None:
            email = normalize_email(fields["email"])
            if email != user.email:
                if await exists_where(self.session, User, User.email == email, User.id != user.id):
                    return CONFLICT
                user.email = email
                changes["email"] = email
        if fields.get("name") is not None:
            user.name = fields["name"]
            changes["name"] = user.name
        if fields.get("role") is not None and fields["role"] != user.role_value:
            changes["previous_role"] = user.role_value
            user.role = fields["role"]
            changes["role"] = fields["role"]
        if fields.get("password"):
            user.password_hash = hash_password(fields["password"])
            changes["password"] = "changed"
        for name in ("avatar_url", "bio"):
            if name in fields:
                setattr(user, name, fields[name])
                changes[name] = fields[name]

        conflict = await flush_or_conflict(self.session)
        if conflict is not None:
            return conflict
        await self.session.refresh(user)

        if changes:
            await self.event_store.log(
                event_type=EventType.USER_UPDATED,
                entity_type="user",
                entity_id=user.id,
                user_id=principal.id,
                payload=changes,
                ip_address=ip_address,
            )
        return user

    async def delete(
        self,
        principal: Optional[Principal],
        user_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Optional[Failure]:
        """Delete an account. Users who still author posts can't be deleted (CONFLICT)."""
        if not authorize_principal(principal, Action.DELETE, ResourceKind.USER).allowed:
            return FORBIDDEN

        user = await self.session.get(User, user_id)
        if user is None:
            return NOT_FOUND
        if await exists_where(self.session, Post, Post.author_id == user.id):
            return CONFLICT

        email = user.email
        await self.session.delete(user)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.USER_DELETED,
            entity_type="user",
            entity_id=user_id,
            user_id=principal.id,
            payload={"email": email},
            ip_address=ip_address,
        )
        logger.info("User deleted", extra={"target_user_id": user_id})
        return None

    async def get_author_profile(
        self,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> Union[Tuple[User, List[Post]], Failure]:
        """Public author page: the profile plus the author's visible posts."""
        user = await self.session.get(User, user_id)
        if user is None:
            return NOT_FOUND
        posts = await PostService(self.session).list_public(author_id=user.id, now=now)
        return user, posts
