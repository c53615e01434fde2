"""
Post service: public reads and role-gated post management.

Every mutating method asks the authorization policy before touching the
session and routes status changes through the publication lifecycle.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from artibrain.kernel.errors import CONFLICT, FORBIDDEN, INVALID_REQUEST, INVALID_STATE_REQUEST, NOT_FOUND, Failure, is_failure
from artibrain.kernel.events.event_store import EventStore
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.event_log import EventType
from artibrain.kernel.models.post import Post
from artibrain.kernel.models.taxonomy import Category, Tag
from artibrain.kernel.models.user import UserRole
from artibrain.kernel.permissions.policy import Action, ResourceKind, authorize_principal, may_ever, role_of
from artibrain.logging_config import get_logger
from artibrain.orchestration.publication import (
    ContentItem,
    initial_item,
    is_publicly_visible,
    parse_status,
    public_visibility_clause,
    transition,
)
from artibrain.schemas.post import PostCreate, PostUpdate
from artibrain.services.slugs import slugify
from artibrain.services.store import exists_where, flush_or_conflict, load_all_by_id

logger = get_logger(__name__)

# Plain fields a PostUpdate may carry straight onto the row
_EDITABLE_FIELDS = ("title", "content", "excerpt", "featured_image")


def _post_query():
    return select(Post).options(
        selectinload(Post.author),
        selectinload(Post.categories),
        selectinload(Post.tags),
    )


class PostService:
    """Post reads and writes on behalf of an explicit principal."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    # ------------------------------------------------------------------
    # Public reads
    # ------------------------------------------------------------------

    async def list_public(
        self,
        author_id: Optional[uuid.UUID] = None,
        category_slug: Optional[str] = None,
        tag_slug: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Post]:
        """Publicly visible posts, newest publication first."""
        query = _post_query().where(public_visibility_clause(now))
        if author_id is not None:
            query = query.where(Post.author_id == author_id)
        if category_slug:
            query = query.where(Post.categories.any(Category.slug == category_slug))
        if tag_slug:
            query = query.where(Post.tags.any(Tag.slug == tag_slug))
        query = query.order_by(Post.published_at.desc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_public_by_slug(
        self,
        slug: str,
        now: Optional[datetime] = None,
    ) -> Union[Post, Failure]:
        """A visible post, or NOT_FOUND for anything else (never FORBIDDEN)."""
        query = _post_query().where(Post.slug == slug, public_visibility_clause(now))
        result = await self.session.execute(query)
        post = result.scalar_one_or_none()
        return post if post is not None else NOT_FOUND

    # ------------------------------------------------------------------
    # Managed reads
    # ------------------------------------------------------------------

    async def list_managed(
        self,
        principal: Optional[Principal],
        status: Optional[str] = None,
        author_id: Optional[uuid.UUID] = None,
    ) -> Union[List[Post], Failure]:
        """
        Posts in every status for staff roles.

        Anonymous callers are refused. READER principals pass the read check
        but stay limited to what the public can see.
        """
        if principal is None or not authorize_principal(principal, Action.READ, ResourceKind.POST).allowed:
            return FORBIDDEN

        query = _post_query()
        if role_of(principal) == UserRole.READER:
            query = query.where(public_visibility_clause())
        if status is not None:
            wanted = parse_status(status)
            if wanted is None:
                return INVALID_STATE_REQUEST
            query = query.where(Post.status == wanted.value)
        if author_id is not None:
            query = query.where(Post.author_id == author_id)
        query = query.order_by(Post.updated_at.desc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_managed(
        self,
        principal: Optional[Principal],
        post_id: uuid.UUID,
    ) -> Union[Post, Failure]:
        if principal is None or not authorize_principal(principal, Action.READ, ResourceKind.POST).allowed:
            return FORBIDDEN
        post = await self._load(post_id)
        if post is None:
            return NOT_FOUND
        if role_of(principal) == UserRole.READER and not is_publicly_visible(ContentItem.from_post(post)):
            return NOT_FOUND
        return post

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(
        self,
        principal: Optional[Principal],
        data: PostCreate,
        ip_address: Optional[str] = None,
    ) -> Union[Post, Failure]:
        """
        Create a post owned by ``principal``.

        The new post starts as a draft and is then moved to the requested
        status, so creation obeys the same lifecycle rules as later edits.
        """
        if principal is None or not authorize_principal(principal, Action.CREATE, ResourceKind.POST).allowed:
            return FORBIDDEN

        item = transition(initial_item(principal.id), data.status, principal, publish_at=data.publish_at)
        if is_failure(item):
            return item

        slug = slugify(data.slug or data.title)
        if not slug:
            return INVALID_REQUEST
        if await exists_where(self.session, Post, Post.slug == slug):
            return CONFLICT

        categories = await load_all_by_id(self.session, Category, data.category_ids)
        if is_failure(categories):
            return categories
        tags = await load_all_by_id(self.session, Tag, data.tag_ids)
        if is_failure(tags):
            return tags

        post = Post(
            title=data.title,
            slug=slug,
            content=data.content,
            excerpt=data.excerpt,
            featured_image=data.featured_image,
            author_id=principal.id,
            categories=categories,
            tags=tags,
        )
        item.apply_to(post)
        self.session.add(post)

        conflict = await flush_or_conflict(self.session)
        if conflict is not None:
            return conflict

        await self.event_store.log(
            event_type=EventType.POST_CREATED,
            entity_type="post",
            entity_id=post.id,
            user_id=principal.id,
            payload={"slug": post.slug, "status": item.status},
            ip_address=ip_address,
        )
        logger.info(
            "Post created",
            extra={"post_id": post.id, "status": item.status, "user_id": principal.id},
        )
        return await self._load(post.id)

    async def update(
        self,
        principal: Optional[Principal],
        post_id: uuid.UUID,
        data: PostUpdate,
        ip_address: Optional[str] = None,
    ) -> Union[Post, Failure]:
        """
        Apply a partial edit.

        Everything is validated before the row changes, so a rejected
        request leaves the post untouched.
        """
        post = await self._load_for(principal, Action.UPDATE, post_id)
        if is_failure(post):
            return post

        fields = data.model_dump(exclude_unset=True)
        changes: Dict[str, Any] = {}

        before = ContentItem.from_post(post)
        after = before
        if fields.get("status") is not None or fields.get("publish_at") is not None:
            after = transition(
                before,
                fields.get("status") or before.status,
                principal,
                publish_at=fields.get("publish_at"),
            )
            if is_failure(after):
                return after

        # Titles can change freely; the slug (and so the URL) only on request
        new_slug = None
        if fields.get("slug") is not None:
            new_slug = slugify(fields["slug"])
            if not new_slug:
                return INVALID_REQUEST
        if new_slug is not None and new_slug != post.slug:
            if await exists_where(self.session, Post, Post.slug == new_slug, Post.id != post.id):
                return CONFLICT

        categories = None
        if fields.get("category_ids") is not None:
            categories = await load_all_by_id(self.session, Category, fields["category_ids"])
            if is_failure(categories):
                return categories
        tags = None
        if fields.get("tag_ids") is not None:
            tags = await load_all_by_id(self.session, Tag, fields["tag_ids"])
            if is_failure(tags):
                return tags

        for name in _EDITABLE_FIELDS:
            if name in fields and fields[name] is not None:
                value = fields[name]
                if getattr(post, name) != value:
                    setattr(post, name, value)
                    changes[name] = value if name != "content" else "<document>"
        if new_slug and new_slug != post.slug:
            post.slug = new_slug
            changes["slug"] = new_slug
        if categories is not None:
            post.categories = categories
            changes["category_ids"] = [c.id for c in categories]
        if tags is not None:
            post.tags = tags
            changes["tag_ids"] = [t.id for t in tags]
        if after != before:
            after.apply_to(post)

        conflict = await flush_or_conflict(self.session)
        if conflict is not None:
            return conflict

        if changes:
            await self.event_store.log(
                event_type=EventType.POST_UPDATED,
                entity_type="post",
                entity_id=post.id,
                user_id=principal.id,
                payload=changes,
                ip_address=ip_address,
            )
        if after != before:
            await self._log_status_change(principal, post.id, before, after, ip_address)

        return await self._load(post.id)

    async def change_status(
        self,
        principal: Optional[Principal],
        post_id: uuid.UUID,
        status: str,
        publish_at: Optional[datetime] = None,
        ip_address: Optional[str] = None,
    ) -> Union[Post, Failure]:
        """Move a post through the lifecycle. Re-requesting the current status changes nothing."""
        post = await self._load_for(principal, Action.UPDATE, post_id)
        if is_failure(post):
            return post

        before = ContentItem.from_post(post)
        after = transition(before, status, principal, publish_at=publish_at)
        if is_failure(after):
            return after
        if after == before:
            return post

        after.apply_to(post)
        await self.session.flush()
        await self._log_status_change(principal, post.id, before, after, ip_address)
        return await self._load(post.id)

    async def delete(
        self,
        principal: Optional[Principal],
        post_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Optional[Failure]:
        """Delete a post. Returns None on success."""
        post = await self._load_for(principal, Action.DELETE, post_id)
        if is_failure(post):
            return post

        slug = post.slug
        await self.session.delete(post)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.POST_DELETED,
            entity_type="post",
            entity_id=post_id,
            user_id=principal.id,
            payload={"slug": slug},
            ip_address=ip_address,
        )
        logger.info("Post deleted", extra={"post_id": post_id, "user_id": principal.id})
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, post_id: uuid.UUID) -> Optional[Post]:
        query = _post_query().where(Post.id == post_id).execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def _load_for(
        self,
        principal: Optional[Principal],
        action: Action,
        post_id: uuid.UUID,
    ) -> Union[Post, Failure]:
        """
        Fetch a post the principal means to change.

        Roles that could never perform ``action`` on a post are refused
        before the lookup, so they can't discover which ids exist.
        """
        if principal is None or not may_ever(principal, action, ResourceKind.POST):
            return FORBIDDEN
        post = await self._load(post_id)
        if post is None:
            return NOT_FOUND
        if not authorize_principal(principal, action, ResourceKind.POST, owner_id=post.author_id).allowed:
            logger.info(
                "Post change refused",
                extra={"post_id": post_id, "action": action, "user_id": principal.id},
            )
            return FORBIDDEN
        return post

    async def _log_status_change(
        self,
        principal: Principal,
        post_id: uuid.UUID,
        before: ContentItem,
        after: ContentItem,
        ip_address: Optional[str],
    ) -> None:
        await self.event_store.log(
            event_type=EventType.POST_STATUS_CHANGED,
            entity_type="post",
            entity_id=post_id,
            user_id=principal.id,
            payload={
                "from_status": before.status,
                "to_status": after.status,
                "published_at": after.published_at,
            },
            ip_address=ip_address,
        )
        logger.info(
            "Post status changed",
            extra={
                "post_id": post_id,
                "from_status": before.status,
                "to_status": after.status,
            },
        )
