"""
Publication lifecycle for posts.

States are DRAFT, PUBLISHED and SCHEDULED, and any state may move to any
other. Transitions are pure: they take a ContentItem snapshot and return a
new one (or a Failure); the caller writes the result back to the store.

Public visibility is a separate rule from the stored status: a post is
visible only when it is PUBLISHED *and* its published_at has passed.
SCHEDULED is a label only. Nothing promotes a SCHEDULED post to PUBLISHED
when its time arrives; someone has to publish it explicitly.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from artibrain.kernel.errors import FORBIDDEN, INVALID_STATE_REQUEST, Failure
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.post import Post, PostStatus
from artibrain.kernel.permissions.policy import Action, ResourceKind, authorize_principal


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps (SQLite hands these back) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class ContentItem:
    """The lifecycle-relevant slice of a post."""

    id: Optional[uuid.UUID]
    author_id: uuid.UUID
    status: PostStatus
    published_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post: Post) -> "ContentItem":
        return cls(
            id=post.id,
            author_id=post.author_id,
            status=PostStatus(post.status),
            published_at=as_utc(post.published_at),
        )

    def apply_to(self, post: Post) -> None:
        post.status = self.status
        post.published_at = self.published_at


def initial_item(author_id: uuid.UUID) -> ContentItem:
    """Every new post starts as a draft with no publication time."""
    return ContentItem(id=None, author_id=author_id, status=PostStatus.DRAFT)


def parse_status(value: Union[PostStatus, str, None]) -> Optional[PostStatus]:
    if isinstance(value, PostStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PostStatus(value.strip().upper())
    except ValueError:
        return None


def transition(
    item: ContentItem,
    requested_status: Union[PostStatus, str],
    principal: Optional[Principal],
    *,
    now: Optional[datetime] = None,
    publish_at: Optional[datetime] = None,
) -> Union[ContentItem, Failure]:
    """
    Move ``item`` to ``requested_status`` on behalf of ``principal``.
    
    Args:
        item: Current snapshot of the post
        requested_status: Target status; anything outside the three states
            is INVALID_STATE_REQUEST
        principal: Acting identity (None for anonymous, which is refused)
        now: Clock reading, injectable for tests
        publish_at: Required for SCHEDULED and must lie in the future;
            sending one with any other target is INVALID_STATE_REQUEST
    
    Returns:
        The new snapshot, the unchanged ``item`` when nothing changes, or a
        Failure (FORBIDDEN / INVALID_STATE_REQUEST).
    """
    target = parse_status(requested_status)
    if target is None:
        return INVALID_STATE_REQUEST

    decision = authorize_principal(principal, Action.UPDATE, ResourceKind.POST, owner_id=item.author_id)
    if not decision.allowed:
        return FORBIDDEN

    now = as_utc(now) or utcnow()
    publish_at = as_utc(publish_at)

    # A publication time only means something for SCHEDULED
    if publish_at is not None and target != PostStatus.SCHEDULED:
        return INVALID_STATE_REQUEST

    if target == item.status:
        rescheduling = (
            target == PostStatus.SCHEDULED
            and publish_at is not None
            and publish_at != item.published_at
        )
        if not rescheduling:
            return item

    if target == PostStatus.DRAFT:
        return replace(item, status=PostStatus.DRAFT, published_at=None)

    if target == PostStatus.SCHEDULED:
        if publish_at is None or publish_at <= now:
            return INVALID_STATE_REQUEST
        return replace(item, status=PostStatus.SCHEDULED, published_at=publish_at)

    # PUBLISHED: an earlier publication time survives (re-publishing keeps
    # the original date); a missing or future one becomes "now".
    published_at = item.published_at
    if published_at is None or published_at > now:
        published_at = now
    return replace(item, status=PostStatus.PUBLISHED, published_at=published_at)


def is_publicly_visible(item: ContentItem, now: Optional[datetime] = None) -> bool:
    """Status gates visibility first; time only matters for PUBLISHED posts."""
    if item.status != PostStatus.PUBLISHED or item.published_at is None:
        return False
    return item.published_at <= (as_utc(now) or utcnow())


def public_visibility_clause(now: Optional[datetime] = None) -> ColumnElement[bool]:
    """``is_publicly_visible`` as a SQL filter for public queries."""
    return and_(
        Post.status == PostStatus.PUBLISHED.value,
        Post.published_at.is_not(None),
        Post.published_at <= (as_utc(now) or utcnow()),
    )
