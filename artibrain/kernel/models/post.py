"""
Post model (the content item) and its publication status.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from sqlalchemy import DateTime, ForeignKey, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from artibrain.kernel.models.base import Base, TimestampMixin, generate_uuid
from artibrain.kernel.models.taxonomy import Category, Tag, post_categories, post_tags

if TYPE_CHECKING:
    from artibrain.kernel.models.user import User


class PostStatus(str, Enum):
    """Publication status of a post."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    SCHEDULED = "SCHEDULED"


class Post(Base, TimestampMixin):
    """Blog post. Status and published_at change only through the lifecycle."""
    
    __tablename__ = "posts"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(320),
        unique=True,
        index=True,
        nullable=False,
    )
    # Rich-text document, stored and served as-is
    content: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
    )
    excerpt: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    featured_image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    status: Mapped[PostStatus] = mapped_column(
        String(20),
        default=PostStatus.DRAFT,
        nullable=False,
        index=True,
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    
    author: Mapped["User"] = relationship(
        "User",
        back_populates="posts",
    )
    categories: Mapped[List[Category]] = relationship(
        Category,
        secondary=post_categories,
        back_populates="posts",
        passive_deletes=True,
    )
    tags: Mapped[List[Tag]] = relationship(
        Tag,
        secondary=post_tags,
        back_populates="posts",
        passive_deletes=True,
    )
    
    def __repr__(self) -> str:
        return f"<Post {self.slug} {self.status}>"
