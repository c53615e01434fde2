"""
Category and tag models, plus the post association tables.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from artibrain.kernel.models.base import Base, generate_uuid

if TYPE_CHECKING:
    from artibrain.kernel.models.post import Post


post_categories = Table(
    "post_categories",
    Base.metadata,
    Column("post_id", Uuid(), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid(), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)

post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Uuid(), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid(), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class TaxonomyMixin:
    """Named, slugged record."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(120),
        unique=True,
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class Category(Base, TaxonomyMixin):
    __tablename__ = "categories"

    posts: Mapped[List["Post"]] = relationship(
        "Post",
        secondary=post_categories,
        back_populates="categories",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category {self.slug}>"


class Tag(Base, TaxonomyMixin):
    __tablename__ = "tags"

    posts: Mapped[List["Post"]] = relationship(
        "Post",
        secondary=post_tags,
        back_populates="tags",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Tag {self.slug}>"
