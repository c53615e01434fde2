"""
User model: credential record and author profile.
"""

import uuid
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from artibrain.kernel.models.base import Base, TimestampMixin, generate_uuid

if TYPE_CHECKING:
    from artibrain.kernel.models.post import Post


class UserRole(str, Enum):
    """Roles a principal can hold. READER is also the role of anonymous callers."""
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    AUTHOR = "AUTHOR"
    READER = "READER"


class User(Base, TimestampMixin):
    """User account model."""
    
    __tablename__ = "users"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        String(20),
        default=UserRole.AUTHOR,
        nullable=False,
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    bio: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    posts: Mapped[List["Post"]] = relationship(
        "Post",
        back_populates="author",
        passive_deletes=True,
    )
    
    @property
    def role_value(self) -> str:
        # SQLite hands the column back as a plain str
        return self.role.value if hasattr(self.role, "value") else str(self.role)
    
    def __repr__(self) -> str:
        return f"<User {self.email}>"
