"""
Kernel data models.
"""

from artibrain.kernel.models.base import Base, TimestampMixin, generate_uuid
from artibrain.kernel.models.user import User, UserRole
from artibrain.kernel.models.taxonomy import Category, Tag, post_categories, post_tags
from artibrain.kernel.models.post import Post, PostStatus
from artibrain.kernel.models.event_log import EventLog, EventType

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "User",
    "UserRole",
    "Category",
    "Tag",
    "post_categories",
    "post_tags",
    "Post",
    "PostStatus",
    "EventLog",
    "EventType",
]
