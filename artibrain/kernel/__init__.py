"""
Kernel layer: data models, identity, authorization and audit.

The authorization policy and the identity resolver are the only places
that decide who may act; services and handlers consult them and never
compare roles on their own.
"""

from artibrain.kernel.errors import ErrorKind, Failure, is_failure
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models import (
    Category,
    EventLog,
    EventType,
    Post,
    PostStatus,
    Tag,
    User,
    UserRole,
)
from artibrain.kernel.permissions.policy import Action, Decision, ResourceKind, authorize

__all__ = [
    "ErrorKind",
    "Failure",
    "is_failure",
    "Principal",
    "Category",
    "EventLog",
    "EventType",
    "Post",
    "PostStatus",
    "Tag",
    "User",
    "UserRole",
    "Action",
    "Decision",
    "ResourceKind",
    "authorize",
]
