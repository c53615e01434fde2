"""
The authenticated identity attached to a request.
"""

import uuid
from dataclasses import dataclass

from artibrain.kernel.models.user import User, UserRole


@dataclass(frozen=True)
class Principal:
    """Who is acting. Built once per request and passed explicitly."""

    id: uuid.UUID
    name: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, name=user.name, role=UserRole(user.role_value))
