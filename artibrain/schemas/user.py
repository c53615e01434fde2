"""
User and author schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from artibrain.kernel.models.user import UserRole
from artibrain.schemas.common import require_text
from artibrain.schemas.post import AuthorSummary, PostSummary


class UserCreate(BaseModel):
    """Admin request to create an account."""
    
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole = UserRole.AUTHOR
    avatar_url: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = None
    
    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return require_text(v, "Name")


class UserUpdate(BaseModel):
    """Admin request to edit an account. A password, when given, replaces the old one."""
    
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    role: Optional[UserRole] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = None
    
    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v, "Name")


class UserResponse(BaseModel):
    """Account as seen by admins. Never includes the password hash."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AuthorProfileResponse(AuthorSummary):
    """Public author page."""
    
    bio: Optional[str] = None
    posts: List[PostSummary] = []

