"""
Post schemas.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artibrain.kernel.models.post import PostStatus
from artibrain.schemas.common import require_text
from artibrain.schemas.taxonomy import TaxonomyResponse


class PostCreate(BaseModel):
    """
    New post.
    
    ``status`` is kept as a plain string so an unknown value reaches the
    lifecycle and is rejected there like any other bad state request.
    """
    
    title: str = Field(..., min_length=1, max_length=300)
    content: Any
    slug: Optional[str] = Field(None, max_length=320)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(None, max_length=500)
    status: str = "DRAFT"
    publish_at: Optional[datetime] = None
    category_ids: List[uuid.UUID] = []
    tag_ids: List[uuid.UUID] = []
    
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return require_text(v, "Title")


class PostUpdate(BaseModel):
    """Partial edit. Omitted fields are left alone."""
    
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[Any] = None
    slug: Optional[str] = Field(None, max_length=320)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = None
    publish_at: Optional[datetime] = None
    category_ids: Optional[List[uuid.UUID]] = None
    tag_ids: Optional[List[uuid.UUID]] = None
    
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v, "Title")


class StatusChangeRequest(BaseModel):
    status: str
    publish_at: Optional[datetime] = None


class AuthorSummary(BaseModel):
    """Public byline."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: uuid.UUID
    name: str
    avatar_url: Optional[str] = None


class PostSummary(BaseModel):
    """Listing card: everything but the body."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: uuid.UUID
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: PostStatus
    published_at: Optional[datetime] = None
    author: AuthorSummary
    categories: List[TaxonomyResponse] = []
    tags: List[TaxonomyResponse] = []


class PostResponse(PostSummary):
    content: Any
    created_at: datetime
    updated_at: datetime
