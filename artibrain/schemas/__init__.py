"""
Pydantic schemas for API request/response validation.
"""

from artibrain.schemas.auth import LoginRequest, PrincipalResponse, TokenResponse
from artibrain.schemas.common import HealthResponse, UploadResponse
from artibrain.schemas.post import (
    AuthorSummary,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
    StatusChangeRequest,
)
from artibrain.schemas.taxonomy import (
    TaxonomyCreate,
    TaxonomyListItem,
    TaxonomyResponse,
    TaxonomyUpdate,
)
from artibrain.schemas.user import (
    AuthorProfileResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "LoginRequest",
    "PrincipalResponse",
    "TokenResponse",
    "HealthResponse",
    "UploadResponse",
    "PostCreate",
    "PostResponse",
    "PostSummary",
    "PostUpdate",
    "StatusChangeRequest",
    "TaxonomyCreate",
    "TaxonomyListItem",
    "TaxonomyResponse",
    "TaxonomyUpdate",
    "AuthorProfileResponse",
    "AuthorSummary",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
