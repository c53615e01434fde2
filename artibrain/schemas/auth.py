"""
Authentication schemas.
"""

import uuid

from pydantic import BaseModel, EmailStr

from artibrain.kernel.models.user import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PrincipalResponse(BaseModel):
    """The identity a token stands for."""
    
    id: uuid.UUID
    name: str
    role: UserRole


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: PrincipalResponse
