"""
Signed session tokens carrying the principal's id and role.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from artibrain.config import get_settings
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.user import UserRole

TOKEN_TYPE = "session"


class SessionClaims(BaseModel):
    """Decoded session token."""
    
    sub: uuid.UUID
    role: UserRole
    name: str
    exp: datetime
    iat: datetime
    jti: str


class SessionToken(BaseModel):
    """Token handed to the client after login."""
    
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class SessionTokenManager:
    """
    Issues and verifies HS256 session tokens.
    
    The token is the whole session: nothing is stored server side, so a
    token stays valid until it expires.
    """
    
    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes
    
    def issue(
        self,
        principal: Principal,
        expires_delta: Optional[timedelta] = None,
    ) -> SessionToken:
        """
        Create a session token for an authenticated principal.
        
        Args:
            principal: The identity returned by authentication
            expires_delta: Optional custom lifetime
            
        Returns:
            SessionToken with the encoded JWT and its lifetime in seconds
        """
        now = datetime.now(timezone.utc)
        lifetime = expires_delta or timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": str(principal.id),
            "role": principal.role.value,
            "name": principal.name,
            "iat": now,
            "exp": now + lifetime,
            "jti": str(uuid.uuid4()),
            "type": TOKEN_TYPE,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return SessionToken(access_token=token, expires_in=int(lifetime.total_seconds()))
    
    def decode(self, token: str) -> Optional[SessionClaims]:
        """
        Verify and decode a session token.
        
        Returns None for a bad signature, an expired token, a token of
        another type, or claims that don't parse (e.g. an unknown role).
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        
        if payload.get("type") != TOKEN_TYPE:
            return None
        
        try:
            return SessionClaims(
                sub=uuid.UUID(payload["sub"]),
                role=UserRole(payload["role"]),
                name=payload.get("name", ""),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                jti=payload["jti"],
            )
        except (KeyError, ValueError, TypeError):
            return None


_manager: Optional[SessionTokenManager] = None


def get_session_manager() -> SessionTokenManager:
    """Get or create the default token manager."""
    global _manager
    if _manager is None:
        _manager = SessionTokenManager()
    return _manager


def issue_session_token(principal: Principal) -> SessionToken:
    return get_session_manager().issue(principal)


def decode_session_token(token: str) -> Optional[SessionClaims]:
    return get_session_manager().decode(token)
