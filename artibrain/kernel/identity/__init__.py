"""
Identity core - credentials, principals and session tokens.
"""

from artibrain.kernel.identity.password import PasswordHasher, hash_password, verify_password
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.identity.session import (
    SessionClaims,
    SessionToken,
    SessionTokenManager,
    decode_session_token,
    issue_session_token,
)
from artibrain.kernel.identity.identity_service import IdentityService, normalize_email

__all__ = [
    "PasswordHasher",
    "hash_password",
    "verify_password",
    "Principal",
    "SessionClaims",
    "SessionToken",
    "SessionTokenManager",
    "decode_session_token",
    "issue_session_token",
    "IdentityService",
    "normalize_email",
]
