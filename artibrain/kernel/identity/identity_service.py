"""
Identity resolver: credentials in, principal out.
"""

from functools import lru_cache
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.kernel.errors import INVALID_CREDENTIALS, Failure
from artibrain.kernel.identity.password import hash_password, verify_password
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


@lru_cache(maxsize=1)
def _dummy_digest() -> str:
    # Verified against when the email is unknown, so both failure paths
    # pay for one bcrypt check.
    return hash_password("not-a-real-password")


class IdentityService:
    """
    Resolves submitted credentials to a Principal.
    
    The only side effect is the credential lookup; recording the login and
    issuing a token belong to the caller.
    """
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def authenticate(self, email: str, password: str) -> Union[Principal, Failure]:
        """
        Authenticate an email/password pair.
        
        Returns:
            The Principal on success, otherwise INVALID_CREDENTIALS for both
            an unknown email and a wrong password.
        """
        user = await self.get_user_by_email(email)
        if user is None:
            verify_password(password, _dummy_digest())
            return INVALID_CREDENTIALS
        
        if not verify_password(password, user.password_hash):
            return INVALID_CREDENTIALS
        
        return Principal.from_user(user)
    
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()
