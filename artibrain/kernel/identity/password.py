"""
Password hashing utilities using bcrypt.
"""

import bcrypt

# Work factor; bcrypt encodes it in the digest so older hashes still verify
BCRYPT_ROUNDS = 12

# bcrypt ignores everything past 72 bytes
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """Salted bcrypt digests with constant-time verification."""
    
    @staticmethod
    def hash(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
        """
        Hash a password using bcrypt.
        
        Args:
            password: Plain text password
            rounds: bcrypt cost factor
            
        Returns:
            The digest, e.g. ``$2b$12$...``
        """
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    
    @staticmethod
    def verify(plain_password: str, hashed_password: str) -> bool:
        """
        Check a password against a stored digest.
        
        A malformed digest verifies False instead of raising.
        """
        try:
            return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
        except ValueError:
            return False


def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher.verify(plain_password, hashed_password)
