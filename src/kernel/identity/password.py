"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

import bcrypt

from src.config import get_settings

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Password hashing service."""

    @staticmethod
    def _rounds() -> int:
        return get_settings().bcrypt_rounds

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """
        Encode and truncate to the bcrypt limit.

        Applied identically on hash and verify; bcrypt>=5 raises on
        longer inputs.
        """
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    @staticmethod
    def hash(password: str, rounds: Optional[int] = None) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password
            rounds: Cost factor override (defaults to settings.bcrypt_rounds)

        Returns:
            Hashed password string
        """
        pwd_bytes = PasswordHasher._truncate_password(password)
        salt = bcrypt.gensalt(rounds=rounds or PasswordHasher._rounds())
        hashed = bcrypt.hashpw(pwd_bytes, salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        bcrypt.checkpw compares digests in constant time.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored hashed password

        Returns:
            True if password matches, False otherwise (including when the
            stored value is not a bcrypt hash)
        """
        if not hashed_password:
            return False
        try:
            pwd_bytes = PasswordHasher._truncate_password(plain_password)
            return bcrypt.checkpw(pwd_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            return False

    @staticmethod
    def needs_rehash(hashed_password: str) -> bool:
        """
        Check if a password hash was made with a different cost factor.

        bcrypt hashes look like $2b$12$<salt+digest>; the second field is
        the cost.
        """
        parts = hashed_password.split("$")
        if len(parts) < 4 or not parts[2].isdigit():
            return True
        return int(parts[2]) != PasswordHasher._rounds()


# Convenience functions
def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher.verify(plain_password, hashed_password)
