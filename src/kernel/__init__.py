"""
Kernel Layer

- Identity records (users, addresses, phones) and their persistence contract
- Credential hashing and stateless bearer tokens

Invariants:
- Email is unique across users (checked first, enforced by the schema)
- Only password hashes are stored
- Authenticated operations act on the token subject, never on a client-supplied email
"""

from src.kernel.models import Base, User, Address, Phone
from src.kernel.identity import (
    IdentityService,
    IdentityRepository,
    SqlAlchemyIdentityRepository,
    TokenService,
    PasswordHasher,
)

__all__ = [
    # Models
    "Base",
    "User",
    "Address",
    "Phone",
    # Identity
    "IdentityService",
    "IdentityRepository",
    "SqlAlchemyIdentityRepository",
    "TokenService",
    "PasswordHasher",
]
