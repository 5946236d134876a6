"""
Identity Core - Credentials, bearer tokens and user records.
"""

from src.kernel.identity.password import PasswordHasher, verify_password, hash_password
from src.kernel.identity.jwt import (
    TokenService,
    TokenClaims,
    TokenResponse,
    get_token_service,
    parse_authorization_header,
)
from src.kernel.identity.exceptions import (
    IdentityError,
    ConflictError,
    NotFoundError,
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
    MalformedHeaderError,
    SigningKeyError,
)
from src.kernel.identity.repository import IdentityRepository, SqlAlchemyIdentityRepository
from src.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "TokenService",
    "TokenClaims",
    "TokenResponse",
    "get_token_service",
    "parse_authorization_header",
    "IdentityError",
    "ConflictError",
    "NotFoundError",
    "AuthenticationError",
    "InvalidTokenError",
    "TokenExpiredError",
    "MalformedHeaderError",
    "SigningKeyError",
    "IdentityRepository",
    "SqlAlchemyIdentityRepository",
    "IdentityService",
]
