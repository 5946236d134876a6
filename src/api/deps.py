"""
FastAPI dependencies for database sessions, the identity service and the
Authorization header.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.kernel.identity.identity_service import IdentityService
from src.kernel.identity.jwt import TokenService, get_token_service
from src.kernel.identity.repository import SqlAlchemyIdentityRepository


DbSession = Annotated[AsyncSession, Depends(get_db)]
Tokens = Annotated[TokenService, Depends(get_token_service)]

# Passed through raw; the token service owns parsing and rejects bad forms.
AuthorizationHeader = Annotated[
    Optional[str],
    Header(description="Bearer token, as 'Bearer <token>'"),
]


def get_identity_service(db: DbSession, tokens: Tokens) -> IdentityService:
    """Build a request-scoped identity service over the request's session."""
    return IdentityService(SqlAlchemyIdentityRepository(db), token_service=tokens)


Identity = Annotated[IdentityService, Depends(get_identity_service)]
