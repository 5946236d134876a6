"""
Persistence contract for identity records and its SQLAlchemy implementation.
"""

from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.kernel.identity.exceptions import ConflictError
from src.kernel.models.user import Address, Phone, User
from src.logging_config import get_logger

logger = get_logger(__name__)

R = TypeVar("R", User, Address, Phone)
S = TypeVar("S", Address, Phone)


class IdentityRepository(ABC):
    """
    Storage operations the identity service depends on.

    Emails reach this layer already normalized.
    """

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_id(self, kind: Type[S], record_id: int) -> Optional[S]:
        """Look up an Address or Phone by its identifier."""

    @abstractmethod
    async def save(self, entity: R) -> R:
        """
        Insert a record without an id, or update the stored record with the
        same id. Returns the stored instance.

        Raises:
            ConflictError: a user with the same email already exists
        """

    @abstractmethod
    async def delete_by_email(self, email: str) -> None:
        """Delete a user and its sub-records. Deleting an absent email is a no-op."""


class SqlAlchemyIdentityRepository(IdentityRepository):
    """IdentityRepository backed by an AsyncSession. Does not commit."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists_by_email(self, email: str) -> bool:
        query = select(exists().where(User.email == email))
        result = await self.session.execute(query)
        return bool(result.scalar())

    async def find_by_email(self, email: str) -> Optional[User]:
        # populate_existing: reload collections already held in the identity map
        query = select(User).where(User.email == email).execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_id(self, kind: Type[S], record_id: int) -> Optional[S]:
        return await self.session.get(kind, record_id, populate_existing=True)

    async def save(self, entity: R) -> R:
        if entity.id is None:
            self.session.add(entity)
            stored = entity
        else:
            stored = await self.session.merge(entity)

        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            if isinstance(entity, User):
                logger.warning(
                    "Unique constraint rejected user",
                    extra={"email": entity.email},
                )
                raise ConflictError(entity.email) from exc
            raise
        return stored

    async def delete_by_email(self, email: str) -> None:
        user = await self.find_by_email(email)
        if user is None:
            return
        await self.session.delete(user)
        await self.session.flush()
