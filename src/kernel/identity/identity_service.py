"""
Identity service for user, address and phone operations.
"""

from typing import Optional

from src.config import get_settings
from src.kernel.identity import converter
from src.kernel.identity.exceptions import ConflictError, NotFoundError
from src.kernel.identity.jwt import TokenResponse, TokenService, get_token_service
from src.kernel.identity.password import PasswordHasher
from src.kernel.identity.repository import IdentityRepository
from src.kernel.models.user import Address, Phone, User
from src.logging_config import get_logger
from src.schemas.user import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    PhoneCreate,
    PhoneResponse,
    PhoneUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)

logger = get_logger(__name__)


class IdentityService:
    """
    Service for user identity operations.

    Handles registration, login, profile updates and the addresses and
    phones filed under a user. The acting user for authenticated calls is
    always the subject of the bearer token, never a client-supplied email.
    """

    def __init__(
        self,
        repository: IdentityRepository,
        token_service: Optional[TokenService] = None,
        expose_password_hash: Optional[bool] = None,
        enforce_record_ownership: Optional[bool] = None,
    ):
        settings = get_settings()
        self.repository = repository
        self.token_service = token_service or get_token_service()
        self.expose_password_hash = (
            settings.expose_password_hash if expose_password_hash is None else expose_password_hash
        )
        self.enforce_record_ownership = (
            settings.enforce_record_ownership
            if enforce_record_ownership is None
            else enforce_record_ownership
        )

    def _to_response(self, user: User) -> UserResponse:
        return converter.to_user_response(user, include_password_hash=self.expose_password_hash)

    async def _resolve_user(self, authorization: Optional[str]) -> User:
        """Load the user named by the bearer token in an Authorization header."""
        email = self.token_service.resolve_subject(authorization)
        user = await self.repository.find_by_email(email)
        if user is None:
            raise NotFoundError(email)
        return user

    async def register_user(self, data: UserCreate) -> UserResponse:
        """
        Register a new user.

        Args:
            data: Registration request, plaintext password included

        Returns:
            The stored user

        Raises:
            ConflictError: If the email is already registered
        """
        email = converter.normalize_email(data.email)
        if await self.repository.exists_by_email(email):
            logger.info("Registration refused, email taken", extra={"email": email})
            raise ConflictError(email)

        user = converter.to_user_entity(data, PasswordHasher.hash(data.password))
        user = await self.repository.save(user)

        logger.info("User registered", extra={"user_id": user.id, "email": user.email})
        return self._to_response(user)

    async def authenticate(self, email: str, password: str) -> Optional[TokenResponse]:
        """
        Check credentials and issue a bearer token.

        Returns:
            TokenResponse if the password matches, None otherwise
        """
        email = converter.normalize_email(email)
        user = await self.repository.find_by_email(email)
        if user is None or not PasswordHasher.verify(password, user.password_hash):
            logger.warning("Failed login", extra={"email": email})
            return None

        if PasswordHasher.needs_rehash(user.password_hash):
            user.password_hash = PasswordHasher.hash(password)
            await self.repository.save(user)
            logger.info("Password hash upgraded", extra={"user_id": user.id})

        logger.info("User logged in", extra={"user_id": user.id})
        return self.token_service.issue_response(user.email)

    async def get_user_by_email(self, email: str) -> UserResponse:
        """
        Get a user by email.

        Raises:
            NotFoundError: If no user has this email
        """
        email = converter.normalize_email(email)
        user = await self.repository.find_by_email(email)
        if user is None:
            raise NotFoundError(email)
        return self._to_response(user)

    async def delete_user_by_email(self, email: str) -> None:
        """Delete a user with its addresses and phones. Absent emails are ignored."""
        email = converter.normalize_email(email)
        await self.repository.delete_by_email(email)
        logger.info("User deleted", extra={"email": email})

    async def update_profile(self, authorization: Optional[str], data: UserUpdate) -> UserResponse:
        """
        Update the token holder's name and/or password.

        Fields left out of data keep their stored values. A new password is
        hashed before it reaches the merge.

        Raises:
            MalformedHeaderError, InvalidTokenError: bad Authorization value
            NotFoundError: token subject has no account
        """
        user = await self._resolve_user(authorization)

        password_hash = PasswordHasher.hash(data.password) if data.password is not None else None
        merged = converter.merge_user(data, user, password_hash=password_hash)
        user = await self.repository.save(merged)

        logger.info(
            "Profile updated",
            extra={
                "user_id": user.id,
                "name_changed": data.name is not None,
                "password_changed": password_hash is not None,
            },
        )
        return self._to_response(user)

    async def register_address(
        self,
        authorization: Optional[str],
        data: AddressCreate,
    ) -> AddressResponse:
        """Attach a new address to the token holder."""
        user = await self._resolve_user(authorization)
        address = await self.repository.save(converter.to_address_entity(data, user_id=user.id))

        logger.info("Address registered", extra={"user_id": user.id, "address_id": address.id})
        return converter.to_address_response(address)

    async def register_phone(
        self,
        authorization: Optional[str],
        data: PhoneCreate,
    ) -> PhoneResponse:
        """Attach a new phone to the token holder."""
        user = await self._resolve_user(authorization)
        phone = await self.repository.save(converter.to_phone_entity(data, user_id=user.id))

        logger.info("Phone registered", extra={"user_id": user.id, "phone_id": phone.id})
        return converter.to_phone_response(phone)

    async def _check_owner(
        self,
        record: Address | Phone,
        resource: str,
        authorization: Optional[str],
    ) -> None:
        """
        Reject updates from anyone but the record's owner.

        Only active with enforce_record_ownership. A foreign record is
        reported as not found.
        """
        if not self.enforce_record_ownership:
            return
        user = await self._resolve_user(authorization)
        if record.user_id != user.id:
            logger.warning(
                "Update of foreign record refused",
                extra={"user_id": user.id, "resource": resource, "record_id": record.id},
            )
            raise NotFoundError(record.id, resource)

    async def update_address(
        self,
        address_id: int,
        data: AddressUpdate,
        authorization: Optional[str] = None,
    ) -> AddressResponse:
        """
        Update an address by id.

        Raises:
            NotFoundError: If no address has this id
        """
        address = await self.repository.find_by_id(Address, address_id)
        if address is None:
            raise NotFoundError(address_id, "address")
        await self._check_owner(address, "address", authorization)

        address = await self.repository.save(converter.merge_address(data, address))
        logger.info("Address updated", extra={"address_id": address.id})
        return converter.to_address_response(address)

    async def update_phone(
        self,
        phone_id: int,
        data: PhoneUpdate,
        authorization: Optional[str] = None,
    ) -> PhoneResponse:
        """
        Update a phone by id.

        Raises:
            NotFoundError: If no phone has this id
        """
        phone = await self.repository.find_by_id(Phone, phone_id)
        if phone is None:
            raise NotFoundError(phone_id, "phone")
        await self._check_owner(phone, "phone", authorization)

        phone = await self.repository.save(converter.merge_phone(data, phone))
        logger.info("Phone updated", extra={"phone_id": phone.id})
        return converter.to_phone_response(phone)
