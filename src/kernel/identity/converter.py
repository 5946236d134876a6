"""
Mapping between API schemas and persisted identity records.

All functions are pure: they build new objects and never touch a session.
Merges return a fresh, detached copy that keeps the stored identifier, which
the repository saves with Session.merge().
"""

from typing import Iterable, List, Optional

from src.kernel.models.user import Address, Phone, User
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

ADDRESS_FIELDS = ("street", "number", "complement", "city", "state", "postal_code")
PHONE_FIELDS = ("number", "area_code")


def normalize_email(email: str) -> str:
    """Emails are compared and stored lower-cased and trimmed."""
    return email.strip().lower()


def _pick(incoming, current):
    return current if incoming is None else incoming


# External -> persisted

def to_address_entity(data: AddressCreate, user_id: Optional[int] = None) -> Address:
    return Address(user_id=user_id, **{f: getattr(data, f) for f in ADDRESS_FIELDS})


def to_phone_entity(data: PhoneCreate, user_id: Optional[int] = None) -> Phone:
    return Phone(user_id=user_id, **{f: getattr(data, f) for f in PHONE_FIELDS})


def to_user_entity(data: UserCreate, password_hash: str) -> User:
    """
    Build a new User from a registration request.

    The caller hashes the password; this function never sees plaintext
    going into storage.
    """
    return User(
        name=data.name,
        email=normalize_email(data.email),
        password_hash=password_hash,
        addresses=[to_address_entity(a) for a in data.addresses],
        phones=[to_phone_entity(p) for p in data.phones],
    )


# Persisted -> external

def to_address_response(address: Address) -> AddressResponse:
    return AddressResponse.model_validate(address)


def to_phone_response(phone: Phone) -> PhoneResponse:
    return PhoneResponse.model_validate(phone)


def to_address_responses(addresses: Iterable[Address]) -> List[AddressResponse]:
    return [to_address_response(a) for a in addresses]


def to_phone_responses(phones: Iterable[Phone]) -> List[PhoneResponse]:
    return [to_phone_response(p) for p in phones]


def to_user_response(user: User, include_password_hash: bool = True) -> UserResponse:
    """
    Convert a stored user for the outside world.

    include_password_hash mirrors settings.expose_password_hash.
    """
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        password=user.password_hash if include_password_hash else None,
        addresses=to_address_responses(user.addresses),
        phones=to_phone_responses(user.phones),
    )


# Partial-update merges

def merge_user(data: UserUpdate, user: User, password_hash: Optional[str] = None) -> User:
    """
    Apply a profile update onto a stored user.

    Name and password overwrite only when supplied. Email is never changed.
    password_hash is the already-hashed replacement, or None to keep the
    stored one.
    """
    return User(
        id=user.id,
        name=_pick(data.name, user.name),
        email=user.email,
        password_hash=_pick(password_hash, user.password_hash),
        addresses=list(user.addresses),
        phones=list(user.phones),
    )


def merge_address(data: AddressUpdate, address: Address) -> Address:
    merged = {f: _pick(getattr(data, f), getattr(address, f)) for f in ADDRESS_FIELDS}
    return Address(id=address.id, user_id=address.user_id, **merged)


def merge_phone(data: PhoneUpdate, phone: Phone) -> Phone:
    merged = {f: _pick(getattr(data, f), getattr(phone, f)) for f in PHONE_FIELDS}
    return Phone(id=phone.id, user_id=phone.user_id, **merged)
