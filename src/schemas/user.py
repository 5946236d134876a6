"""
User, address and phone schemas.

Create schemas carry no identifiers: ids are assigned by storage and never
accepted from a client on create paths. Update schemas make every field
optional; a field left out (or sent as null) keeps its stored value.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AddressCreate(BaseModel):
    """Address registration request."""

    street: Optional[str] = Field(None, max_length=255)
    number: Optional[str] = Field(None, max_length=20)
    complement: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    postal_code: Optional[str] = Field(None, max_length=20)


class AddressUpdate(AddressCreate):
    """Address partial update request."""


class AddressResponse(BaseModel):
    """Address as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    user_id: int


class PhoneCreate(BaseModel):
    """Phone registration request."""

    number: Optional[str] = Field(None, max_length=10)
    area_code: Optional[str] = Field(None, max_length=3)


class PhoneUpdate(PhoneCreate):
    """Phone partial update request."""


class PhoneResponse(BaseModel):
    """Phone as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    number: Optional[str] = None
    area_code: Optional[str] = None
    user_id: int


class UserCreate(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    addresses: List[AddressCreate] = Field(default_factory=list)
    phones: List[PhoneCreate] = Field(default_factory=list)


class UserUpdate(BaseModel):
    """
    Profile update request.

    Only name and password are applied. An email sent here is ignored: the
    account being updated is always the one named by the bearer token.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=1, max_length=128)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """
    User as returned to clients.

    password holds the stored bcrypt hash, never the plaintext, and is null
    when settings.expose_password_hash is off.
    """

    id: int
    name: str
    email: str
    password: Optional[str] = None
    addresses: List[AddressResponse] = Field(default_factory=list)
    phones: List[PhoneResponse] = Field(default_factory=list)
