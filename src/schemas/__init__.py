"""
Pydantic schemas for API request/response validation.
"""

from src.schemas.user import (
    AddressCreate,
    AddressUpdate,
    AddressResponse,
    PhoneCreate,
    PhoneUpdate,
    PhoneResponse,
    UserCreate,
    UserUpdate,
    UserLogin,
    UserResponse,
)
from src.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    # Users
    "AddressCreate",
    "AddressUpdate",
    "AddressResponse",
    "PhoneCreate",
    "PhoneUpdate",
    "PhoneResponse",
    "UserCreate",
    "UserUpdate",
    "UserLogin",
    "UserResponse",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
