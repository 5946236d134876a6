"""
User, address and phone endpoints.

Identity errors raised by the service are rendered by the application's
IdentityError handler (409/404/401); routes only translate a failed login.
"""

from fastapi import APIRouter, HTTPException, Query, Response, status

from src.api.deps import AuthorizationHeader, Identity
from src.kernel.identity.jwt import TokenResponse
from src.schemas.common import ErrorResponse
from src.schemas.user import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    PhoneCreate,
    PhoneResponse,
    PhoneUpdate,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)

router = APIRouter()

AUTH_ERRORS = {401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register(data: UserCreate, identity: Identity):
    """
    Register a new user with optional addresses and phones.

    Fails with 409 when the email is already registered.
    """
    return await identity.register_user(data)


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, identity: Identity):
    """Exchange email and password for a bearer token."""
    token = await identity.authenticate(data.email, data.password)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


@router.get("", response_model=UserResponse, responses=NOT_FOUND)
async def get_user_by_email(identity: Identity, email: str = Query(..., min_length=1)):
    """Look up a user by email."""
    return await identity.get_user_by_email(email)


@router.delete("/{email}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_by_email(email: str, identity: Identity):
    """Delete a user and everything filed under it."""
    await identity.delete_user_by_email(email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("", response_model=UserResponse, responses=AUTH_ERRORS)
async def update_profile(
    data: UserUpdate,
    identity: Identity,
    authorization: AuthorizationHeader = None,
):
    """Update the token holder's name and/or password."""
    return await identity.update_profile(authorization, data)


@router.post(
    "/addresses",
    response_model=AddressResponse,
    status_code=status.HTTP_201_CREATED,
    responses=AUTH_ERRORS,
)
async def register_address(
    data: AddressCreate,
    identity: Identity,
    authorization: AuthorizationHeader = None,
):
    """Add an address to the token holder."""
    return await identity.register_address(authorization, data)


@router.put("/addresses", response_model=AddressResponse, responses=AUTH_ERRORS)
async def update_address(
    data: AddressUpdate,
    identity: Identity,
    address_id: int = Query(..., alias="id"),
    authorization: AuthorizationHeader = None,
):
    """Update an address by id."""
    return await identity.update_address(address_id, data, authorization=authorization)


@router.post(
    "/phones",
    response_model=PhoneResponse,
    status_code=status.HTTP_201_CREATED,
    responses=AUTH_ERRORS,
)
async def register_phone(
    data: PhoneCreate,
    identity: Identity,
    authorization: AuthorizationHeader = None,
):
    """Add a phone to the token holder."""
    return await identity.register_phone(authorization, data)


@router.put("/phones", response_model=PhoneResponse, responses=AUTH_ERRORS)
async def update_phone(
    data: PhoneUpdate,
    identity: Identity,
    phone_id: int = Query(..., alias="id"),
    authorization: AuthorizationHeader = None,
):
    """Update a phone by id."""
    return await identity.update_phone(phone_id, data, authorization=authorization)
