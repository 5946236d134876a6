"""
Pytest fixtures for user registry tests.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

# Settings are read once and cached; configure the test environment first.
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.config import get_settings

get_settings.cache_clear()

from src.kernel.models.base import Base
from src.kernel.identity.identity_service import IdentityService
from src.kernel.identity.jwt import TokenService
from src.kernel.identity.repository import SqlAlchemyIdentityRepository
from src.schemas.user import AddressCreate, PhoneCreate, UserCreate


TEST_SECRET = os.environ["SECRET_KEY"]


class FakeClock:
    """Controllable clock for token expiry tests."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def token_service(clock: FakeClock) -> TokenService:
    """Token service with a test key and a controllable clock."""
    return TokenService(
        secret_key=TEST_SECRET,
        algorithm="HS256",
        expire_minutes=60,
        clock=clock,
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """In-memory SQLite engine; StaticPool keeps one shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session: AsyncSession) -> SqlAlchemyIdentityRepository:
    return SqlAlchemyIdentityRepository(db_session)


@pytest.fixture
def identity_service(
    repository: SqlAlchemyIdentityRepository,
    token_service: TokenService,
) -> IdentityService:
    return IdentityService(
        repository,
        token_service=token_service,
        expose_password_hash=True,
        enforce_record_ownership=False,
    )


@pytest.fixture
def ana() -> UserCreate:
    """Registration payload used across tests."""
    return UserCreate(
        name="Ana",
        email="ana@x.com",
        password="s3nha",
        addresses=[
            AddressCreate(
                street="Rua das Flores",
                number="42",
                complement="apto 3",
                city="Curitiba",
                state="PR",
                postal_code="80000-000",
            ),
        ],
        phones=[PhoneCreate(number="999990000", area_code="41")],
    )


@pytest.fixture
def auth_header(token_service: TokenService):
    """Build an Authorization header value for an email."""

    def _build(email: str) -> str:
        return f"Bearer {token_service.issue(email)}"

    return _build
