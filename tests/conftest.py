"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import StaticPool  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from clinic_booking.api.deps import get_clock  # noqa: E402
from clinic_booking.db.base import Base  # noqa: E402
from clinic_booking.db.session import get_db  # noqa: E402
from clinic_booking.main import app  # noqa: E402
from clinic_booking.models.slot import Slot  # noqa: E402
from clinic_booking.models.user import User, UserRole  # noqa: E402
from tests.factories import FIXED_NOW, auth_headers, make_slot, make_user, utc  # noqa: E402

# Use SQLite for testing (simpler than spinning up postgres)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def async_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture(scope="function")
async def client(
    async_session: AsyncSession,
    clock: Callable[[], datetime],
) -> AsyncGenerator[AsyncClient, None]:
    """Create HTTP test client with overridden dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def patient_user(async_session: AsyncSession) -> User:
    """Create a test patient."""
    return await make_user(async_session, "patient@example.com", name="Pat Patient")


@pytest.fixture
async def other_patient(async_session: AsyncSession) -> User:
    """Create a second test patient."""
    return await make_user(async_session, "other@example.com", name="Olive Other")


@pytest.fixture
async def admin_user(async_session: AsyncSession) -> User:
    """Create a test admin user."""
    return await make_user(
        async_session,
        "admin@example.com",
        role=UserRole.ADMIN,
        name="Ada Admin",
        password="adminpassword123",
    )


@pytest.fixture
async def future_slot(async_session: AsyncSession) -> Slot:
    """Unbooked slot on Monday 2025-08-25 09:00-09:30."""
    return await make_slot(async_session, utc(2025, 8, 25, 9, 0))


@pytest.fixture
async def past_slot(async_session: AsyncSession) -> Slot:
    """Unbooked slot that started before FIXED_NOW."""
    return await make_slot(async_session, utc(2025, 8, 19, 9, 0))


@pytest.fixture
def patient_headers(patient_user: User) -> dict[str, str]:
    return auth_headers(patient_user)


@pytest.fixture
def other_patient_headers(other_patient: User) -> dict[str, str]:
    return auth_headers(other_patient)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)
