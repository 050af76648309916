"""Database initialization utilities."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.config import settings
from clinic_booking.core.security import hash_password
from clinic_booking.db.base import Base
from clinic_booking.db.session import engine
from clinic_booking.models.slot import Slot
from clinic_booking.models.user import User, UserRole
from clinic_booking.services.scheduling import SchedulingService

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = (
    {
        "name": "Clinic Admin",
        "email": "admin@example.com",
        "password": "admin123",
        "role": UserRole.ADMIN,
    },
    {
        "name": "Demo Patient",
        "email": "patient@example.com",
        "password": "patient123",
        "role": UserRole.PATIENT,
    },
)


async def create_tables() -> None:
    """Create all database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables() -> None:
    """Drop all database tables (use with caution)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")


async def create_default_users(session: AsyncSession) -> list[User]:
    """Create the default admin and patient accounts when absent.

    Returns:
        Accounts created by this call
    """
    created: list[User] = []
    for account in DEFAULT_ACCOUNTS:
        result = await session.execute(select(User).where(User.email == account["email"]))
        if result.scalar_one_or_none():
            continue

        user = User(
            name=account["name"],
            email=account["email"],
            hashed_password=hash_password(account["password"]),
            role=account["role"].value,
            is_active=True,
        )
        session.add(user)
        created.append(user)

    if created:
        await session.commit()
        logger.warning(
            "Created default accounts with well-known passwords: "
            + ", ".join(user.email for user in created)
        )
    else:
        logger.info("Default accounts already exist, skipping creation")

    return created


async def seed_demo_slots(session: AsyncSession, days: int | None = None) -> int:
    """Generate slots for the coming days if the slot table is empty.

    Returns:
        Number of slots created
    """
    result = await session.execute(select(func.count()).select_from(Slot))
    if result.scalar_one() > 0:
        logger.info("Slots already present, skipping demo slot generation")
        return 0

    outcome = await SchedulingService(session).generate_slots(
        days=days or settings.default_generate_days,
    )
    return outcome.count


async def init_db(session: AsyncSession, seed_demo_data: bool = False) -> None:
    """Initialize database with required data.

    Args:
        session: Database session
        seed_demo_data: Also generate demo slots when none exist
    """
    await create_default_users(session)
    if seed_demo_data:
        await seed_demo_slots(session)
    logger.info("Database initialization complete")
