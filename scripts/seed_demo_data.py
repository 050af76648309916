"""Seed a development database with default accounts and demo slots.

Usage:
    python -m scripts.seed_demo_data [--days N] [--create-tables] [--reset]
"""

import argparse
import asyncio
import logging

from clinic_booking.core.config import settings
from clinic_booking.core.logging import setup_logging
from clinic_booking.db.init_db import (
    create_default_users,
    create_tables,
    drop_tables,
    seed_demo_slots,
)
from clinic_booking.db.session import AsyncSessionLocal, engine

logger = logging.getLogger(__name__)


async def seed(days: int, with_tables: bool, reset: bool = False) -> None:
    if reset:
        await drop_tables()
        with_tables = True

    if with_tables:
        await create_tables()

    async with AsyncSessionLocal() as session:
        users = await create_default_users(session)
        slots = await seed_demo_slots(session, days=days)

    await engine.dispose()
    logger.info(f"Seed complete: {len(users)} accounts, {slots} slots")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.default_generate_days,
        help="Days of weekday slots to generate starting tomorrow",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from model metadata before seeding",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding (destroys data)",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(seed(args.days, args.create_tables, args.reset))


if __name__ == "__main__":
    main()
