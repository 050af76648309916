"""Slot administration: bulk generation, manual creation and removal.

Admin-only write paths for the slot inventory. Each public method is its
own unit of work and commits on success.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.config import settings
from clinic_booking.core.errors import (
    InvalidDateFormat,
    InvalidDays,
    MissingDates,
    SlotNotFound,
)
from clinic_booking.core.logging import audit_logger
from clinic_booking.models.slot import Slot
from clinic_booking.models.user import UserRole
from clinic_booking.services.availability import generate_weekday_slots
from clinic_booking.services.slot_store import SlotStore
from clinic_booking.utils.ids import is_valid_id
from clinic_booking.utils.time import Clock, parse_datetime, utc_now

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of a bulk generation run."""

    count: int
    start_date: date
    end_date: date


class SchedulingService:
    """Service for administering the slot inventory."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now) -> None:
        self.session = session
        self.clock = clock
        self.slots = SlotStore(session)

    async def generate_slots(
        self,
        days: int | None = None,
        actor_id: str | None = None,
    ) -> GenerationResult:
        """Create weekday slots for ``days`` days starting tomorrow.

        Windows that already exist are skipped, so running this twice over
        the same range creates nothing the second time.

        Args:
            days: Number of calendar days to cover (default from settings)
            actor_id: Admin performing the generation, for the audit trail

        Returns:
            Number of slots created and the covered date range

        Raises:
            InvalidDays: If days is outside ``1..max_generate_days``
            SlotExists: If a concurrent run inserted the same windows
        """
        if days is None:
            days = settings.default_generate_days

        if days < 1 or days > settings.max_generate_days:
            raise InvalidDays(f"Days must be between 1 and {settings.max_generate_days}")

        start_date = self.clock().date() + timedelta(days=1)
        end_date = start_date + timedelta(days=days - 1)

        windows = generate_weekday_slots(start_date, days)
        existing = await self.slots.existing_windows(windows)
        fresh = [window for window in windows if window not in existing]

        created = await self.slots.create_many(fresh)
        await self.session.commit()

        logger.info(
            f"Generated {len(created)} slots for {start_date} to {end_date} "
            f"({len(existing)} already present)"
        )
        audit_logger.log(
            action="generate_slots",
            actor_role=UserRole.ADMIN.value,
            actor_id=actor_id or "system",
            entity_type="slot",
            entity_id=f"{start_date.isoformat()}..{end_date.isoformat()}",
            metadata={"days": days, "created": len(created)},
        )

        return GenerationResult(count=len(created), start_date=start_date, end_date=end_date)

    async def add_slot(
        self,
        start_raw: str | None,
        end_raw: str | None,
        actor_id: str | None = None,
    ) -> Slot:
        """Create one slot from ISO-8601 instants.

        Raises:
            MissingDates: If either instant is absent
            InvalidDateFormat: If either instant does not parse
            InvalidTimeRange: If start is not before end
            SlotExists: If the exact window already exists
        """
        if not start_raw or not end_raw:
            raise MissingDates("Start and end times are required")

        try:
            start_at = parse_datetime(start_raw)
            end_at = parse_datetime(end_raw)
        except ValueError:
            raise InvalidDateFormat("Invalid date format. Use ISO 8601")

        slot = await self.slots.create(start_at, end_at)
        await self.session.commit()

        audit_logger.log(
            action="create_slot",
            actor_role=UserRole.ADMIN.value,
            actor_id=actor_id or "system",
            entity_type="slot",
            entity_id=slot.id,
            metadata={"start_at": slot.start_at.isoformat(), "end_at": slot.end_at.isoformat()},
        )

        return slot

    async def remove_slot(self, slot_id: str, actor_id: str | None = None) -> None:
        """Delete an unbooked slot, keeping past bookings of it as history.

        Raises:
            SlotNotFound: If absent or the ID is malformed
            SlotBooked: If the slot is currently booked
        """
        if not is_valid_id(slot_id):
            raise SlotNotFound()

        await self.slots.delete(slot_id)
        await self.session.commit()

        audit_logger.log(
            action="delete_slot",
            actor_role=UserRole.ADMIN.value,
            actor_id=actor_id or "system",
            entity_type="slot",
            entity_id=slot_id,
        )
