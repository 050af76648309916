"""Slot store: persistence of slot inventory.

The store flushes but never commits; the calling service owns the unit of
work so slot and booking writes can share one transaction.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.errors import (
    InvalidTimeRange,
    SlotBooked,
    SlotExists,
    SlotNotFound,
)
from clinic_booking.models.booking import Booking, BookingStatus
from clinic_booking.models.slot import Slot
from clinic_booking.utils.time import ensure_utc


class SlotStore:
    """Owns slot records: time windows and the booked flag."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, start_at: datetime, end_at: datetime) -> Slot:
        """Create a single slot.

        Raises:
            InvalidTimeRange: If ``start_at >= end_at``
            SlotExists: If a slot with the same window already exists
        """
        start_at, end_at = ensure_utc(start_at), ensure_utc(end_at)
        if start_at >= end_at:
            raise InvalidTimeRange()

        if await self.exists(start_at, end_at):
            raise SlotExists()

        slot = Slot(start_at=start_at, end_at=end_at, is_booked=False)
        self.session.add(slot)
        try:
            await self.session.flush()
        except IntegrityError:
            # Lost a race against an identical insert
            await self.session.rollback()
            raise SlotExists()

        return slot

    async def create_many(self, windows: Iterable[tuple[datetime, datetime]]) -> list[Slot]:
        """Insert several slots in one flush.

        Callers are expected to have filtered out existing windows; a
        concurrent insert of the same window surfaces as ``SlotExists``.
        """
        slots = [
            Slot(start_at=ensure_utc(start), end_at=ensure_utc(end), is_booked=False)
            for start, end in windows
        ]
        if not slots:
            return []

        self.session.add_all(slots)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise SlotExists("Some slots were created concurrently, please retry")

        return slots

    async def exists(self, start_at: datetime, end_at: datetime) -> bool:
        """Check whether a slot with exactly this window exists."""
        result = await self.session.execute(
            select(
                exists().where(
                    Slot.start_at == ensure_utc(start_at),
                    Slot.end_at == ensure_utc(end_at),
                )
            )
        )
        return bool(result.scalar())

    async def existing_windows(
        self,
        windows: Sequence[tuple[datetime, datetime]],
    ) -> set[tuple[datetime, datetime]]:
        """Return the subset of ``windows`` already present in the store."""
        if not windows:
            return set()

        lower = min(start for start, _ in windows)
        upper = max(start for start, _ in windows)
        result = await self.session.execute(
            select(Slot.start_at, Slot.end_at).where(
                Slot.start_at >= lower,
                Slot.start_at <= upper,
            )
        )
        present = {(ensure_utc(s), ensure_utc(e)) for s, e in result.all()}
        return {w for w in windows if (ensure_utc(w[0]), ensure_utc(w[1])) in present}

    async def find_by_id(self, slot_id: str) -> Slot | None:
        """Get a slot by ID."""
        result = await self.session.execute(select(Slot).where(Slot.id == slot_id))
        return result.scalar_one_or_none()

    async def find_in_range(
        self,
        start: datetime,
        end: datetime,
        include_booked: bool = True,
    ) -> Sequence[Slot]:
        """Slots whose start falls within ``[start, end]``, ascending by start."""
        query = select(Slot).where(
            Slot.start_at >= ensure_utc(start),
            Slot.start_at <= ensure_utc(end),
        )

        if not include_booked:
            query = query.where(Slot.is_booked == False)  # noqa: E712

        query = query.order_by(Slot.start_at.asc(), Slot.end_at.asc())

        result = await self.session.execute(query)
        return result.scalars().all()

    async def set_booked(self, slot_id: str, value: bool) -> Slot:
        """Set the booked flag with a single UPDATE.

        Raises:
            SlotNotFound: If no row matched ``slot_id``
        """
        result = await self.session.execute(
            update(Slot)
            .where(Slot.id == slot_id)
            .values(is_booked=value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise SlotNotFound()

        refreshed = await self.session.execute(
            select(Slot)
            .where(Slot.id == slot_id)
            .execution_options(populate_existing=True)
        )
        slot = refreshed.scalar_one_or_none()
        if slot is None:
            raise SlotNotFound()
        return slot

    async def delete(self, slot_id: str) -> None:
        """Delete an unbooked slot.

        Cancelled or completed bookings that referenced the slot are kept
        with their slot reference cleared.

        Raises:
            SlotNotFound: If absent
            SlotBooked: If the slot is booked or a confirmed booking holds it
        """
        slot = await self.find_by_id(slot_id)
        if slot is None:
            raise SlotNotFound()

        if slot.is_booked:
            raise SlotBooked()

        held = await self.session.execute(
            select(
                exists().where(
                    Booking.slot_id == slot_id,
                    Booking.status == BookingStatus.CONFIRMED.value,
                )
            )
        )
        if held.scalar():
            raise SlotBooked()

        await self.session.execute(
            update(Booking)
            .where(Booking.slot_id == slot_id)
            .values(slot_id=None)
            .execution_options(synchronize_session=False)
        )

        # Guard on is_booked again so a booking that landed in between wins
        result = await self.session.execute(
            delete(Slot)
            .where(Slot.id == slot_id, Slot.is_booked == False)  # noqa: E712
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise SlotBooked()

        self.session.expunge(slot)
