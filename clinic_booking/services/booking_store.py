"""Booking store: persistence of bookings.

The partial unique index ``uq_bookings_slot_id_confirmed`` guarantees at
most one confirmed booking per slot regardless of any application-level
check. ``create`` turns a violation of that index into
``DuplicateActiveBooking``. ``cancel`` only ever moves a booking that is
still confirmed at write time, so a stale read cannot cancel twice.
"""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.errors import (
    BookingNotActive,
    BookingNotFound,
    DuplicateActiveBooking,
    SlotNotFound,
)
from clinic_booking.models.booking import Booking, BookingStatus
from clinic_booking.models.slot import Slot
from clinic_booking.utils.time import ensure_utc, utc_now


class BookingStore:
    """Owns booking records and the one-confirmed-booking-per-slot rule."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, user_id: str, slot_id: str) -> Booking:
        """Insert a confirmed booking and flush it.

        On a uniqueness violation the session is rolled back, so nothing
        else written in the same transaction survives.

        Raises:
            DuplicateActiveBooking: If the slot already has a confirmed booking
            SlotNotFound: If the slot was removed before the insert
        """
        booking = Booking(
            user_id=user_id,
            slot_id=slot_id,
            status=BookingStatus.CONFIRMED.value,
            created_at=utc_now(),
        )
        self.session.add(booking)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            # A foreign key violation means the slot is gone, not taken
            present = await self.session.execute(select(exists().where(Slot.id == slot_id)))
            if not present.scalar():
                raise SlotNotFound() from exc
            raise DuplicateActiveBooking() from exc

        return booking

    async def find_by_id(self, booking_id: str, refresh: bool = False) -> Booking | None:
        """Get a booking by ID with its slot and user joined."""
        query = select(Booking).where(Booking.id == booking_id)
        if refresh:
            query = query.execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def find_by_user(self, user_id: str) -> Sequence[Booking]:
        """Bookings of a user, newest first."""
        result = await self.session.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        return result.unique().scalars().all()

    async def find_all(self) -> Sequence[Booking]:
        """All bookings, newest first."""
        result = await self.session.execute(
            select(Booking).order_by(Booking.created_at.desc())
        )
        return result.unique().scalars().all()

    async def find_confirmed_overlapping(
        self,
        user_id: str,
        start_at: datetime,
        end_at: datetime,
    ) -> Booking | None:
        """First confirmed booking of ``user_id`` whose slot intersects
        ``[start_at, end_at)``.
        """
        query = (
            select(Booking)
            .join(Booking.slot)
            .where(
                Booking.user_id == user_id,
                Booking.status == BookingStatus.CONFIRMED.value,
                Slot.start_at < ensure_utc(end_at),
                Slot.end_at > ensure_utc(start_at),
            )
            .order_by(Slot.start_at.asc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def cancel(self, booking_id: str, cancelled_by: str | None = None) -> Booking:
        """Cancel a confirmed booking with a single conditional UPDATE and flush.

        Raises:
            BookingNotFound: If absent
            BookingNotActive: If the booking is no longer confirmed
        """
        result = await self.session.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
            .values(
                status=BookingStatus.CANCELLED.value,
                cancelled_at=utc_now(),
                cancelled_by=cancelled_by,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            if await self.find_by_id(booking_id) is None:
                raise BookingNotFound()
            raise BookingNotActive()

        booking = await self.find_by_id(booking_id, refresh=True)
        if booking is None:
            raise BookingNotFound()
        return booking
