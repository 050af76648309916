"""Booking allocator: claims and releases slots.

Booking a slot is two writes, a confirmed booking row and the slot's
``is_booked`` flag. Both happen in one transaction. The ``is_booked``
pre-check only produces a fast, friendly error in the common case; under
concurrent requests the partial unique index on confirmed bookings decides
which caller wins, and every loser is reported ``SlotAlreadyBooked``.

Cancellation clears the flag in the same transaction as the status change,
and only after a conditional UPDATE has moved the booking out of
``confirmed``; a request that read the booking before a concurrent cancel
gets ``BookingNotActive`` and never touches the flag.
If the slot row has disappeared the cancellation is still committed and the
fault is logged for an operator; there is no automatic reconciliation.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.errors import (
    BookingNotActive,
    BookingNotFound,
    DuplicateActiveBooking,
    InsufficientPermissions,
    InvalidBookingId,
    InvalidSlotId,
    MissingSlotId,
    OverlappingBooking,
    PastBooking,
    PastSlot,
    SlotAlreadyBooked,
    SlotNotFound,
    SlotUpdateFailed,
)
from clinic_booking.core.logging import audit_logger, integrity_logger
from clinic_booking.models.booking import Booking
from clinic_booking.models.user import UserRole
from clinic_booking.services.availability import AvailabilityEngine
from clinic_booking.services.booking_store import BookingStore
from clinic_booking.services.slot_store import SlotStore
from clinic_booking.utils.ids import is_valid_id
from clinic_booking.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


class BookingAllocator:
    """Orchestrates slot lookup, overlap check, slot claim and release."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now) -> None:
        self.session = session
        self.clock = clock
        self.slots = SlotStore(session)
        self.bookings = BookingStore(session)
        self.availability = AvailabilityEngine(session, clock=clock)

    async def book_slot(self, user_id: str, slot_id: str | None) -> Booking:
        """Book ``slot_id`` for ``user_id``.

        Returns:
            The confirmed booking with its slot loaded

        Raises:
            MissingSlotId: If no slot ID was given
            InvalidSlotId: If the slot ID is malformed
            SlotNotFound: If the slot does not exist (or vanished mid-booking)
            SlotAlreadyBooked: If the slot is taken, including lost races
            PastSlot: If the slot has already started
            OverlappingBooking: If the patient holds an intersecting booking
        """
        if not slot_id:
            raise MissingSlotId()
        if not is_valid_id(slot_id):
            raise InvalidSlotId()

        slot = await self.slots.find_by_id(slot_id)
        if slot is None:
            raise SlotNotFound()

        if slot.is_booked:
            raise SlotAlreadyBooked()

        if slot.start_at < self.clock():
            raise PastSlot()

        if await self.availability.has_overlap(user_id, slot):
            raise OverlappingBooking()

        try:
            booking = await self.bookings.create(user_id=user_id, slot_id=slot_id)
        except DuplicateActiveBooking:
            logger.info(
                f"Lost booking race for slot {slot_id}",
                extra={"slot_id": slot_id, "user_id": user_id},
            )
            raise SlotAlreadyBooked()

        booking_id = booking.id

        try:
            await self.slots.set_booked(slot_id, True)
        except SlotNotFound:
            # Slot deleted between lookup and claim: drop the booking with it
            await self.session.rollback()
            integrity_logger.fault(
                "orphan_booking_rolled_back",
                slot_id=slot_id,
                booking_id=booking_id,
                detail="slot disappeared before it could be flagged as booked",
            )
            raise
        except SQLAlchemyError:
            await self.session.rollback()
            integrity_logger.fault(
                "orphan_booking_rolled_back",
                slot_id=slot_id,
                booking_id=booking_id,
                detail="flagging slot as booked failed",
            )
            raise

        await self.session.commit()

        audit_logger.log(
            action="book_slot",
            actor_role=UserRole.PATIENT.value,
            actor_id=user_id,
            entity_type="booking",
            entity_id=booking_id,
            metadata={"slot_id": slot_id},
        )

        return await self._reload(booking_id)

    async def cancel_booking(
        self,
        requester_id: str,
        requester_role: UserRole | str,
        booking_id: str | None,
    ) -> Booking:
        """Cancel a confirmed booking and release its slot.

        Only the booking's owner or an admin may cancel.

        Raises:
            InvalidBookingId: If the booking ID is missing or malformed
            BookingNotFound: If the booking does not exist
            InsufficientPermissions: If the requester is neither owner nor admin
            SlotNotFound: If the booking's slot is missing (integrity fault)
            PastBooking: If the appointment has already started
            BookingNotActive: If the booking is not confirmed
            SlotUpdateFailed: If the slot flag could not be cleared
        """
        if not booking_id or not is_valid_id(booking_id):
            raise InvalidBookingId()

        booking = await self.bookings.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFound()

        role = requester_role.value if isinstance(requester_role, UserRole) else str(requester_role)
        if booking.user_id != requester_id and role != UserRole.ADMIN.value:
            raise InsufficientPermissions("You can only cancel your own bookings")

        slot_id = booking.slot_id
        slot = await self.slots.find_by_id(slot_id) if slot_id else None
        if slot is None:
            # A removed slot only leaves non-confirmed bookings behind
            if not booking.is_active:
                raise BookingNotActive()
            integrity_logger.fault(
                "booking_without_slot",
                slot_id=slot_id,
                booking_id=booking_id,
                detail="booking references a slot that does not exist",
            )
            raise SlotNotFound("Associated slot not found")

        if slot.start_at < self.clock():
            raise PastBooking()

        if not booking.is_active:
            raise BookingNotActive()

        try:
            await self.bookings.cancel(booking_id, cancelled_by=requester_id)
        except BookingNotActive:
            # Cancelled by a concurrent request since it was read
            await self.session.rollback()
            raise

        try:
            await self.slots.set_booked(slot_id, False)
        except SlotNotFound:
            # Keep the cancellation; the slot it would free is gone anyway
            await self.session.commit()
            integrity_logger.fault(
                "slot_update_failed",
                slot_id=slot_id,
                booking_id=booking_id,
                detail="booking cancelled but slot flag could not be cleared",
            )
            raise SlotUpdateFailed()

        await self.session.commit()

        audit_logger.log(
            action="cancel_booking",
            actor_role=role,
            actor_id=requester_id,
            entity_type="booking",
            entity_id=booking_id,
            metadata={"slot_id": slot_id},
        )

        return await self._reload(booking_id)

    async def _reload(self, booking_id: str) -> Booking:
        booking = await self.bookings.find_by_id(booking_id, refresh=True)
        if booking is None:
            raise BookingNotFound()
        return booking
