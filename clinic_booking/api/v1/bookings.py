"""Booking endpoints."""

from fastapi import APIRouter, status

from clinic_booking.api.deps import AdminUser, ClockDep, CurrentUser, DbSession, PatientUser
from clinic_booking.models.booking import Booking
from clinic_booking.schemas.booking import (
    AdminBookingListData,
    AdminBookingRead,
    BookingData,
    BookingListData,
    BookingRead,
    BookingStatusData,
    BookingStatusRead,
    BookSlotRequest,
)
from clinic_booking.schemas.common import Envelope
from clinic_booking.services.allocator import BookingAllocator
from clinic_booking.services.booking_store import BookingStore

router = APIRouter()


def _status(booking: Booking) -> str:
    return booking.status.value if hasattr(booking.status, "value") else booking.status


def _booking_read(booking: Booking) -> BookingRead:
    read = BookingRead.model_validate(booking)
    read.status = _status(booking)
    return read


def _admin_booking_read(booking: Booking) -> AdminBookingRead:
    read = AdminBookingRead.model_validate(booking)
    read.status = _status(booking)
    return read


@router.post(
    "/book",
    response_model=Envelope[BookingData],
    status_code=status.HTTP_201_CREATED,
    summary="Book a slot (patient)",
)
async def book_slot(
    body: BookSlotRequest,
    patient: PatientUser,
    session: DbSession,
    clock: ClockDep,
) -> Envelope[BookingData]:
    allocator = BookingAllocator(session, clock=clock)
    booking = await allocator.book_slot(user_id=patient.id, slot_id=body.slot_id)

    return Envelope[BookingData](
        message="Slot booked successfully",
        data=BookingData(booking=_booking_read(booking)),
    )


@router.get(
    "/my-bookings",
    response_model=Envelope[BookingListData],
    summary="List my bookings (patient)",
)
async def my_bookings(patient: PatientUser, session: DbSession) -> Envelope[BookingListData]:
    bookings = await BookingStore(session).find_by_user(patient.id)
    return Envelope[BookingListData](
        data=BookingListData(
            bookings=[_booking_read(b) for b in bookings],
            total=len(bookings),
        )
    )


@router.get(
    "/all-bookings",
    response_model=Envelope[AdminBookingListData],
    summary="List all bookings (admin)",
)
async def all_bookings(admin: AdminUser, session: DbSession) -> Envelope[AdminBookingListData]:
    bookings = await BookingStore(session).find_all()
    return Envelope[AdminBookingListData](
        data=AdminBookingListData(
            bookings=[_admin_booking_read(b) for b in bookings],
            total=len(bookings),
        )
    )


@router.patch(
    "/bookings/{booking_id}/cancel",
    response_model=Envelope[BookingStatusData],
    summary="Cancel a booking",
    description="The booking's owner or an admin may cancel a confirmed, future booking",
)
async def cancel_booking(
    booking_id: str,
    user: CurrentUser,
    session: DbSession,
    clock: ClockDep,
) -> Envelope[BookingStatusData]:
    allocator = BookingAllocator(session, clock=clock)
    booking = await allocator.cancel_booking(
        requester_id=user.id,
        requester_role=user.role,
        booking_id=booking_id,
    )

    return Envelope[BookingStatusData](
        message="Booking cancelled successfully",
        data=BookingStatusData(
            booking=BookingStatusRead(id=booking.id, status=_status(booking)),
        ),
    )
