"""Pydantic schemas for bookings."""

from datetime import datetime

from clinic_booking.schemas.common import ApiModel


class BookSlotRequest(ApiModel):
    """Request to book a slot."""

    slot_id: str | None = None


class BookingSlotRead(ApiModel):
    """Slot details embedded in a booking."""

    id: str
    start_at: datetime
    end_at: datetime
    duration_minutes: int


class BookingUserRead(ApiModel):
    """Patient details embedded in the admin booking view."""

    id: str
    name: str
    email: str


class BookingRead(ApiModel):
    """Schema for reading a booking."""

    id: str
    # None once the slot has been removed
    slot: BookingSlotRead | None
    status: str
    created_at: datetime
    cancelled_at: datetime | None = None


class AdminBookingRead(BookingRead):
    """Booking joined with the patient who holds it."""

    user: BookingUserRead | None


class BookingData(ApiModel):
    booking: BookingRead


class BookingStatusRead(ApiModel):
    id: str
    status: str


class BookingStatusData(ApiModel):
    booking: BookingStatusRead


class BookingListData(ApiModel):
    bookings: list[BookingRead]
    total: int


class AdminBookingListData(ApiModel):
    bookings: list[AdminBookingRead]
    total: int
