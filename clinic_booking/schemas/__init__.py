"""Pydantic schemas for request/response validation."""

from clinic_booking.schemas.auth import (
    AuthData,
    LoginRequest,
    ProfileData,
    RegisterRequest,
    UserRead,
)
from clinic_booking.schemas.booking import (
    AdminBookingListData,
    AdminBookingRead,
    BookingData,
    BookingListData,
    BookingRead,
    BookingSlotRead,
    BookingStatusData,
    BookingStatusRead,
    BookingUserRead,
    BookSlotRequest,
)
from clinic_booking.schemas.common import (
    ApiModel,
    DateRange,
    Envelope,
    ErrorResponse,
    MessageResponse,
)
from clinic_booking.schemas.slot import (
    CreateSlotRequest,
    GenerateSlotsData,
    GenerateSlotsRequest,
    SlotData,
    SlotListData,
    SlotRead,
)

__all__ = [
    "ApiModel",
    "DateRange",
    "Envelope",
    "ErrorResponse",
    "MessageResponse",
    "RegisterRequest",
    "LoginRequest",
    "UserRead",
    "AuthData",
    "ProfileData",
    "SlotRead",
    "SlotListData",
    "GenerateSlotsRequest",
    "GenerateSlotsData",
    "CreateSlotRequest",
    "SlotData",
    "BookSlotRequest",
    "BookingSlotRead",
    "BookingUserRead",
    "BookingRead",
    "AdminBookingRead",
    "BookingData",
    "BookingStatusRead",
    "BookingStatusData",
    "BookingListData",
    "AdminBookingListData",
]
