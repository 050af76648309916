"""Database models for the clinic booking service."""

from clinic_booking.models.booking import Booking, BookingStatus
from clinic_booking.models.slot import Slot
from clinic_booking.models.user import User, UserRole

__all__ = [
    # Users
    "User",
    "UserRole",
    # Inventory
    "Slot",
    # Bookings
    "Booking",
    "BookingStatus",
]
