"""Business logic services."""

from clinic_booking.services.allocator import BookingAllocator
from clinic_booking.services.auth import AuthService
from clinic_booking.services.availability import AvailabilityEngine, SlotListing
from clinic_booking.services.booking_store import BookingStore
from clinic_booking.services.scheduling import GenerationResult, SchedulingService
from clinic_booking.services.slot_store import SlotStore

__all__ = [
    "AuthService",
    "AvailabilityEngine",
    "BookingAllocator",
    "BookingStore",
    "GenerationResult",
    "SchedulingService",
    "SlotListing",
    "SlotStore",
]
