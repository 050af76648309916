"""Domain errors for slot inventory and booking.

Every expected failure is a ``BookingError`` carrying a stable ``code``,
a human-readable ``message`` and the HTTP status the API reports it with.
Services raise these; the API layer renders them as
``{"error": {"code": ..., "message": ...}}``.
"""

from fastapi import status


class BookingError(Exception):
    """Base class for expected booking-core failures."""

    code: str = "BOOKING_ERROR"
    message: str = "Booking operation failed"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


# ============================================================================
# Categories
# ============================================================================


class ClientInputError(BookingError):
    """Malformed or missing input. Never retried."""

    code = "INVALID_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(BookingError):
    """Caller identity could not be established."""

    code = "UNAUTHORIZED"
    message = "Authentication required"
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(BookingError):
    """Caller is known but not allowed to act on the resource."""

    code = "INSUFFICIENT_PERMISSIONS"
    message = "You do not have permission to access this resource"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BookingError):
    """Referenced record does not exist."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BookingError):
    """State conflict. The caller may retry with a different target."""

    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class IntegrityFaultError(BookingError):
    """The booked flag on a slot and its bookings have diverged."""

    code = "INTEGRITY_FAULT"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# ============================================================================
# Client input
# ============================================================================


class MissingDates(ClientInputError):
    code = "MISSING_DATES"
    message = "Both from and to dates are required"


class InvalidDateFormat(ClientInputError):
    code = "INVALID_DATE_FORMAT"
    message = "Invalid date format. Use YYYY-MM-DD"


class PastDate(ClientInputError):
    code = "PAST_DATE"
    message = "Cannot query slots in the past"


class DateRangeTooLarge(ClientInputError):
    code = "DATE_RANGE_TOO_LARGE"
    message = "Date range cannot exceed 7 days"


class InvalidDays(ClientInputError):
    code = "INVALID_DAYS"
    message = "Days must be between 1 and 30"


class InvalidTimeRange(ClientInputError):
    code = "INVALID_TIME_RANGE"
    message = "Start time must be before end time"


class MissingSlotId(ClientInputError):
    code = "MISSING_SLOT_ID"
    message = "Slot ID is required"


class InvalidSlotId(ClientInputError):
    code = "INVALID_SLOT_ID"
    message = "Please provide a valid slot ID"


class InvalidBookingId(ClientInputError):
    code = "INVALID_BOOKING_ID"
    message = "Please provide a valid booking ID"


class PastSlot(ClientInputError):
    code = "PAST_SLOT"
    message = "Cannot book a slot in the past"


class PastBooking(ClientInputError):
    code = "PAST_BOOKING"
    message = "Cannot cancel a booking in the past"


class SlotBooked(ClientInputError):
    """Raised when removing a slot that currently holds a booking."""

    code = "SLOT_BOOKED"
    message = "Cannot remove a booked slot"


# ============================================================================
# Authentication / authorization
# ============================================================================


class TokenMissing(AuthenticationError):
    code = "TOKEN_MISSING"
    message = "Access token is required"


class InvalidToken(AuthenticationError):
    code = "INVALID_TOKEN"
    message = "Invalid or expired token"


class InvalidCredentials(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class InsufficientPermissions(PermissionDeniedError):
    code = "INSUFFICIENT_PERMISSIONS"


# ============================================================================
# Not found
# ============================================================================


class SlotNotFound(NotFoundError):
    code = "SLOT_NOT_FOUND"
    message = "Slot not found"


class BookingNotFound(NotFoundError):
    code = "BOOKING_NOT_FOUND"
    message = "Booking not found"


# ============================================================================
# Conflicts
# ============================================================================


class SlotExists(ConflictError):
    code = "SLOT_EXISTS"
    message = "Slot already exists for this time"


class SlotAlreadyBooked(ConflictError):
    code = "SLOT_ALREADY_BOOKED"
    message = "This slot is already booked"


class DuplicateActiveBooking(ConflictError):
    """Raised by the booking store when the per-slot uniqueness index rejects
    a second confirmed booking.

    The allocator translates this into ``SlotAlreadyBooked``.
    """

    code = "DUPLICATE_ACTIVE_BOOKING"
    message = "A confirmed booking already exists for this slot"


class OverlappingBooking(ConflictError):
    code = "OVERLAPPING_BOOKING"
    message = "You already have a booking that overlaps with this time slot"


class BookingNotActive(ConflictError):
    code = "BOOKING_NOT_ACTIVE"
    message = "Only confirmed bookings can be cancelled"


class UserExists(ConflictError):
    code = "USER_EXISTS"
    message = "User with this email already exists"


# ============================================================================
# Integrity faults
# ============================================================================


class SlotUpdateFailed(IntegrityFaultError):
    code = "SLOT_UPDATE_FAILED"
    message = "Failed to update slot status"
