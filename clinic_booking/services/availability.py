"""Availability engine.

Read-side rules for slot inventory: date-range listing grouped by day,
per-patient overlap detection and the weekday slot template used by slot
generation. Everything runs on the canonical UTC clock.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.config import settings
from clinic_booking.core.errors import (
    DateRangeTooLarge,
    InvalidDateFormat,
    MissingDates,
    PastDate,
)
from clinic_booking.models.slot import Slot
from clinic_booking.services.booking_store import BookingStore
from clinic_booking.services.slot_store import SlotStore
from clinic_booking.utils.time import Clock, end_of_day, parse_date, start_of_day, utc_now

# Saturday and Sunday
WEEKEND_DAYS = frozenset({5, 6})


def generate_weekday_slots(
    start_date: date,
    days: int,
    open_hour: int | None = None,
    close_hour: int | None = None,
    slot_minutes: int | None = None,
) -> list[tuple[datetime, datetime]]:
    """Slot windows for every weekday in ``[start_date, start_date + days)``.

    With the default clinic hours this yields sixteen 30-minute windows
    from 09:00 to 17:00 per weekday. Weekends produce nothing. The result
    is ordered and may contain windows that already exist; callers skip
    those before inserting.
    """
    open_hour = settings.clinic_open_hour if open_hour is None else open_hour
    close_hour = settings.clinic_close_hour if close_hour is None else close_hour
    slot_minutes = settings.slot_duration_minutes if slot_minutes is None else slot_minutes
    step = timedelta(minutes=slot_minutes)

    windows: list[tuple[datetime, datetime]] = []
    for offset in range(days):
        day = start_date + timedelta(days=offset)
        if day.weekday() in WEEKEND_DAYS:
            continue

        current = datetime.combine(day, time(open_hour), tzinfo=timezone.utc)
        closing = datetime.combine(day, time(close_hour), tzinfo=timezone.utc)
        while current + step <= closing:
            windows.append((current, current + step))
            current += step

    return windows


@dataclass
class SlotListing:
    """Slots grouped by UTC calendar date, in ascending start order."""

    range_start: datetime
    range_end: datetime
    slots_by_date: dict[str, list[Slot]] = field(default_factory=dict)

    @property
    def total_slots(self) -> int:
        return sum(len(slots) for slots in self.slots_by_date.values())


class AvailabilityEngine:
    """Computes slot availability and patient booking overlaps."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now) -> None:
        self.session = session
        self.clock = clock
        self.slots = SlotStore(session)
        self.bookings = BookingStore(session)

    @staticmethod
    def resolve_range(from_value: str | None, to_value: str | None) -> tuple[date, date]:
        """Parse the ``from``/``to`` query values into calendar dates.

        Raises:
            MissingDates: If either value is absent
            InvalidDateFormat: If either value is not a date
        """
        if not from_value or not to_value:
            raise MissingDates()

        try:
            return parse_date(from_value), parse_date(to_value)
        except ValueError:
            raise InvalidDateFormat()

    async def list_slots(
        self,
        from_value: str | None,
        to_value: str | None,
        include_booked: bool = True,
    ) -> SlotListing:
        """Slots between ``from`` 00:00:00 and ``to`` 23:59:59, grouped by date.

        No restriction on the range; this is the admin view.
        """
        from_date, to_date = self.resolve_range(from_value, to_value)
        return await self._listing(from_date, to_date, include_booked)

    async def list_public_slots(
        self,
        from_value: str | None,
        to_value: str | None,
        include_booked: bool = False,
    ) -> SlotListing:
        """Patient-facing listing.

        Raises:
            PastDate: If ``from`` is before today
            DateRangeTooLarge: If the window spans more than the allowed days
        """
        from_date, to_date = self.resolve_range(from_value, to_value)

        today = self.clock().astimezone(timezone.utc).date()
        if from_date < today:
            raise PastDate()

        max_days = settings.max_public_range_days
        if end_of_day(to_date) - start_of_day(from_date) > timedelta(days=max_days):
            raise DateRangeTooLarge(f"Date range cannot exceed {max_days} days")

        return await self._listing(from_date, to_date, include_booked)

    async def _listing(self, from_date: date, to_date: date, include_booked: bool) -> SlotListing:
        range_start = start_of_day(from_date)
        range_end = end_of_day(to_date)

        listing = SlotListing(range_start=range_start, range_end=range_end)
        for slot in await self.slots.find_in_range(range_start, range_end, include_booked):
            date_key = slot.start_at.date().isoformat()
            listing.slots_by_date.setdefault(date_key, []).append(slot)

        return listing

    async def has_overlap(self, user_id: str, candidate: Slot) -> bool:
        """Whether ``user_id`` holds a confirmed booking intersecting ``candidate``."""
        existing = await self.bookings.find_confirmed_overlapping(
            user_id=user_id,
            start_at=candidate.start_at,
            end_at=candidate.end_at,
        )
        return existing is not None
