"""Time and datetime utilities.

All scheduling happens on a single canonical clock: UTC. Naive values are
taken to already be UTC.
"""

from collections.abc import Callable
from datetime import date, datetime, time, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    """00:00:00 of ``day`` on the canonical clock."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """23:59:59 of ``day`` on the canonical clock."""
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def parse_datetime(dt_str: str) -> datetime:
    """Parse an ISO 8601 instant.

    Accepts a trailing ``Z`` and optional fractional seconds or offset.

    Returns:
        Parsed datetime object in UTC

    Raises:
        ValueError: If the string is not an ISO 8601 datetime
    """
    value = dt_str.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


def parse_date(date_str: str) -> date:
    """Parse a calendar date.

    ``YYYY-MM-DD`` is the expected form; a full ISO instant is also accepted
    and reduced to its UTC date.

    Raises:
        ValueError: If the string is neither a date nor an ISO datetime
    """
    value = date_str.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        return parse_datetime(value).date()
