"""Utility functions."""

from clinic_booking.utils.ids import is_valid_id
from clinic_booking.utils.time import (
    Clock,
    end_of_day,
    ensure_utc,
    parse_date,
    parse_datetime,
    start_of_day,
    utc_now,
)

__all__ = [
    "is_valid_id",
    "Clock",
    "utc_now",
    "ensure_utc",
    "start_of_day",
    "end_of_day",
    "parse_datetime",
    "parse_date",
]
