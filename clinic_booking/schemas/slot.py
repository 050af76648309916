"""Pydantic schemas for slot inventory."""

from datetime import datetime

from pydantic import Field

from clinic_booking.schemas.common import ApiModel, DateRange


class SlotRead(ApiModel):
    """Schema for reading a slot."""

    id: str
    start_at: datetime
    end_at: datetime
    duration_minutes: int
    is_booked: bool


class SlotListData(ApiModel):
    """Slots keyed by UTC calendar date (``YYYY-MM-DD``)."""

    slots: dict[str, list[SlotRead]]
    total_slots: int
    date_range: DateRange


class GenerateSlotsRequest(ApiModel):
    """Request to generate weekday slots starting tomorrow."""

    days: int | None = Field(default=None, description="Calendar days to cover (1-30)")


class GenerateSlotsData(ApiModel):
    slots_generated: int
    date_range: DateRange


class CreateSlotRequest(ApiModel):
    """Request to create a single slot.

    Instants are ISO 8601 strings; parsing happens in the service so that
    malformed values are reported as ``INVALID_DATE_FORMAT``.
    """

    start_at: str | None = None
    end_at: str | None = None


class SlotData(ApiModel):
    slot: SlotRead
