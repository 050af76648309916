"""Appointment slot model."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from clinic_booking.db.base import Base, TimestampMixin, UTCDateTime


class Slot(Base, TimestampMixin):
    """Fixed time window of clinic capacity.

    ``is_booked`` is a denormalized cache of "a confirmed booking references
    this slot". The bookings table's partial unique index is the source of
    truth; the flag is flipped in the same transaction as the booking write.
    Apart from that flag a slot is never mutated.
    """

    __tablename__ = "slots"

    start_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        index=True,
    )
    end_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        index=True,
    )
    is_booked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("start_at", "end_at", name="uq_slots_start_at_end_at"),
        CheckConstraint("start_at < end_at", name="start_before_end"),
    )

    @property
    def duration_minutes(self) -> int:
        """Length of the slot, rounded to the nearest minute."""
        return round((self.end_at - self.start_at).total_seconds() / 60)

    def __repr__(self) -> str:
        return f"<Slot {self.start_at.isoformat()}-{self.end_at.isoformat()} booked={self.is_booked}>"
