"""Booking model: a patient's claim on a slot."""

from datetime import datetime
from enum import Enum

from sqlalchemy import ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clinic_booking.db.base import Base, TimestampMixin, UTCDateTime


class BookingStatus(str, Enum):
    """Lifecycle status of a booking.

    ``confirmed`` is initial; ``confirmed -> cancelled`` is the only
    transition. ``cancelled`` and ``completed`` are terminal.
    """

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Booking(Base, TimestampMixin):
    """Patient booking of a slot. Never physically deleted."""

    __tablename__ = "bookings"

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # Cleared when an unbooked slot is removed; the booking stays as history
    slot_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("slots.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[BookingStatus] = mapped_column(
        String(20),
        default=BookingStatus.CONFIRMED.value,
        nullable=False,
        index=True,
    )
    # Cancellation tracking
    cancelled_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(),
        nullable=True,
    )
    cancelled_by: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="joined")
    slot: Mapped["Slot | None"] = relationship("Slot", lazy="joined")

    __table_args__ = (
        # At most one confirmed booking per slot. This index, not the
        # slot's is_booked flag, decides concurrent booking races.
        Index(
            "uq_bookings_slot_id_confirmed",
            "slot_id",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    def __repr__(self) -> str:
        slot = f"{self.slot_id[:8]}..." if self.slot_id else "removed"
        return f"<Booking {self.id[:8]}... slot={slot} status={self.status}>"


# Import for type hints
from clinic_booking.models.slot import Slot  # noqa: E402
from clinic_booking.models.user import User  # noqa: E402
