"""Booking model.

A booking reserves a court (optionally with a coach) for a UTC time window.
Status and payment are tracked separately: booking_status says where the
booking is in its lifecycle, payment_status says whether it has been paid.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arenaone.models.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"
    # Legacy values still present in older rows; treated as non-terminal
    PENDING = "pending"
    PAID = "paid"


TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.NO_SHOW, BookingStatus.COMPLETED})


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    REFUNDED = "refunded"


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    court_id: Mapped[str] = mapped_column(ForeignKey("courts.id"), nullable=False)
    coach_id: Mapped[str | None] = mapped_column(ForeignKey("coaches.id"))
    user_id: Mapped[str | None] = mapped_column(String(36))

    # When (always UTC)
    start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Status
    booking_status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status", values_callable=lambda e: [x.value for x in e]),
        default=BookingStatus.RESERVED,
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status", values_callable=lambda e: [x.value for x in e]),
        default=PaymentStatus.UNPAID,
        nullable=False,
    )
    reservation_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    price_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    court: Mapped["Court"] = relationship()

    __table_args__ = (
        # Availability lookups: bookings of a court in a time range
        Index("ix_bookings_court_start", "court_id", "start"),
        # Coach commitment lookups
        Index("ix_bookings_coach_start", "coach_id", "start"),
        Index("ix_bookings_status", "booking_status"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.start:%Y-%m-%d %H:%M}-{self.end:%H:%M} court={self.court_id}>"


from arenaone.models.court import Court  # noqa: E402
