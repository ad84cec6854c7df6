"""Booking lifecycle status calculation.

Stored status is only part of the story: a reserved booking whose time has
come is displayed as ongoing, and one whose time has passed as completed.
Terminal statuses (cancelled, no-show, completed) are never overridden by
time. All functions are pure and idempotent, so the periodic sweep can run
them as often as it likes.
"""

import enum
from datetime import UTC, datetime, timedelta

from arenaone.core.config import settings
from arenaone.models.booking import TERMINAL_STATUSES, BookingStatus, PaymentStatus
from arenaone.services.timezones import ensure_utc


class DisplayStatus(str, enum.Enum):
    RESERVED = "reserved"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


_LABELS = {
    BookingStatus.RESERVED: "Reserved",
    BookingStatus.CONFIRMED: "Confirmed",
    BookingStatus.ONGOING: "Ongoing",
    BookingStatus.COMPLETED: "Completed",
    BookingStatus.CANCELLED: "Cancelled",
    BookingStatus.NO_SHOW: "No-show",
    BookingStatus.PENDING: "Pending",
    BookingStatus.PAID: "Paid",
}


def to_booking_status(value) -> BookingStatus:
    """Normalise a stored status string. Unknown values read as reserved."""
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        return BookingStatus.RESERVED


def is_terminal(status) -> bool:
    return to_booking_status(status) in TERMINAL_STATUSES


def status_label(status) -> str:
    return _LABELS[to_booking_status(status)]


def effective_status(stored_status, start: datetime, end: datetime, now: datetime) -> DisplayStatus:
    """Status to display for a booking at time now."""
    status = to_booking_status(stored_status)
    if status in TERMINAL_STATUSES:
        return DisplayStatus(status.value)

    now = ensure_utc(now)
    if now < ensure_utc(start):
        return DisplayStatus.RESERVED
    if now < ensure_utc(end):
        return DisplayStatus.ONGOING
    return DisplayStatus.COMPLETED


def _is_paid(payment_status) -> bool:
    return str(getattr(payment_status, "value", payment_status)).lower() == PaymentStatus.PAID.value


def should_auto_cancel(stored_status, payment_status, reservation_expires_at: datetime | None, now: datetime) -> bool:
    """An unpaid reservation is cancelled once its hold expires (inclusive).

    Bookings without an expiry (legacy rows) are never auto-cancelled.
    """
    if is_terminal(stored_status) or _is_paid(payment_status) or reservation_expires_at is None:
        return False
    return ensure_utc(now) >= ensure_utc(reservation_expires_at)


def should_mark_completed(end: datetime, stored_status, now: datetime) -> bool:
    return not is_terminal(stored_status) and ensure_utc(now) >= ensure_utc(end)


def reservation_expiry(now: datetime | None = None) -> datetime:
    """When a reservation created now stops holding its slot if still unpaid."""
    return (now or datetime.now(UTC)) + timedelta(minutes=settings.reservation_hold_minutes)


def sweep(bookings, now: datetime) -> list[tuple[str, BookingStatus]]:
    """Status transitions due at time now, as (booking_id, new_status).

    Expired unpaid reservations are cancelled, even if their play time has
    also passed; everything else that has ended is marked completed.
    """
    transitions = []
    for booking in bookings:
        if should_auto_cancel(booking.booking_status, booking.payment_status, booking.reservation_expires_at, now):
            transitions.append((booking.id, BookingStatus.CANCELLED))
        elif should_mark_completed(booking.end, booking.booking_status, now):
            transitions.append((booking.id, BookingStatus.COMPLETED))
    return transitions
