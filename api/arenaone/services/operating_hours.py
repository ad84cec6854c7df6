"""Business hours and slot generation for court availability.

Pure calculation module: no database, no async, no FastAPI dependencies.
Business hours are club-local "HH:MM" strings; bookings are UTC instants.
Slots are laid on a grid from the local opening time and compared with
bookings in UTC, so a DST change during the day never produces a short or
overlapping slot.
"""

import enum
import logging
from datetime import date, datetime, timedelta
from typing import NamedTuple

from arenaone.core.config import settings
from arenaone.core.exceptions import InvalidInput
from arenaone.services.booking_status import is_terminal
from arenaone.services.intervals import TimeWindow, contains, is_valid_time_range, overlaps, time_to_minutes
from arenaone.services.timezones import day_of_week, ensure_utc, get_zone, local_to_utc, shift_date, to_iso

logger = logging.getLogger(__name__)


class SlotStatus(str, enum.Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    PARTIAL = "partial"


class Slot(NamedTuple):
    start: datetime
    end: datetime
    status: SlotStatus


def effective_hours(business_hours, special_hours, query_date: date) -> tuple[str, str] | None:
    """Return the (open, close) "HH:MM" pair for a date, or None when closed.

    A special-hours row for the exact date wins over the weekly rule. A
    missing or malformed row is treated as closed.
    """
    rule = next((s for s in special_hours or [] if s.date == query_date), None)
    if rule is None:
        dow = day_of_week(query_date)
        rule = next((b for b in business_hours or [] if b.day_of_week == dow), None)

    if rule is None or rule.is_closed:
        return None

    if not is_valid_time_range(rule.open_time, rule.close_time):
        logger.warning("Ignoring malformed hours %r-%r for %s", rule.open_time, rule.close_time, query_date)
        return None

    return rule.open_time, rule.close_time


def open_minutes(business_hours, special_hours, query_date: date) -> int:
    """Wall-clock minutes the club is open on a date (0 when closed)."""
    hours = effective_hours(business_hours, special_hours, query_date)
    if hours is None:
        return 0
    return time_to_minutes(hours[1]) - time_to_minutes(hours[0])


def booking_window(booking) -> TimeWindow | None:
    start, end = ensure_utc(booking.start), ensure_utc(booking.end)
    if not start < end:
        logger.warning("Ignoring booking %s with empty window", getattr(booking, "id", "?"))
        return None
    return TimeWindow(start, end)


def active_windows(bookings, court_id=None) -> list[TimeWindow]:
    """Windows of non-terminal bookings, optionally restricted to one court."""
    windows = []
    for booking in bookings:
        if is_terminal(booking.booking_status):
            continue
        if court_id is not None and getattr(booking, "court_id", court_id) != court_id:
            continue
        window = booking_window(booking)
        if window is not None:
            windows.append(window)
    return windows


def slot_status(slot: TimeWindow, windows: list[TimeWindow]) -> SlotStatus:
    """booked if any booking covers the whole slot, partial if any only touches part of it."""
    status = SlotStatus.AVAILABLE
    for window in windows:
        if not overlaps(window, slot):
            continue
        if contains(window, slot):
            return SlotStatus.BOOKED
        status = SlotStatus.PARTIAL
    return status


def generate_slots(open_at: datetime, close_at: datetime, slot_minutes: int) -> list[TimeWindow]:
    """Contiguous slots of slot_minutes from open_at. Only whole slots before close_at."""
    if slot_minutes <= 0:
        raise InvalidInput(f"Slot granularity must be positive, got {slot_minutes}")

    step = timedelta(minutes=slot_minutes)
    slots = []
    current = open_at
    while current + step <= close_at:
        slots.append(TimeWindow(current, current + step))
        current += step
    return slots


def court_availability(
    court,
    business_hours,
    special_hours,
    bookings,
    query_date: date,
    slot_minutes: int | None = None,
    timezone: str | None = None,
) -> list[Slot]:
    """Availability of one court on a club-local date.

    Returns an empty list when the club is closed. Bookings belonging to other
    courts and bookings in a terminal status are ignored.
    """
    if slot_minutes is None:
        slot_minutes = settings.slot_minutes
    timezone = timezone or settings.default_club_timezone
    get_zone(timezone)

    hours = effective_hours(business_hours, special_hours, query_date)
    if hours is None:
        return []

    open_at = local_to_utc(query_date, hours[0], timezone)
    close_at = local_to_utc(query_date, hours[1], timezone)
    windows = active_windows(bookings, court_id=court.id)

    slots = generate_slots(open_at, close_at, slot_minutes)
    return [Slot(slot.start, slot.end, slot_status(slot, windows)) for slot in slots]


def availability_payload(query_date: date, slots: list[Slot]) -> dict:
    return {
        "date": query_date.isoformat(),
        "slots": [{"start": to_iso(s.start), "end": to_iso(s.end), "status": s.status.value} for s in slots],
    }


def is_court_free(bookings, window: TimeWindow, court_id=None, exclude_booking_id=None) -> bool:
    """True when no active booking overlaps window (half-open)."""
    candidates = [b for b in bookings if exclude_booking_id is None or b.id != exclude_booking_id]
    return not any(overlaps(w, window) for w in active_windows(candidates, court_id=court_id))


def find_available_courts(courts, bookings, window: TimeWindow) -> list:
    """Active courts with no overlapping active booking, in the order given."""
    return [
        court
        for court in courts
        if getattr(court, "is_active", True) and is_court_free(bookings, window, court_id=court.id)
    ]


def overall_status(available: int, booked: int, total: int) -> SlotStatus:
    """Club-wide status of one slot: available only when every court is, booked only when every court is."""
    if available == total:
        return SlotStatus.AVAILABLE
    if booked == total:
        return SlotStatus.BOOKED
    return SlotStatus.PARTIAL


def club_weekly_availability(
    courts,
    business_hours,
    special_hours,
    bookings,
    week_start: date,
    timezone: str | None = None,
    slot_minutes: int | None = None,
) -> list[dict]:
    """Seven days of slots across all active courts of a club, from week_start.

    Each slot lists every court's status plus available/booked/partial counts
    and an overall status. A closed day has no slots.
    """
    courts = [court for court in courts if getattr(court, "is_active", True)]
    days = []
    for offset in range(7):
        query_date = shift_date(week_start, offset)
        per_court = [
            court_availability(court, business_hours, special_hours, bookings, query_date, slot_minutes, timezone)
            for court in courts
        ]

        slots = []
        for row in zip(*per_court):
            counts = {status: 0 for status in SlotStatus}
            for slot in row:
                counts[slot.status] += 1
            slots.append({
                "start": to_iso(row[0].start),
                "end": to_iso(row[0].end),
                "courts": [
                    {"court_id": court.id, "court_name": court.name, "status": slot.status.value}
                    for court, slot in zip(courts, row)
                ],
                "summary": {
                    "available": counts[SlotStatus.AVAILABLE],
                    "booked": counts[SlotStatus.BOOKED],
                    "partial": counts[SlotStatus.PARTIAL],
                    "total": len(courts),
                },
                "overall_status": overall_status(
                    counts[SlotStatus.AVAILABLE], counts[SlotStatus.BOOKED], len(courts)
                ).value,
            })

        days.append({
            "date": query_date.isoformat(),
            "day_of_week": day_of_week(query_date),
            "day_name": query_date.strftime("%A"),
            "slots": slots,
        })
    return days
