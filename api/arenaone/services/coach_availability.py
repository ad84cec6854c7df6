"""Coach availability and booking conflict resolution.

can_book_coach() runs five checks in a fixed order and returns the first
failure as a reason code. Conflicts are ordinary outcomes, not exceptions:
callers turn a rejected Verdict into a 409 with the reason and message.

check_training_request() layers the court search on top and, when no court
is free, proposes nearby alternatives where both the coach and a court are.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple

from arenaone.core.config import settings
from arenaone.services.intervals import (
    MINUTES_PER_DAY,
    TimeWindow,
    is_valid_time_range,
    minutes_to_time,
    overlaps,
    time_string_contains,
    time_string_overlap,
    time_to_minutes,
)
from arenaone.services.operating_hours import active_windows, effective_hours, find_available_courts
from arenaone.services.pricing import resolve_price
from arenaone.services.timezones import day_of_week, local_to_utc, shift_date, to_local

logger = logging.getLogger(__name__)

# Same-day alternatives are tried at these offsets (minutes) from the requested time
SUGGESTION_OFFSETS = (30, -30, 60, -60, 90, -90, 120, -120)


class ConflictReason(str, enum.Enum):
    DOES_NOT_WORK_THIS_DAY = "DOES_NOT_WORK_THIS_DAY"
    UNAVAILABLE_ON_DAY = "UNAVAILABLE_ON_DAY"
    NOT_AVAILABLE_AT_TIME = "NOT_AVAILABLE_AT_TIME"
    UNAVAILABLE_AT_TIME = "UNAVAILABLE_AT_TIME"
    ALREADY_BOOKED = "ALREADY_BOOKED"
    NO_COURT_AVAILABLE = "NO_COURT_AVAILABLE"


MESSAGES = {
    ConflictReason.DOES_NOT_WORK_THIS_DAY: "Coach does not work on this day. Choose another date.",
    ConflictReason.UNAVAILABLE_ON_DAY: "Coach is unavailable on this day. Choose another date.",
    ConflictReason.NOT_AVAILABLE_AT_TIME: "Coach is not available at this time. Choose another slot.",
    ConflictReason.UNAVAILABLE_AT_TIME: "Coach is unavailable at this time. Choose another slot.",
    ConflictReason.ALREADY_BOOKED: "Coach already has training at this time. Choose another slot.",
    ConflictReason.NO_COURT_AVAILABLE: "No court is available at this time. Choose another slot.",
}


class Suggestion(NamedTuple):
    date: str  # "YYYY-MM-DD", club local
    time: str  # "HH:MM", club local
    court_id: str
    court_name: str


@dataclass(frozen=True)
class Verdict:
    ok: bool
    reason: ConflictReason | None = None
    court_id: str | None = None
    price_cents: int | None = None
    suggestions: list[Suggestion] = field(default_factory=list)

    @property
    def message(self) -> str | None:
        return MESSAGES[self.reason] if self.reason else None

    @classmethod
    def reject(cls, reason: ConflictReason, suggestions: list[Suggestion] | None = None) -> "Verdict":
        return cls(ok=False, reason=reason, suggestions=suggestions or [])


def _local_span(window: TimeWindow, query_date: date, timezone: str) -> tuple[str, str]:
    """Local "HH:MM" start/end of a window on query_date.

    An end past local midnight reads as "24:00", which sorts after every
    valid time so no same-day slot can contain it.
    """
    local_start = to_local(window.start, timezone)
    local_end = to_local(window.end, timezone)
    start = local_start.strftime("%H:%M") if local_start.date() == query_date else "24:00"
    end = local_end.strftime("%H:%M") if local_end.date() == query_date else "24:00"
    return start, end


def _day_slots(coach, query_date: date) -> list:
    dow = day_of_week(query_date)
    slots = []
    for slot in coach.weekly_availabilities or []:
        if slot.day_of_week != dow:
            continue
        if not is_valid_time_range(slot.start_time, slot.end_time):
            logger.warning("Ignoring malformed availability slot %s of coach %s", getattr(slot, "id", "?"), coach.id)
            continue
        slots.append(slot)
    return sorted(slots, key=lambda s: s.start_time)


def can_book_coach(
    coach,
    query_date: date,
    requested_window: TimeWindow,
    time_off=(),
    commitments=(),
    timezone: str | None = None,
    exclude_booking_id=None,
) -> Verdict:
    """Decide whether a coach can take a session in requested_window.

    Checks, first failure wins:
      1. the coach works on this weekday
      2. no full-day time-off on the date
      3. the window lies inside one weekly availability slot
      4. no partial time-off overlaps the window
      5. no other active booking of this coach overlaps the window
    """
    timezone = timezone or settings.default_club_timezone

    # 1. Works this day at all. Malformed slots still count as "works".
    dow = day_of_week(query_date)
    if not any(s.day_of_week == dow for s in coach.weekly_availabilities or []):
        return Verdict.reject(ConflictReason.DOES_NOT_WORK_THIS_DAY)

    day_off = [t for t in time_off if t.date == query_date and getattr(t, "coach_id", coach.id) == coach.id]

    # 2. Full-day time-off
    if any(t.full_day for t in day_off):
        return Verdict.reject(ConflictReason.UNAVAILABLE_ON_DAY)

    # 3. Inside working hours
    start_s, end_s = _local_span(requested_window, query_date, timezone)
    if not any(time_string_contains(s.start_time, s.end_time, start_s, end_s) for s in _day_slots(coach, query_date)):
        return Verdict.reject(ConflictReason.NOT_AVAILABLE_AT_TIME)

    # 4. Partial time-off
    for entry in day_off:
        if not is_valid_time_range(entry.start_time, entry.end_time):
            logger.warning("Ignoring malformed time-off %s of coach %s", getattr(entry, "id", "?"), coach.id)
            continue
        if time_string_overlap(entry.start_time, entry.end_time, start_s, end_s):
            return Verdict.reject(ConflictReason.UNAVAILABLE_AT_TIME)

    # 5. Existing commitments
    others = [
        b
        for b in commitments
        if getattr(b, "coach_id", coach.id) == coach.id and (exclude_booking_id is None or b.id != exclude_booking_id)
    ]
    if any(overlaps(w, requested_window) for w in active_windows(others)):
        return Verdict.reject(ConflictReason.ALREADY_BOOKED)

    return Verdict(ok=True)


def _within_club_hours(business_hours, special_hours, query_date: date, start: int, end: int) -> bool:
    if business_hours is None:
        return True
    hours = effective_hours(business_hours, special_hours, query_date)
    if hours is None:
        return False
    return time_to_minutes(hours[0]) <= start and end <= time_to_minutes(hours[1])


def _try_slot(
    coach, courts, bookings, time_off, commitments, business_hours, special_hours, query_date, start, duration, timezone
) -> Suggestion | None:
    end = start + duration
    if start < 0 or end > MINUTES_PER_DAY:
        return None
    if not _within_club_hours(business_hours, special_hours, query_date, start, end):
        return None

    start_s = minutes_to_time(start)
    window = TimeWindow.from_duration(local_to_utc(query_date, start_s, timezone), duration)
    if not can_book_coach(coach, query_date, window, time_off, commitments, timezone).ok:
        return None

    free = find_available_courts(courts, bookings, window)
    if not free:
        return None
    return Suggestion(query_date.isoformat(), start_s, free[0].id, free[0].name)


def suggest_alternatives(
    coach,
    courts,
    bookings,
    query_date: date,
    start_time: str,
    duration_minutes: int | None = None,
    time_off=(),
    commitments=(),
    timezone: str | None = None,
    business_hours=None,
    special_hours=None,
    limit: int | None = None,
    horizon_days: int | None = None,
) -> list[Suggestion]:
    """Nearby times where the coach and at least one court are both free.

    Searches the same day first (30-minute steps out to two hours either
    side), then each following day up to horizon_days, trying the requested
    time when it fits a working slot and the slot start otherwise. bookings,
    time_off and commitments must cover the whole horizon. Best effort: stops
    at limit suggestions.
    """
    duration = duration_minutes or settings.training_duration_minutes
    timezone = timezone or settings.default_club_timezone
    limit = settings.max_suggestions if limit is None else limit
    horizon_days = settings.suggestion_horizon_days if horizon_days is None else horizon_days
    requested = time_to_minutes(start_time)

    def attempt(day: date, start: int) -> Suggestion | None:
        return _try_slot(
            coach, courts, bookings, time_off, commitments, business_hours, special_hours, day, start, duration,
            timezone,
        )

    suggestions: list[Suggestion] = []

    if _day_slots(coach, query_date):
        for offset in SUGGESTION_OFFSETS:
            if len(suggestions) >= limit:
                break
            found = attempt(query_date, requested + offset)
            if found:
                suggestions.append(found)

    for day_offset in range(1, horizon_days + 1):
        if len(suggestions) >= limit:
            break
        day = shift_date(query_date, day_offset)
        for slot in _day_slots(coach, day):
            if len(suggestions) >= limit:
                break
            slot_start, slot_end = time_to_minutes(slot.start_time), time_to_minutes(slot.end_time)
            start = requested if slot_start <= requested and requested + duration <= slot_end else slot_start
            found = attempt(day, start)
            if found:
                suggestions.append(found)

    return suggestions


def check_training_request(
    coach,
    courts,
    bookings,
    query_date: date,
    start_time: str,
    duration_minutes: int | None = None,
    time_off=(),
    commitments=(),
    timezone: str | None = None,
    business_hours=None,
    special_hours=None,
) -> Verdict:
    """Combined verdict for a coached session: coach first, then a free court.

    On success the verdict carries the first free court and its resolved
    price. When the coach is free but no court is, it carries alternative
    suggestions instead.
    """
    duration = duration_minutes or settings.training_duration_minutes
    timezone = timezone or settings.default_club_timezone
    window = TimeWindow.from_duration(local_to_utc(query_date, start_time, timezone), duration)

    verdict = can_book_coach(coach, query_date, window, time_off, commitments, timezone)
    if not verdict.ok:
        return verdict

    start = time_to_minutes(start_time)
    free = []
    if _within_club_hours(business_hours, special_hours, query_date, start, start + duration):
        free = find_available_courts(courts, bookings, window)

    if not free:
        suggestions = suggest_alternatives(
            coach,
            courts,
            bookings,
            query_date,
            start_time,
            duration,
            time_off=time_off,
            commitments=commitments,
            timezone=timezone,
            business_hours=business_hours,
            special_hours=special_hours,
        )
        logger.info(
            "No court free for coach %s at %s %s, %d suggestions", coach.id, query_date, start_time, len(suggestions)
        )
        return Verdict.reject(ConflictReason.NO_COURT_AVAILABLE, suggestions)

    court = free[0]
    return Verdict(ok=True, court_id=court.id, price_cents=resolve_price(court, window, timezone))
