"""Club occupancy statistics.

Daily figures: total slots = active courts x whole open hours, booked slots
= hours of non-cancelled bookings that start on the club-local day. Monthly
figures average the daily occupancy and compare with the previous month.
"""

import calendar
import math
from datetime import UTC, date, datetime, timedelta
from typing import NamedTuple

from arenaone.core.config import settings
from arenaone.models.booking import BookingStatus
from arenaone.services.booking_status import to_booking_status
from arenaone.services.operating_hours import open_minutes
from arenaone.services.timezones import day_range, ensure_utc


class DailyStatistics(NamedTuple):
    club_id: str
    date: date
    booked_slots: int
    total_slots: int
    occupancy_percentage: float


class MonthlyStatistics(NamedTuple):
    average_occupancy: float
    previous_month_occupancy: float | None
    occupancy_change_percent: float | None


def total_slots(courts, business_hours, special_hours, query_date: date) -> int:
    active = [c for c in courts if getattr(c, "is_active", True)]
    return len(active) * (open_minutes(business_hours, special_hours, query_date) // 60)


def bookings_on_day(bookings, query_date: date, timezone: str) -> list:
    """Bookings whose start falls on the club-local calendar day."""
    day = day_range(query_date.isoformat(), timezone)
    return [b for b in bookings if day.start_of_day <= ensure_utc(b.start) <= day.end_of_day]


def booked_slots(bookings) -> int:
    """Booked hours of non-cancelled bookings, rounded half up."""
    hours = sum(
        (ensure_utc(b.end) - ensure_utc(b.start)).total_seconds() / 3600
        for b in bookings
        if to_booking_status(b.booking_status) != BookingStatus.CANCELLED
    )
    return math.floor(hours + 0.5)


def daily_statistics(
    club_id, courts, business_hours, special_hours, bookings, query_date: date, timezone: str
) -> DailyStatistics:
    total = total_slots(courts, business_hours, special_hours, query_date)
    booked = booked_slots(bookings_on_day(bookings, query_date, timezone))
    occupancy = booked / total * 100 if total > 0 else 0.0
    return DailyStatistics(club_id, query_date, booked, total, occupancy)


def is_stale(computed_at: datetime | None, now: datetime | None = None) -> bool:
    if computed_at is None:
        return True
    now = ensure_utc(now or datetime.now(UTC))
    return now - ensure_utc(computed_at) > timedelta(days=settings.statistics_stale_days)


def dates_to_refresh(computed: dict[date, datetime], today: date, now: datetime, lookback_days: int = 7) -> list[date]:
    """Past dates whose statistics are missing or stale. Yesterday is always included."""
    yesterday = today - timedelta(days=1)
    dates = []
    for offset in range(lookback_days, 0, -1):
        day = today - timedelta(days=offset)
        if day == yesterday or is_stale(computed.get(day), now):
            dates.append(day)
    return dates


def average_occupancy(rows) -> float | None:
    values = [r.occupancy_percentage for r in rows]
    if not values:
        return None
    return sum(values) / len(values)


def previous_month(month: int, year: int) -> tuple[int, int]:
    return (12, year - 1) if month == 1 else (month - 1, year)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def monthly_statistics(daily_rows, previous_rows) -> MonthlyStatistics | None:
    """Average occupancy for a month and its change against the previous one.

    None when the month has no daily rows at all.
    """
    current = average_occupancy(daily_rows)
    if current is None:
        return None

    previous = average_occupancy(previous_rows)
    change = None
    if previous is not None:
        if previous > 0:
            change = (current - previous) / previous * 100
        elif current > 0:
            change = 100.0
        else:
            change = 0.0

    return MonthlyStatistics(current, previous, change)
