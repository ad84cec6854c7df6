"""Timezone-aware date handling for club calendars.

All stored instants are UTC. Club-facing values (calendar dates, "HH:MM"
business hours) are local to the club's IANA zone and are converted here.
Pure functions only: no database, no FastAPI.
"""

import calendar
import logging
import re
from datetime import UTC, date, datetime, time, timedelta
from functools import lru_cache
from typing import NamedTuple
from zoneinfo import ZoneInfo, available_timezones

from arenaone.core.config import settings
from arenaone.core.exceptions import InvalidDateValues, InvalidFormat, InvalidTimezone
from arenaone.services.intervals import parse_time

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

END_OF_DAY = time(23, 59, 59, 999000)

# Leaves a year of headroom for horizon and session arithmetic below datetime.max
MAX_YEAR = 9998


class DayRange(NamedTuple):
    start_of_day: datetime
    end_of_day: datetime


@lru_cache(maxsize=1)
def _known_zones() -> frozenset[str]:
    return frozenset(available_timezones())


def is_valid_iana_timezone(name: object) -> bool:
    """True for names in the IANA database ("Europe/Kyiv", "UTC").

    Offset strings such as "UTC+2" or "GMT+2" are not zone names and are rejected.
    """
    if not isinstance(name, str) or not name:
        return False
    return name in _known_zones()


@lru_cache(maxsize=256)
def get_zone(name: str) -> ZoneInfo:
    if not is_valid_iana_timezone(name):
        raise InvalidTimezone(f"Invalid timezone: {name!r}. Expected an IANA name such as 'Europe/Kyiv'.")
    return ZoneInfo(name)


def get_club_timezone(name: str | None) -> str:
    """Return the club's zone, falling back to the platform default when missing or invalid."""
    if not name:
        return settings.default_club_timezone
    if not is_valid_iana_timezone(name):
        logger.warning("Invalid club timezone %r, falling back to %s", name, settings.default_club_timezone)
        return settings.default_club_timezone
    return name


def parse_date(date_string: str) -> date:
    """Parse a strict YYYY-MM-DD string.

    Impossible dates (2024-02-30) are rejected rather than rolled over, as are
    years past MAX_YEAR.
    """
    if not isinstance(date_string, str) or not _DATE_RE.fullmatch(date_string):
        raise InvalidFormat(f"Invalid date format: {date_string}. Expected YYYY-MM-DD format.")

    year, month, day = (int(part) for part in date_string.split("-"))
    if not 1 <= year <= MAX_YEAR or not 1 <= month <= 12:
        raise InvalidDateValues(f"Invalid date values in: {date_string}")
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        raise InvalidDateValues(f"Invalid date values in: {date_string}")

    return date(year, month, day)


def day_range(date_string: str, timezone: str) -> DayRange:
    """UTC boundaries of a local calendar day.

    start_of_day is local 00:00:00.000 and end_of_day local 23:59:59.999.
    Each offset is resolved on its own, so a DST change during the day moves
    one boundary and not the other.

    >>> day_range("2024-01-15", "Europe/Kyiv").start_of_day.isoformat()
    '2024-01-14T22:00:00+00:00'
    """
    query_date = parse_date(date_string)
    zone = get_zone(timezone)

    try:
        start = datetime.combine(query_date, time(0, 0), tzinfo=zone).astimezone(UTC)
        end = datetime.combine(query_date, END_OF_DAY, tzinfo=zone).astimezone(UTC)
    except OverflowError:
        raise InvalidDateValues(f"Date out of supported range: {date_string}") from None
    return DayRange(start, end)


def shift_date(query_date: date, days: int) -> date:
    """query_date moved by days, rejecting results past the calendar's ends."""
    try:
        return query_date + timedelta(days=days)
    except OverflowError:
        raise InvalidDateValues(f"Date out of supported range: {query_date.isoformat()} + {days} days") from None


def day_of_week(query_date: date) -> int:
    """0=Sunday .. 6=Saturday (Python's weekday() is 0=Monday)."""
    return (query_date.weekday() + 1) % 7


def ensure_utc(instant: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def local_to_utc(query_date: date, time_string: str, timezone: str) -> datetime:
    """Convert a club-local date + "HH:MM" to a UTC instant.

    >>> local_to_utc(date(2026, 1, 6), "10:00", "Europe/Kyiv").isoformat()
    '2026-01-06T08:00:00+00:00'
    """
    local = datetime.combine(query_date, parse_time(time_string), tzinfo=get_zone(timezone))
    try:
        return local.astimezone(UTC)
    except OverflowError:
        raise InvalidDateValues(f"Date out of supported range: {query_date.isoformat()}") from None


def to_local(instant: datetime, timezone: str) -> datetime:
    return ensure_utc(instant).astimezone(get_zone(timezone))


def utc_to_local_time(instant: datetime, timezone: str) -> str:
    return to_local(instant, timezone).strftime("%H:%M")


def today_in_timezone(timezone: str, now: datetime | None = None) -> date:
    return to_local(now or datetime.now(UTC), timezone).date()


def is_dst(instant: datetime, timezone: str) -> bool:
    return bool(to_local(instant, timezone).dst())


def to_iso(instant: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return ensure_utc(instant).isoformat(timespec="milliseconds").replace("+00:00", "Z")
