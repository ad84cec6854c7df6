"""Half-open time interval primitives.

Every window is [start, end): touching endpoints do not overlap. Works on
UTC datetimes (TimeWindow) or on zero-padded "HH:MM" strings, which sort
lexically in time-of-day order. No timezone conversion happens here.
"""

import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta

from arenaone.core.exceptions import InvalidTimeFormat, InvalidWindow

_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, slots=True)
class TimeWindow:
    start: datetime
    end: datetime

    def __post_init__(self):
        if not self.start < self.end:
            raise InvalidWindow(f"Window start {self.start} must be before end {self.end}")

    @classmethod
    def from_duration(cls, start: datetime, minutes: int) -> "TimeWindow":
        return cls(start, start + timedelta(minutes=minutes))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    return a.start < b.end and b.start < a.end


def contains(outer: TimeWindow, inner: TimeWindow) -> bool:
    return outer.start <= inner.start and outer.end >= inner.end


def adjacent(a: TimeWindow, b: TimeWindow) -> bool:
    """True when one window ends exactly where the other starts."""
    return a.end == b.start or b.end == a.start


def time_string_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    return a_start < b_end and b_start < a_end


def time_string_contains(outer_start: str, outer_end: str, inner_start: str, inner_end: str) -> bool:
    return outer_start <= inner_start and outer_end >= inner_end


def is_valid_time_format(value: object) -> bool:
    """Zero-padded 24-hour "HH:MM". No seconds, no AM/PM, no "24:00"."""
    return isinstance(value, str) and _TIME_RE.fullmatch(value) is not None


def parse_time(value: str) -> time:
    if not is_valid_time_format(value):
        raise InvalidTimeFormat(f"Invalid time format: {value!r}. Use HH:MM")
    h, m = map(int, value.split(":"))
    return time(h, m)


def time_to_minutes(value: str) -> int:
    t = parse_time(value)
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM". Negative values clamp to 00:00."""
    if minutes < 0:
        return "00:00"
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_valid_time_range(start: str, end: str) -> bool:
    return is_valid_time_format(start) and is_valid_time_format(end) and start < end
