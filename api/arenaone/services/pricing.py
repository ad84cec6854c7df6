"""Court price resolution from layered price rules.

A court has a default price and any number of time-window rules. Each rule
is scoped to one of four layers, from most to least specific:

* a calendar date (special events, holidays),
* a single day of the week,
* a weekday group (``WEEKDAYS`` is Monday to Friday, ``WEEKENDS`` is
  Saturday and Sunday),
* every day (no date and no day of week).

A rule applies to a slot when its scope covers the slot's local date and its
window fully contains the slot. A more specific layer always beats a less
specific one. Rules that do not parse are skipped so one bad row never takes
down pricing for the whole court.
"""

import logging
from datetime import date
from typing import NamedTuple

from arenaone.services.intervals import (
    TimeWindow,
    is_valid_time_range,
    minutes_to_time,
    time_string_contains,
    time_to_minutes,
)
from arenaone.services.timezones import day_of_week, local_to_utc, to_local

logger = logging.getLogger(__name__)

WEEKDAYS = "WEEKDAYS"
WEEKENDS = "WEEKENDS"
RULE_GROUPS = {WEEKDAYS: frozenset({1, 2, 3, 4, 5}), WEEKENDS: frozenset({0, 6})}

# Most specific first
DATE_LAYER, DAY_LAYER, GROUP_LAYER, GENERAL_LAYER = range(4)


class PriceSegment(NamedTuple):
    start: str  # "HH:MM"
    end: str
    price_cents: int


def _is_valid_rule(rule) -> bool:
    dow = getattr(rule, "day_of_week", None)
    on = getattr(rule, "date", None)
    price = getattr(rule, "price_cents", None)
    return (
        (dow is None or (isinstance(dow, int) and not isinstance(dow, bool) and 0 <= dow <= 6))
        and (on is None or isinstance(on, date))
        and isinstance(price, int)
        and not isinstance(price, bool)
        and price >= 0
        and is_valid_time_range(getattr(rule, "start_time", None), getattr(rule, "end_time", None))
    )


def valid_rules(court) -> list:
    """The court's price rules minus any malformed ones (logged, never raised)."""
    rules = []
    for rule in getattr(court, "price_rules", None) or []:
        if _is_valid_rule(rule):
            rules.append(rule)
        else:
            logger.warning(
                "Skipping malformed price rule %s on court %s", getattr(rule, "id", "?"), getattr(court, "id", "?")
            )
    return rules


def rule_layer(rule) -> int:
    if getattr(rule, "date", None) is not None:
        return DATE_LAYER
    if getattr(rule, "rule_type", None) in RULE_GROUPS:
        return GROUP_LAYER
    if getattr(rule, "day_of_week", None) is not None:
        return DAY_LAYER
    return GENERAL_LAYER


def rule_applies_on(rule, query_date: date) -> bool:
    """Whether the rule's date, weekday or group scope covers query_date."""
    layer = rule_layer(rule)
    if layer == DATE_LAYER:
        return rule.date == query_date
    if layer == GROUP_LAYER:
        return day_of_week(query_date) in RULE_GROUPS[rule.rule_type]
    if layer == DAY_LAYER:
        return rule.day_of_week == day_of_week(query_date)
    return True


def _rule_priority(rule) -> tuple[int, int, int]:
    """Sort key: more specific layer first, then narrower window, then later start time.

    Remaining ties keep input order (min() and sorted() are stable).
    """
    start = time_to_minutes(rule.start_time)
    return rule_layer(rule), time_to_minutes(rule.end_time) - start, -start


def rules_for_day(court, query_date: date) -> list:
    """Valid rules that apply on query_date, highest priority first."""
    return sorted((r for r in valid_rules(court) if rule_applies_on(r, query_date)), key=_rule_priority)


def default_price(court) -> int:
    price = court.default_price_cents
    if not isinstance(price, int) or price < 0:
        raise ValueError(f"Court {getattr(court, 'id', '?')} has an invalid default price: {price!r}")
    return price


def resolve_price(court, requested_window: TimeWindow, timezone: str) -> int:
    """Return the price in cents for a booking window on a court.

    Falls back to the court's default price when no rule matches, including
    when the window crosses local midnight (no rule can contain it).
    """
    local_start = to_local(requested_window.start, timezone)
    local_end = to_local(requested_window.end, timezone)
    if local_start.date() != local_end.date():
        return default_price(court)

    start_s = local_start.strftime("%H:%M")
    end_s = local_end.strftime("%H:%M")

    for rule in rules_for_day(court, local_start.date()):
        if time_string_contains(rule.start_time, rule.end_time, start_s, end_s):
            return rule.price_cents
    return default_price(court)


def resolve_price_for_slot(court, query_date: date, start_time: str, duration_minutes: int, timezone: str) -> int:
    """resolve_price for a club-local date + "HH:MM" start and a duration."""
    window = TimeWindow.from_duration(local_to_utc(query_date, start_time, timezone), duration_minutes)
    return resolve_price(court, window, timezone)


def _uncovered(start: int, end: int, covered: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Parts of [start, end) not covered by any range in covered."""
    gaps = []
    current = start
    for c_start, c_end in sorted(covered):
        if current >= end:
            break
        if c_end <= current:
            continue
        if c_start > current:
            gaps.append((current, min(c_start, end)))
        current = max(current, c_end)
    if current < end:
        gaps.append((current, end))
    return gaps


def price_timeline(court, query_date: date) -> list[PriceSegment]:
    """Price segments for a day, for the court page and club preview.

    Rules are laid down in priority order; a lower-priority rule only fills the
    minutes no higher-priority rule already covers. Adjacent segments with the
    same price are merged. Minutes outside every segment cost the default price.
    """
    covered: list[tuple[int, int]] = []
    segments: list[tuple[int, int, int]] = []
    for rule in rules_for_day(court, query_date):
        for gap in _uncovered(time_to_minutes(rule.start_time), time_to_minutes(rule.end_time), covered):
            segments.append((gap[0], gap[1], rule.price_cents))
            covered.append(gap)

    segments.sort()
    merged: list[list[int]] = []
    for start, end, price in segments:
        if merged and merged[-1][2] == price and merged[-1][1] == start:
            merged[-1][1] = end
        else:
            merged.append([start, end, price])

    return [PriceSegment(minutes_to_time(s), minutes_to_time(e), p) for s, e, p in merged]


def price_range(court, query_date: date) -> tuple[int, int]:
    """Cheapest and dearest price on a day, default price included."""
    prices = [segment.price_cents for segment in price_timeline(court, query_date)]
    prices.append(default_price(court))
    return min(prices), max(prices)
