"""Repository-driven jobs: booking status sweep, statistics refresh and roll-ups.

Shared by the Celery tasks and the statistics routes. Every function takes an
AvailabilityRepository and leaves committing to the caller.
"""

import logging
from datetime import UTC, date, datetime, timedelta

from arenaone.models.booking import BookingStatus
from arenaone.repositories import AvailabilityRepository
from arenaone.services.booking_status import sweep
from arenaone.services.statistics import (
    DailyStatistics,
    MonthlyStatistics,
    daily_statistics,
    dates_to_refresh,
    month_bounds,
    monthly_statistics,
    previous_month,
)
from arenaone.services.timezones import day_range, get_club_timezone, today_in_timezone

logger = logging.getLogger(__name__)


async def run_status_sweep(repo: AvailabilityRepository, now: datetime | None = None) -> dict:
    """Apply auto-cancel and auto-complete to every open booking.

    Idempotent: a second run with the same now finds nothing to change.
    """
    now = now or datetime.now(UTC)
    transitions = sweep(await repo.list_open_bookings(), now)
    for booking_id, new_status in transitions:
        await repo.update_booking_status(booking_id, new_status)

    cancelled = sum(1 for _, s in transitions if s == BookingStatus.CANCELLED)
    completed = len(transitions) - cancelled
    if transitions:
        logger.info("Status sweep: %d cancelled, %d completed", cancelled, completed)
    return {"cancelled": cancelled, "completed": completed}


async def compute_club_statistics(repo: AvailabilityRepository, club, dates: list[date]) -> list[DailyStatistics]:
    """Daily statistics for a club on each of dates, fetching rows once for the whole span."""
    if not dates:
        return []
    timezone = get_club_timezone(club.timezone)
    first, last = min(dates), max(dates)

    courts = await repo.list_courts(club.id)
    business_hours = await repo.get_business_hours(club.id)
    special_hours = await repo.list_special_hours(club.id, first, last)
    bookings = await repo.list_bookings(
        [c.id for c in courts],
        day_range(first.isoformat(), timezone).start_of_day,
        day_range(last.isoformat(), timezone).end_of_day,
    )
    return [
        daily_statistics(club.id, courts, business_hours, special_hours, bookings, day, timezone) for day in dates
    ]


async def recompute_day(
    repo: AvailabilityRepository, club, query_date: date, now: datetime | None = None
) -> DailyStatistics:
    """Recompute and store one club day, e.g. after a booking on that day changed."""
    now = now or datetime.now(UTC)
    (stats,) = await compute_club_statistics(repo, club, [query_date])
    await repo.save_daily_statistics(stats, now)
    return stats


async def refresh_statistics(repo: AvailabilityRepository, now: datetime | None = None, lookback_days: int = 7) -> dict:
    """Nightly pass: recompute yesterday plus any missing or stale day in the lookback window.

    A failing club is logged and skipped so one bad club never blocks the rest.
    """
    now = now or datetime.now(UTC)
    refreshed = 0
    failed = []

    clubs = await repo.list_clubs()
    for club in clubs:
        try:
            today = today_in_timezone(get_club_timezone(club.timezone), now)
            rows = await repo.list_daily_statistics(club.id, today - timedelta(days=lookback_days), today)
            dates = dates_to_refresh({r.date: r.computed_at for r in rows}, today, now, lookback_days)
            for stats in await compute_club_statistics(repo, club, dates):
                await repo.save_daily_statistics(stats, now)
            refreshed += len(dates)
        except Exception:
            logger.exception("Statistics refresh failed for club %s", club.id)
            failed.append(club.id)

    logger.info("Statistics refresh: %d days across %d clubs, %d failed", refreshed, len(clubs), len(failed))
    return {"refreshed": refreshed, "failed": failed}


async def club_monthly_statistics(
    repo: AvailabilityRepository, club, month: int, year: int
) -> MonthlyStatistics | None:
    current = await repo.list_daily_statistics(club.id, *month_bounds(month, year))
    previous = await repo.list_daily_statistics(club.id, *month_bounds(*previous_month(month, year)))
    return monthly_statistics(current, previous)


async def organisation_monthly_statistics(
    repo: AvailabilityRepository, organisation_id: str, month: int, year: int
) -> list[dict]:
    """Monthly statistics for every active club of an organisation.

    A club that fails is reported with statistics None and its error message,
    and the remaining clubs are still computed.
    """
    results = []
    for club in await repo.list_clubs():
        if club.organisation_id != organisation_id:
            continue
        try:
            stats = await club_monthly_statistics(repo, club, month, year)
        except Exception as exc:
            logger.exception("Monthly statistics failed for club %s", club.id)
            results.append({"club_id": club.id, "club_name": club.name, "statistics": None, "error": str(exc)})
            continue
        results.append({"club_id": club.id, "club_name": club.name, "statistics": stats, "error": None})
    return results
