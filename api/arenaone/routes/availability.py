"""Court availability and price lookups."""

from fastapi import APIRouter, Depends, Query

from arenaone.core.dependencies import get_repository
from arenaone.repositories import AvailabilityRepository
from arenaone.schemas import (
    AvailabilityOut,
    CourtBriefOut,
    PriceOut,
    PriceSegmentOut,
    PriceTimelineOut,
    WeeklyAvailabilityOut,
)
from arenaone.services.intervals import parse_time
from arenaone.services.operating_hours import availability_payload, club_weekly_availability, court_availability
from arenaone.services.pricing import default_price, price_range, price_timeline, resolve_price_for_slot
from arenaone.services.timezones import day_range, get_club_timezone, parse_date, shift_date, today_in_timezone

router = APIRouter(prefix="/courts", tags=["availability"])
club_router = APIRouter(prefix="/clubs", tags=["availability"])


async def _court_and_timezone(repo: AvailabilityRepository, court_id: str):
    court = await repo.get_court(court_id)
    club = await repo.get_club(court.club_id)
    return court, club, get_club_timezone(club.timezone)


@router.get("/{court_id}/availability", response_model=AvailabilityOut)
async def get_availability(
    court_id: str,
    date: str = Query(..., description="Club-local date, YYYY-MM-DD"),
    slot_minutes: int | None = Query(None, gt=0, le=240),
    repo: AvailabilityRepository = Depends(get_repository),
):
    query_date = parse_date(date)
    court, club, timezone = await _court_and_timezone(repo, court_id)
    bounds = day_range(date, timezone)

    business_hours = await repo.get_business_hours(club.id)
    special_hours = await repo.list_special_hours(club.id, query_date, query_date)
    bookings = await repo.list_bookings([court.id], bounds.start_of_day, bounds.end_of_day)

    slots = court_availability(court, business_hours, special_hours, bookings, query_date, slot_minutes, timezone)
    return AvailabilityOut(
        court_id=court.id,
        court_name=court.name,
        timezone=timezone,
        **availability_payload(query_date, slots),
    )


@router.get("/{court_id}/price", response_model=PriceOut)
async def get_price(
    court_id: str,
    date: str = Query(...),
    time: str = Query(..., description="Club-local start, HH:MM"),
    duration: int = Query(60, gt=0, le=480),
    repo: AvailabilityRepository = Depends(get_repository),
):
    query_date = parse_date(date)
    parse_time(time)
    court, _, timezone = await _court_and_timezone(repo, court_id)

    return PriceOut(
        court_id=court.id,
        date=query_date,
        start_time=time,
        duration_minutes=duration,
        price_cents=resolve_price_for_slot(court, query_date, time, duration, timezone),
    )


@router.get("/{court_id}/price-timeline", response_model=PriceTimelineOut)
async def get_price_timeline(
    court_id: str,
    date: str = Query(...),
    repo: AvailabilityRepository = Depends(get_repository),
):
    query_date = parse_date(date)
    court = await repo.get_court(court_id)
    lowest, highest = price_range(court, query_date)

    return PriceTimelineOut(
        court_id=court.id,
        date=query_date,
        default_price_cents=default_price(court),
        min_price_cents=lowest,
        max_price_cents=highest,
        segments=[PriceSegmentOut(**s._asdict()) for s in price_timeline(court, query_date)],
    )


@club_router.get("/{club_id}/courts/availability", response_model=WeeklyAvailabilityOut)
async def get_weekly_availability(
    club_id: str,
    week_start: str | None = Query(None, alias="weekStart", description="Club-local YYYY-MM-DD, default this Monday"),
    repo: AvailabilityRepository = Depends(get_repository),
):
    club = await repo.get_club(club_id)
    timezone = get_club_timezone(club.timezone)
    if week_start is None:
        today = today_in_timezone(timezone)
        first_day = shift_date(today, -today.weekday())
    else:
        first_day = parse_date(week_start)
    last_day = shift_date(first_day, 6)

    courts = [c for c in await repo.list_courts(club.id) if getattr(c, "is_active", True)]
    business_hours = await repo.get_business_hours(club.id)
    special_hours = await repo.list_special_hours(club.id, first_day, last_day)
    bookings = await repo.list_bookings(
        [c.id for c in courts],
        day_range(first_day.isoformat(), timezone).start_of_day,
        day_range(last_day.isoformat(), timezone).end_of_day,
    )

    return WeeklyAvailabilityOut(
        club_id=club.id,
        timezone=timezone,
        week_start=first_day,
        week_end=last_day,
        courts=[CourtBriefOut.model_validate(c) for c in courts],
        days=club_weekly_availability(courts, business_hours, special_hours, bookings, first_day, timezone),
    )
