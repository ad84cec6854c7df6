"""Coached session checks: coach availability, a free court, and alternatives."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from arenaone.core.config import settings
from arenaone.core.dependencies import get_repository
from arenaone.repositories import AvailabilityRepository
from arenaone.schemas import ConflictOut, SuggestionOut, TrainingAcceptedOut, TrainingCheck
from arenaone.services.coach_availability import check_training_request
from arenaone.services.intervals import parse_time
from arenaone.services.timezones import day_range, get_club_timezone, parse_date, shift_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trainings", tags=["trainings"])


@router.post(
    "/check",
    response_model=TrainingAcceptedOut,
    responses={status.HTTP_409_CONFLICT: {"model": ConflictOut}},
)
async def check_training(body: TrainingCheck, repo: AvailabilityRepository = Depends(get_repository)):
    query_date = parse_date(body.date)
    parse_time(body.time)

    coach = await repo.get_coach(body.coach_id)
    if coach.club_id != body.club_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coach not found in this club")
    club = await repo.get_club(body.club_id)
    timezone = get_club_timezone(club.timezone)

    # Suggestions may land on any day up to the horizon, so fetch rows for all of it
    horizon_end = shift_date(query_date, settings.suggestion_horizon_days)
    range_start = day_range(query_date.isoformat(), timezone).start_of_day
    range_end = day_range(horizon_end.isoformat(), timezone).end_of_day

    courts = await repo.list_courts(club.id)
    bookings = await repo.list_bookings([c.id for c in courts], range_start, range_end)
    commitments = await repo.list_coach_bookings(coach.id, range_start, range_end)
    time_off = await repo.list_coach_time_off(coach.id, query_date, horizon_end)
    business_hours = await repo.get_business_hours(club.id)
    special_hours = await repo.list_special_hours(club.id, query_date, horizon_end)

    verdict = check_training_request(
        coach,
        courts,
        bookings,
        query_date,
        body.time,
        body.duration_minutes,
        time_off=time_off,
        commitments=commitments,
        timezone=timezone,
        business_hours=business_hours,
        special_hours=special_hours,
    )

    if not verdict.ok:
        logger.info("Training check for coach %s rejected: %s", coach.id, verdict.reason.value)
        conflict = ConflictOut(
            reason=verdict.reason.value,
            message=verdict.message,
            suggestions=[SuggestionOut(**s._asdict()) for s in verdict.suggestions],
        )
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=conflict.model_dump())

    return TrainingAcceptedOut(court_id=verdict.court_id, price_cents=verdict.price_cents)
