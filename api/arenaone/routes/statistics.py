"""Club and organisation occupancy statistics."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query

from arenaone.core.dependencies import get_repository
from arenaone.repositories import AvailabilityRepository
from arenaone.schemas import (
    ClubMonthlyStatisticsOut,
    DailyStatisticsOut,
    MonthlyStatisticsOut,
    OrganisationMonthlyStatisticsOut,
)
from arenaone.services.statistics import MonthlyStatistics, is_stale
from arenaone.services.sweeps import club_monthly_statistics, organisation_monthly_statistics, recompute_day
from arenaone.services.timezones import parse_date

router = APIRouter(prefix="/clubs/{club_id}/statistics", tags=["statistics"])
organisation_router = APIRouter(prefix="/organisations/{organisation_id}/statistics", tags=["statistics"])


def _monthly_out(club_id: str, month: int, year: int, stats: MonthlyStatistics | None) -> MonthlyStatisticsOut:
    return MonthlyStatisticsOut(
        club_id=club_id,
        month=month,
        year=year,
        average_occupancy=stats.average_occupancy if stats else None,
        previous_month_occupancy=stats.previous_month_occupancy if stats else None,
        occupancy_change_percent=stats.occupancy_change_percent if stats else None,
    )


@router.get("/daily", response_model=DailyStatisticsOut)
async def get_daily_statistics(
    club_id: str,
    date: str = Query(..., description="Club-local date, YYYY-MM-DD"),
    repo: AvailabilityRepository = Depends(get_repository),
):
    query_date = parse_date(date)
    club = await repo.get_club(club_id)
    now = datetime.now(UTC)

    rows = await repo.list_daily_statistics(club.id, query_date, query_date)
    if rows and not is_stale(rows[0].computed_at, now):
        return DailyStatisticsOut.model_validate(rows[0])

    stats = await recompute_day(repo, club, query_date, now)
    return DailyStatisticsOut(**stats._asdict())


@router.get("/monthly", response_model=MonthlyStatisticsOut)
async def get_monthly_statistics(
    club_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    repo: AvailabilityRepository = Depends(get_repository),
):
    club = await repo.get_club(club_id)
    stats = await club_monthly_statistics(repo, club, month, year)
    return _monthly_out(club.id, month, year, stats)


@organisation_router.get("/monthly", response_model=OrganisationMonthlyStatisticsOut)
async def get_organisation_monthly_statistics(
    organisation_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    repo: AvailabilityRepository = Depends(get_repository),
):
    results = await organisation_monthly_statistics(repo, organisation_id, month, year)
    return OrganisationMonthlyStatisticsOut(
        organisation_id=organisation_id,
        month=month,
        year=year,
        clubs=[
            ClubMonthlyStatisticsOut(
                club_id=r["club_id"],
                club_name=r["club_name"],
                statistics=None if r["error"] else _monthly_out(r["club_id"], month, year, r["statistics"]),
                error=r["error"],
            )
            for r in results
        ],
    )
