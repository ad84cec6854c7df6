"""SQLAlchemy-backed repository over an AsyncSession."""

from datetime import date, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from arenaone.core.exceptions import NotFound
from arenaone.models import (
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
    Club,
    ClubBusinessHours,
    ClubDailyStatistics,
    ClubSpecialHours,
    Coach,
    CoachTimeOff,
    Court,
)
from arenaone.services.statistics import DailyStatistics


class SqlRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, model, entity: str, entity_id: str):
        row = await self.db.get(model, entity_id)
        if row is None:
            raise NotFound(entity, entity_id)
        return row

    async def list_clubs(self) -> list:
        result = await self.db.execute(select(Club).where(Club.status == "active").order_by(Club.name))
        return list(result.scalars().all())

    async def get_club(self, club_id: str):
        return await self._get(Club, "Club", club_id)

    async def get_court(self, court_id: str):
        return await self._get(Court, "Court", court_id)

    async def list_courts(self, club_id: str) -> list:
        result = await self.db.execute(select(Court).where(Court.club_id == club_id).order_by(Court.name))
        return list(result.scalars().all())

    async def get_business_hours(self, club_id: str) -> list:
        result = await self.db.execute(select(ClubBusinessHours).where(ClubBusinessHours.club_id == club_id))
        return list(result.scalars().all())

    async def list_special_hours(self, club_id: str, start_date: date, end_date: date) -> list:
        result = await self.db.execute(
            select(ClubSpecialHours).where(
                ClubSpecialHours.club_id == club_id,
                ClubSpecialHours.date >= start_date,
                ClubSpecialHours.date <= end_date,
            )
        )
        return list(result.scalars().all())

    async def get_coach(self, coach_id: str):
        return await self._get(Coach, "Coach", coach_id)

    async def list_coach_time_off(self, coach_id: str, start_date: date, end_date: date) -> list:
        result = await self.db.execute(
            select(CoachTimeOff).where(
                CoachTimeOff.coach_id == coach_id,
                CoachTimeOff.date >= start_date,
                CoachTimeOff.date <= end_date,
            )
        )
        return list(result.scalars().all())

    async def list_bookings(self, court_ids: list[str], start: datetime, end: datetime) -> list:
        if not court_ids:
            return []
        result = await self.db.execute(
            select(Booking).where(
                Booking.court_id.in_(court_ids),
                Booking.start < end,
                Booking.end > start,
            )
        )
        return list(result.scalars().all())

    async def list_coach_bookings(self, coach_id: str, start: datetime, end: datetime) -> list:
        result = await self.db.execute(
            select(Booking).where(
                Booking.coach_id == coach_id,
                Booking.start < end,
                Booking.end > start,
            )
        )
        return list(result.scalars().all())

    async def list_open_bookings(self) -> list:
        result = await self.db.execute(select(Booking).where(Booking.booking_status.not_in(TERMINAL_STATUSES)))
        return list(result.scalars().all())

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> None:
        await self.db.execute(update(Booking).where(Booking.id == booking_id).values(booking_status=status))

    async def list_daily_statistics(self, club_id: str, start_date: date, end_date: date) -> list:
        result = await self.db.execute(
            select(ClubDailyStatistics)
            .where(
                ClubDailyStatistics.club_id == club_id,
                ClubDailyStatistics.date >= start_date,
                ClubDailyStatistics.date <= end_date,
            )
            .order_by(ClubDailyStatistics.date)
        )
        return list(result.scalars().all())

    async def save_daily_statistics(self, stats: DailyStatistics, computed_at: datetime) -> None:
        """Insert or update the row for (club, date)."""
        result = await self.db.execute(
            select(ClubDailyStatistics).where(
                ClubDailyStatistics.club_id == stats.club_id,
                ClubDailyStatistics.date == stats.date,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = ClubDailyStatistics(club_id=stats.club_id, date=stats.date)
            self.db.add(row)

        row.booked_slots = stats.booked_slots
        row.total_slots = stats.total_slots
        row.occupancy_percentage = stats.occupancy_percentage
        row.computed_at = computed_at
        await self.db.flush()
