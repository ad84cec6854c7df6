"""The repository interface the engine's callers depend on."""

from datetime import date, datetime
from typing import Protocol

from arenaone.models.booking import BookingStatus
from arenaone.services.statistics import DailyStatistics


class AvailabilityRepository(Protocol):
    """Read access to clubs, courts, coaches and bookings, plus the few writes sweeps need.

    get_* methods raise NotFound for unknown ids. Booking ranges are half-open
    and match bookings overlapping [start, end).
    """

    async def list_clubs(self) -> list: ...

    async def get_club(self, club_id: str): ...

    async def get_court(self, court_id: str): ...

    async def list_courts(self, club_id: str) -> list: ...

    async def get_business_hours(self, club_id: str) -> list: ...

    async def list_special_hours(self, club_id: str, start_date: date, end_date: date) -> list: ...

    async def get_coach(self, coach_id: str): ...

    async def list_coach_time_off(self, coach_id: str, start_date: date, end_date: date) -> list: ...

    async def list_bookings(self, court_ids: list[str], start: datetime, end: datetime) -> list: ...

    async def list_coach_bookings(self, coach_id: str, start: datetime, end: datetime) -> list: ...

    async def list_open_bookings(self) -> list: ...

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> None: ...

    async def list_daily_statistics(self, club_id: str, start_date: date, end_date: date) -> list: ...

    async def save_daily_statistics(self, stats: DailyStatistics, computed_at: datetime) -> None: ...
