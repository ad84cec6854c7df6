"""Dict-backed repository for tests, demos and local development."""

from datetime import date, datetime
from types import SimpleNamespace

from arenaone.core.exceptions import NotFound
from arenaone.models.booking import BookingStatus
from arenaone.services.booking_status import is_terminal
from arenaone.services.statistics import DailyStatistics
from arenaone.services.timezones import ensure_utc


def _overlapping(bookings, start: datetime, end: datetime) -> list:
    start, end = ensure_utc(start), ensure_utc(end)
    return [b for b in bookings if ensure_utc(b.start) < end and ensure_utc(b.end) > start]


class InMemoryRepository:
    """Holds plain row objects (ORM instances or SimpleNamespace) in memory.

    Rows are shared, not copied: update_booking_status mutates the stored object.
    """

    def __init__(self):
        self.clubs: dict[str, object] = {}
        self.courts: dict[str, object] = {}
        self.coaches: dict[str, object] = {}
        self.bookings: dict[str, object] = {}
        self.business_hours: list = []
        self.special_hours: list = []
        self.time_off: list = []
        self.daily_statistics: dict[tuple[str, date], SimpleNamespace] = {}

    # -- seeding ------------------------------------------------------------

    def add_club(self, club, business_hours=(), special_hours=()):
        self.clubs[club.id] = club
        self.business_hours.extend(business_hours)
        self.special_hours.extend(special_hours)
        return club

    def add_court(self, court):
        self.courts[court.id] = court
        return court

    def add_coach(self, coach, time_off=()):
        self.coaches[coach.id] = coach
        self.time_off.extend(time_off)
        return coach

    def add_booking(self, booking):
        self.bookings[booking.id] = booking
        return booking

    # -- reads --------------------------------------------------------------

    async def list_clubs(self) -> list:
        return [c for c in self.clubs.values() if getattr(c, "status", "active") == "active"]

    async def get_club(self, club_id: str):
        try:
            return self.clubs[club_id]
        except KeyError:
            raise NotFound("Club", club_id) from None

    async def get_court(self, court_id: str):
        try:
            return self.courts[court_id]
        except KeyError:
            raise NotFound("Court", court_id) from None

    async def list_courts(self, club_id: str) -> list:
        return sorted((c for c in self.courts.values() if c.club_id == club_id), key=lambda c: c.name)

    async def get_business_hours(self, club_id: str) -> list:
        return [h for h in self.business_hours if h.club_id == club_id]

    async def list_special_hours(self, club_id: str, start_date: date, end_date: date) -> list:
        return [h for h in self.special_hours if h.club_id == club_id and start_date <= h.date <= end_date]

    async def get_coach(self, coach_id: str):
        try:
            return self.coaches[coach_id]
        except KeyError:
            raise NotFound("Coach", coach_id) from None

    async def list_coach_time_off(self, coach_id: str, start_date: date, end_date: date) -> list:
        return [t for t in self.time_off if t.coach_id == coach_id and start_date <= t.date <= end_date]

    async def list_bookings(self, court_ids: list[str], start: datetime, end: datetime) -> list:
        ids = set(court_ids)
        return _overlapping([b for b in self.bookings.values() if b.court_id in ids], start, end)

    async def list_coach_bookings(self, coach_id: str, start: datetime, end: datetime) -> list:
        return _overlapping([b for b in self.bookings.values() if b.coach_id == coach_id], start, end)

    async def list_open_bookings(self) -> list:
        return [b for b in self.bookings.values() if not is_terminal(b.booking_status)]

    async def list_daily_statistics(self, club_id: str, start_date: date, end_date: date) -> list:
        rows = [
            row
            for (cid, day), row in self.daily_statistics.items()
            if cid == club_id and start_date <= day <= end_date
        ]
        return sorted(rows, key=lambda r: r.date)

    # -- writes -------------------------------------------------------------

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> None:
        self.bookings[booking_id].booking_status = status

    async def save_daily_statistics(self, stats: DailyStatistics, computed_at: datetime) -> None:
        self.daily_statistics[(stats.club_id, stats.date)] = SimpleNamespace(**stats._asdict(), computed_at=computed_at)
