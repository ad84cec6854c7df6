"""In-memory repository behaviour shared with the SQL implementation."""

from datetime import date

import pytest

from arenaone.core.exceptions import NotFound
from arenaone.models.booking import BookingStatus
from arenaone.services.statistics import DailyStatistics
from conftest import booking_row, club_row, court_row, utc


class TestLookups:
    @pytest.mark.asyncio
    async def test_unknown_ids(self, repo):
        with pytest.raises(NotFound, match="Court nope not found"):
            await repo.get_court("nope")
        with pytest.raises(NotFound):
            await repo.get_club("nope")
        with pytest.raises(NotFound):
            await repo.get_coach("nope")

    @pytest.mark.asyncio
    async def test_courts_sorted_by_name(self, repo):
        repo.add_court(court_row("court-0", "Alpha"))
        assert [c.name for c in await repo.list_courts("club-1")] == ["Alpha", "Court 1", "Court 2"]

    @pytest.mark.asyncio
    async def test_inactive_clubs_not_listed(self, repo):
        repo.add_club(club_row(id="club-2", status="archived"))
        assert [c.id for c in await repo.list_clubs()] == ["club-1"]


class TestBookings:
    @pytest.mark.asyncio
    async def test_half_open_range(self, repo):
        repo.add_booking(booking_row("before", utc(2024, 1, 15, 7)))
        repo.add_booking(booking_row("inside", utc(2024, 1, 15, 8, 30)))
        repo.add_booking(booking_row("after", utc(2024, 1, 15, 10)))
        found = await repo.list_bookings(["court-1"], utc(2024, 1, 15, 8), utc(2024, 1, 15, 10))
        assert [b.id for b in found] == ["inside"]

    @pytest.mark.asyncio
    async def test_filters_by_court_and_coach(self, repo):
        repo.add_booking(booking_row("c1", utc(2024, 1, 15, 8)))
        repo.add_booking(booking_row("c2", utc(2024, 1, 15, 8), court_id="court-2", coach_id="coach-1"))
        start, end = utc(2024, 1, 15), utc(2024, 1, 16)
        assert [b.id for b in await repo.list_bookings(["court-2"], start, end)] == ["c2"]
        assert [b.id for b in await repo.list_coach_bookings("coach-1", start, end)] == ["c2"]

    @pytest.mark.asyncio
    async def test_open_bookings_and_status_update(self, repo):
        repo.add_booking(booking_row("open", utc(2024, 1, 15, 8)))
        repo.add_booking(booking_row("done", utc(2024, 1, 15, 8), status=BookingStatus.COMPLETED))
        assert [b.id for b in await repo.list_open_bookings()] == ["open"]

        await repo.update_booking_status("open", BookingStatus.CANCELLED)
        assert await repo.list_open_bookings() == []


class TestStatisticsRows:
    @pytest.mark.asyncio
    async def test_save_overwrites_same_day(self, repo):
        day = date(2024, 1, 15)
        await repo.save_daily_statistics(DailyStatistics("club-1", day, 1, 32, 3.125), utc(2024, 1, 16))
        await repo.save_daily_statistics(DailyStatistics("club-1", day, 2, 32, 6.25), utc(2024, 1, 17))

        rows = await repo.list_daily_statistics("club-1", day, day)
        assert len(rows) == 1
        assert rows[0].booked_slots == 2
        assert rows[0].computed_at == utc(2024, 1, 17)
