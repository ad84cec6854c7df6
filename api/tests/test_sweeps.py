"""Booking status sweep, statistics refresh and roll-ups against the in-memory repository."""

from datetime import date, timedelta

import pytest

from arenaone.models.booking import BookingStatus, PaymentStatus
from arenaone.services.statistics import DailyStatistics
from arenaone.services.sweeps import (
    club_monthly_statistics,
    organisation_monthly_statistics,
    recompute_day,
    refresh_statistics,
    run_status_sweep,
)
from conftest import booking_row, club_row, utc

NOW = utc(2024, 1, 15, 2)  # 04:00 in Kyiv


class TestStatusSweep:
    @pytest.mark.asyncio
    async def test_cancels_and_completes(self, repo):
        repo.add_booking(booking_row("expired", utc(2024, 1, 16, 8), expires_at=NOW - timedelta(minutes=1)))
        repo.add_booking(booking_row("finished", utc(2024, 1, 14, 8), payment=PaymentStatus.PAID))
        repo.add_booking(booking_row("upcoming", utc(2024, 1, 16, 8), payment=PaymentStatus.PAID))

        assert await run_status_sweep(repo, NOW) == {"cancelled": 1, "completed": 1}
        assert repo.bookings["expired"].booking_status == BookingStatus.CANCELLED
        assert repo.bookings["finished"].booking_status == BookingStatus.COMPLETED
        assert repo.bookings["upcoming"].booking_status == BookingStatus.RESERVED

    @pytest.mark.asyncio
    async def test_idempotent(self, repo):
        repo.add_booking(booking_row("finished", utc(2024, 1, 14, 8), payment=PaymentStatus.PAID))
        await run_status_sweep(repo, NOW)
        assert await run_status_sweep(repo, NOW) == {"cancelled": 0, "completed": 0}


class TestStatisticsRefresh:
    @pytest.mark.asyncio
    async def test_fills_the_past_week(self, repo):
        repo.add_booking(booking_row("b1", utc(2024, 1, 14, 8)))

        result = await refresh_statistics(repo, NOW)

        assert result == {"refreshed": 7, "failed": []}
        rows = await repo.list_daily_statistics("club-1", date(2024, 1, 8), date(2024, 1, 14))
        assert [r.date for r in rows] == [date(2024, 1, 8) + timedelta(days=i) for i in range(7)]
        assert rows[-1].booked_slots == 1
        assert rows[-1].total_slots == 32
        assert rows[-1].computed_at == NOW

    @pytest.mark.asyncio
    async def test_second_run_only_redoes_yesterday(self, repo):
        await refresh_statistics(repo, NOW)
        assert await refresh_statistics(repo, NOW + timedelta(hours=1)) == {"refreshed": 1, "failed": []}

    @pytest.mark.asyncio
    async def test_failing_club_is_skipped(self, repo, monkeypatch):
        repo.add_club(club_row(id="club-2", name="Broken"))
        original = repo.list_courts

        async def list_courts(club_id):
            if club_id == "club-2":
                raise RuntimeError("connection reset")
            return await original(club_id)

        monkeypatch.setattr(repo, "list_courts", list_courts)

        result = await refresh_statistics(repo, NOW)
        assert result == {"refreshed": 7, "failed": ["club-2"]}

    @pytest.mark.asyncio
    async def test_recompute_single_day(self, repo):
        repo.add_booking(booking_row("b1", utc(2024, 1, 15, 8), minutes=120))
        club = await repo.get_club("club-1")

        stats = await recompute_day(repo, club, date(2024, 1, 15), NOW)

        assert stats.booked_slots == 2
        rows = await repo.list_daily_statistics("club-1", date(2024, 1, 15), date(2024, 1, 15))
        assert rows[0].occupancy_percentage == pytest.approx(6.25)


class TestMonthlyRollups:
    async def _store(self, repo, club_id, on, occupancy):
        await repo.save_daily_statistics(DailyStatistics(club_id, on, 0, 32, occupancy), NOW)

    @pytest.mark.asyncio
    async def test_club_month(self, repo):
        await self._store(repo, "club-1", date(2024, 1, 10), 40.0)
        await self._store(repo, "club-1", date(2023, 12, 10), 20.0)
        club = await repo.get_club("club-1")

        stats = await club_monthly_statistics(repo, club, 1, 2024)

        assert stats.average_occupancy == pytest.approx(40.0)
        assert stats.occupancy_change_percent == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_organisation_covers_its_active_clubs(self, repo):
        repo.add_club(club_row(id="club-2", name="Arena Lviv"))
        repo.add_club(club_row(id="club-3", name="Elsewhere", organisation_id="org-2"))
        repo.add_club(club_row(id="club-4", name="Closed down", status="inactive"))
        await self._store(repo, "club-1", date(2024, 1, 10), 30.0)

        results = await organisation_monthly_statistics(repo, "org-1", 1, 2024)

        assert [r["club_id"] for r in results] == ["club-1", "club-2"]
        assert results[0]["statistics"].average_occupancy == pytest.approx(30.0)
        assert results[1]["statistics"] is None
        assert all(r["error"] is None for r in results)

    @pytest.mark.asyncio
    async def test_failing_club_reported_and_others_kept(self, repo, monkeypatch):
        repo.add_club(club_row(id="club-2", name="Broken"))
        await self._store(repo, "club-1", date(2024, 1, 10), 30.0)
        original = repo.list_daily_statistics

        async def list_daily_statistics(club_id, start_date, end_date):
            if club_id == "club-2":
                raise RuntimeError("connection reset")
            return await original(club_id, start_date, end_date)

        monkeypatch.setattr(repo, "list_daily_statistics", list_daily_statistics)

        results = await organisation_monthly_statistics(repo, "org-1", 1, 2024)

        assert results[0]["statistics"].average_occupancy == pytest.approx(30.0)
        assert results[1]["statistics"] is None
        assert (results[1]["club_id"], results[1]["error"]) == ("club-2", "connection reset")

    @pytest.mark.asyncio
    async def test_unknown_organisation_is_empty(self, repo):
        assert await organisation_monthly_statistics(repo, "org-9", 1, 2024) == []
