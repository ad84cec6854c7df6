"""Occupancy statistics (pure functions, no DB)."""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from arenaone.models.booking import BookingStatus
from arenaone.services.statistics import (
    booked_slots,
    bookings_on_day,
    daily_statistics,
    dates_to_refresh,
    is_stale,
    monthly_statistics,
    previous_month,
    total_slots,
)
from conftest import KYIV, MONDAY, booking_row, court_row, special_row, utc, week_hours


def _courts():
    return [court_row("court-1", "Court 1"), court_row("court-2", "Court 2")]


def _rows(*values):
    return [SimpleNamespace(occupancy_percentage=v) for v in values]


class TestDailyStatistics:
    def test_total_slots(self):
        assert total_slots(_courts(), week_hours(), [], MONDAY) == 32

    def test_inactive_courts_not_counted(self):
        courts = _courts() + [court_row("court-3", "Court 3", is_active=False)]
        assert total_slots(courts, week_hours(), [], MONDAY) == 32

    def test_partial_hours_floor(self):
        assert total_slots(_courts(), week_hours("06:00", "21:30"), [], MONDAY) == 30

    def test_closed_day(self):
        assert total_slots(_courts(), week_hours(), [special_row(MONDAY)], MONDAY) == 0

    def test_booked_slots_rounds_hours(self):
        bookings = [booking_row("b1", utc(2024, 1, 15, 8)), booking_row("b2", utc(2024, 1, 15, 10), minutes=90)]
        assert booked_slots(bookings) == 3

    def test_half_hour_rounds_up(self):
        assert booked_slots([booking_row("b1", utc(2024, 1, 15, 8), minutes=30)]) == 1

    def test_cancelled_excluded(self):
        bookings = [
            booking_row("b1", utc(2024, 1, 15, 8)),
            booking_row("b2", utc(2024, 1, 15, 10), status=BookingStatus.CANCELLED),
        ]
        assert booked_slots(bookings) == 1

    def test_bookings_on_local_day(self):
        early = booking_row("early", utc(2024, 1, 14, 22, 30))  # 00:30 on the 15th in Kyiv
        late = booking_row("late", utc(2024, 1, 14, 21, 30))  # 23:30 on the 14th in Kyiv
        assert [b.id for b in bookings_on_day([early, late], MONDAY, KYIV)] == ["early"]

    def test_occupancy(self):
        stats = daily_statistics(
            "club-1", _courts(), week_hours(), [], [booking_row("b1", utc(2024, 1, 15, 8))], MONDAY, KYIV
        )
        assert stats.booked_slots == 1
        assert stats.total_slots == 32
        assert stats.occupancy_percentage == pytest.approx(3.125)

    def test_closed_day_occupancy_is_zero(self):
        stats = daily_statistics("club-1", _courts(), [], [], [], MONDAY, KYIV)
        assert stats.total_slots == 0
        assert stats.occupancy_percentage == 0.0


class TestRefreshPlanning:
    NOW = utc(2024, 1, 15, 2)

    def test_is_stale(self):
        assert is_stale(None, self.NOW)
        assert is_stale(self.NOW - timedelta(days=2), self.NOW)
        assert not is_stale(self.NOW - timedelta(hours=1), self.NOW)

    def test_dates_to_refresh(self):
        today = date(2024, 1, 15)
        computed = {date(2024, 1, 14): self.NOW, date(2024, 1, 10): self.NOW}
        assert dates_to_refresh(computed, today, self.NOW) == [
            date(2024, 1, 8),
            date(2024, 1, 9),
            date(2024, 1, 11),
            date(2024, 1, 12),
            date(2024, 1, 13),
            date(2024, 1, 14),
        ]


class TestMonthlyStatistics:
    def test_average_and_change(self):
        stats = monthly_statistics(_rows(50.0, 70.0), _rows(40.0))
        assert stats.average_occupancy == 60.0
        assert stats.previous_month_occupancy == 40.0
        assert stats.occupancy_change_percent == pytest.approx(50.0)

    def test_from_zero(self):
        assert monthly_statistics(_rows(10.0), _rows(0.0)).occupancy_change_percent == 100.0
        assert monthly_statistics(_rows(0.0), _rows(0.0)).occupancy_change_percent == 0.0

    def test_no_previous_month(self):
        stats = monthly_statistics(_rows(10.0), [])
        assert stats.previous_month_occupancy is None
        assert stats.occupancy_change_percent is None

    def test_empty_month(self):
        assert monthly_statistics([], _rows(10.0)) is None

    def test_previous_month_wraps_year(self):
        assert previous_month(1, 2024) == (12, 2023)
        assert previous_month(7, 2024) == (6, 2024)
