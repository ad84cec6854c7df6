"""Celery wiring: schedule and task bodies, run against the in-memory repository."""

import pytest

from arenaone import worker
from conftest import booking_row, utc


@pytest.fixture
def run_in_memory(repo, monkeypatch):
    async def _run(job, *args):
        return await job(repo, *args)

    monkeypatch.setattr(worker, "_run", _run)
    return repo


class TestSchedule:
    def test_beat_schedule(self):
        schedule = worker.celery_app.conf.beat_schedule
        assert schedule["sweep-booking-statuses"]["schedule"] == 60.0
        assert schedule["refresh-daily-statistics"]["task"] == "arenaone.refresh_daily_statistics"

    def test_tasks_registered(self):
        names = set(worker.celery_app.tasks)
        assert {
            "arenaone.sweep_booking_statuses",
            "arenaone.refresh_daily_statistics",
            "arenaone.recompute_daily_statistics",
        } <= names

    def test_runs_in_utc(self):
        assert worker.celery_app.conf.timezone == "UTC"


class TestTasks:
    def test_sweep_task(self, run_in_memory):
        run_in_memory.add_booking(booking_row("old", utc(2024, 1, 1, 8)))
        assert worker.sweep_booking_statuses() == {"cancelled": 0, "completed": 1}

    def test_refresh_task(self, run_in_memory):
        result = worker.refresh_daily_statistics()
        assert result["failed"] == []
        assert result["refreshed"] == 7

    def test_recompute_task(self, run_in_memory):
        run_in_memory.add_booking(booking_row("b1", utc(2024, 1, 15, 8)))
        result = worker.recompute_daily_statistics("club-1", "2024-01-15")
        assert result == {"club_id": "club-1", "date": "2024-01-15", "occupancy": pytest.approx(3.125)}
