"""Celery worker configuration and periodic sweeps.

Task bodies live in services.sweeps and take a repository; the tasks here
only open a session, run them, and commit.
"""

import asyncio
from datetime import date

from celery import Celery
from celery.schedules import crontab

from arenaone.core.config import settings
from arenaone.core.database import async_session_factory, engine
from arenaone.repositories import SqlRepository
from arenaone.services import sweeps

celery_app = Celery(
    "arenaone",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "sweep-booking-statuses": {
            "task": "arenaone.sweep_booking_statuses",
            "schedule": 60.0,
        },
        "refresh-daily-statistics": {
            "task": "arenaone.refresh_daily_statistics",
            "schedule": crontab(hour=2, minute=0),
        },
    },
)


async def _run(job, *args):
    # Each task runs in a fresh event loop, so pooled connections can't be reused across tasks
    try:
        async with async_session_factory() as session:
            result = await job(SqlRepository(session), *args)
            await session.commit()
            return result
    finally:
        await engine.dispose()


@celery_app.task(name="arenaone.sweep_booking_statuses")
def sweep_booking_statuses() -> dict:
    return asyncio.run(_run(sweeps.run_status_sweep))


@celery_app.task(name="arenaone.refresh_daily_statistics")
def refresh_daily_statistics() -> dict:
    return asyncio.run(_run(sweeps.refresh_statistics))


async def _recompute(repo, club_id: str, query_date: date):
    club = await repo.get_club(club_id)
    return await sweeps.recompute_day(repo, club, query_date)


@celery_app.task(name="arenaone.recompute_daily_statistics")
def recompute_daily_statistics(club_id: str, date_string: str) -> dict:
    """Queued after a booking mutation to refresh that club day."""
    stats = asyncio.run(_run(_recompute, club_id, date.fromisoformat(date_string)))
    return {"club_id": stats.club_id, "date": stats.date.isoformat(), "occupancy": stats.occupancy_percentage}
