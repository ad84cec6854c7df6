"""Seed the database with an ArenaOne demo club.

Run with: python -m scripts.seed
Creates the organisation, one club in Kyiv with opening hours, padel courts
with peak pricing, and a coach with a weekly schedule.
"""

import asyncio
import uuid

from sqlalchemy import select

from arenaone.core.database import async_session_factory, engine
from arenaone.models import (
    Base,
    Club,
    ClubBusinessHours,
    Coach,
    CoachWeeklyAvailability,
    Court,
    CourtPriceRule,
    Organisation,
)

WEEKDAYS = range(1, 6)  # Monday-Friday, 0=Sunday
WEEKEND = (0, 6)

# (day_of_week, open, close)
HOURS = [(d, "07:00", "23:00") for d in WEEKDAYS] + [(d, "08:00", "22:00") for d in WEEKEND]

COURTS = [
    {"name": "Court 1", "type": "padel", "indoor": True, "default_price_cents": 60000},
    {"name": "Court 2", "type": "padel", "indoor": True, "default_price_cents": 60000},
    {"name": "Court 3", "type": "padel", "indoor": False, "default_price_cents": 45000},
    {"name": "Court 4", "type": "padel", "indoor": False, "default_price_cents": 45000},
]

# Evening peak on weekdays, morning peak at weekends; surcharge in cents on top of the default
PEAK_RULES = [(d, "18:00", "22:00", 20000) for d in WEEKDAYS] + [(d, "08:00", "14:00", 15000) for d in WEEKEND]

COACH_SCHEDULE = [(d, "09:00", "13:00") for d in WEEKDAYS] + [(d, "15:00", "20:00") for d in WEEKDAYS]


def _id() -> str:
    return str(uuid.uuid4())


async def seed():
    # Create tables (in dev; production uses Alembic migrations)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Organisation).where(Organisation.slug == "arenaone-demo"))
        if result.scalar_one_or_none():
            print("Database already seeded - skipping.")
            return

        org = Organisation(id=_id(), name="ArenaOne Demo", slug="arenaone-demo")
        db.add(org)
        await db.flush()

        club = Club(id=_id(), organisation_id=org.id, name="ArenaOne Kyiv", timezone="Europe/Kyiv")
        db.add(club)
        await db.flush()

        for day_of_week, open_time, close_time in HOURS:
            db.add(ClubBusinessHours(
                club_id=club.id, day_of_week=day_of_week, open_time=open_time, close_time=close_time
            ))

        for court_data in COURTS:
            court = Court(id=_id(), club_id=club.id, **court_data)
            db.add(court)
            await db.flush()
            for day_of_week, start_time, end_time, surcharge in PEAK_RULES:
                db.add(CourtPriceRule(
                    court_id=court.id,
                    day_of_week=day_of_week,
                    start_time=start_time,
                    end_time=end_time,
                    price_cents=court.default_price_cents + surcharge,
                ))

        coach = Coach(id=_id(), club_id=club.id, name="Olena Kovalenko")
        db.add(coach)
        await db.flush()
        for day_of_week, start_time, end_time in COACH_SCHEDULE:
            db.add(CoachWeeklyAvailability(
                coach_id=coach.id, day_of_week=day_of_week, start_time=start_time, end_time=end_time
            ))

        await db.commit()

        print(f"Seeded: {club.name} ({club.timezone})")
        print(f"  {len(COURTS)} courts, {len(COURTS) * len(PEAK_RULES)} price rules")
        print(f"  coach {coach.name} (id {coach.id})")


if __name__ == "__main__":
    asyncio.run(seed())
