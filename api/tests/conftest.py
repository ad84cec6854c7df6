"""Shared test fixtures.

Rows are SimpleNamespace objects with the same attribute names as the ORM
models, held in an InMemoryRepository that replaces the SQL repository for
API tests.
"""

from datetime import UTC, date, datetime, timedelta
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from arenaone.core.dependencies import get_repository
from arenaone.main import app
from arenaone.models.booking import BookingStatus, PaymentStatus
from arenaone.repositories import InMemoryRepository

KYIV = "Europe/Kyiv"
MONDAY = date(2024, 1, 15)  # Kyiv is UTC+2 in January


def club_row(**overrides):
    defaults = {"id": "club-1", "organisation_id": "org-1", "name": "Arena Kyiv", "status": "active", "timezone": KYIV}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def hours_row(day_of_week, open_time="06:00", close_time="22:00", is_closed=False, club_id="club-1"):
    return SimpleNamespace(
        club_id=club_id, day_of_week=day_of_week, open_time=open_time, close_time=close_time, is_closed=is_closed
    )


def special_row(on, open_time=None, close_time=None, is_closed=True, club_id="club-1"):
    return SimpleNamespace(
        club_id=club_id, date=on, open_time=open_time, close_time=close_time, is_closed=is_closed, reason=None
    )


def rule_row(day_of_week, start_time, end_time, price_cents, **extra):
    return SimpleNamespace(
        day_of_week=day_of_week, start_time=start_time, end_time=end_time, price_cents=price_cents, **extra
    )


def court_row(court_id="court-1", name="Court 1", default_price_cents=50000, price_rules=(), **overrides):
    defaults = {
        "id": court_id,
        "club_id": "club-1",
        "name": name,
        "type": "padel",
        "indoor": True,
        "is_active": True,
        "default_price_cents": default_price_cents,
        "price_rules": list(price_rules),
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def slot_row(day_of_week, start_time, end_time):
    return SimpleNamespace(day_of_week=day_of_week, start_time=start_time, end_time=end_time, note=None)


def coach_row(coach_id="coach-1", slots=(), club_id="club-1"):
    return SimpleNamespace(id=coach_id, club_id=club_id, name="Olena", weekly_availabilities=list(slots))


def time_off_row(on, full_day=False, start_time=None, end_time=None, coach_id="coach-1"):
    return SimpleNamespace(
        coach_id=coach_id, date=on, full_day=full_day, start_time=start_time, end_time=end_time, reason=None
    )


def booking_row(
    booking_id,
    start,
    minutes=60,
    court_id="court-1",
    coach_id=None,
    status=BookingStatus.RESERVED,
    payment=PaymentStatus.UNPAID,
    expires_at=None,
):
    return SimpleNamespace(
        id=booking_id,
        court_id=court_id,
        coach_id=coach_id,
        user_id="user-1",
        start=start,
        end=start + timedelta(minutes=minutes),
        booking_status=status,
        payment_status=payment,
        reservation_expires_at=expires_at,
        price_cents=50000,
    )


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


def week_hours(open_time="06:00", close_time="22:00"):
    return [hours_row(dow, open_time, close_time) for dow in range(7)]


@pytest.fixture
def repo():
    """A club in Kyiv open 06:00-22:00 daily, two courts and a coach working Monday 09:00-18:00."""
    repository = InMemoryRepository()
    repository.add_club(club_row(), business_hours=week_hours())
    repository.add_court(
        court_row("court-1", "Court 1", price_rules=[rule_row(1, "17:00", "22:00", 80000, id="peak")])
    )
    repository.add_court(court_row("court-2", "Court 2", default_price_cents=40000))
    repository.add_coach(coach_row(slots=[slot_row(1, "09:00", "18:00")]))
    return repository


@pytest.fixture
async def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
