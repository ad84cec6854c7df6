"""All models imported here for Alembic autogenerate discovery."""

from arenaone.models.base import Base
from arenaone.models.booking import TERMINAL_STATUSES, Booking, BookingStatus, PaymentStatus
from arenaone.models.club import (
    Club,
    ClubBusinessHours,
    ClubDailyStatistics,
    ClubSpecialHours,
    Organisation,
)
from arenaone.models.coach import Coach, CoachTimeOff, CoachWeeklyAvailability
from arenaone.models.court import Court, CourtPriceRule

__all__ = [
    "Base",
    "Organisation",
    "Club",
    "ClubBusinessHours",
    "ClubSpecialHours",
    "ClubDailyStatistics",
    "Court",
    "CourtPriceRule",
    "Coach",
    "CoachWeeklyAvailability",
    "CoachTimeOff",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "TERMINAL_STATUSES",
]
