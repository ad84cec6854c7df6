"""Pydantic schemas for API serialisation."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

# --- Availability ---


class SlotOut(BaseModel):
    start: str  # ISO-8601 UTC
    end: str
    status: str  # "available" | "booked" | "partial"


class AvailabilityOut(BaseModel):
    court_id: str
    court_name: str
    timezone: str
    date: date
    slots: list[SlotOut]


class CourtSlotStatusOut(BaseModel):
    court_id: str
    court_name: str
    status: str


class SlotSummaryOut(BaseModel):
    available: int
    booked: int
    partial: int
    total: int


class ClubSlotOut(BaseModel):
    start: str
    end: str
    courts: list[CourtSlotStatusOut]
    summary: SlotSummaryOut
    overall_status: str


class ClubDayOut(BaseModel):
    date: date
    day_of_week: int  # 0=Sunday
    day_name: str
    slots: list[ClubSlotOut]


class CourtBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str | None = None
    indoor: bool = False


class WeeklyAvailabilityOut(BaseModel):
    club_id: str
    timezone: str
    week_start: date
    week_end: date
    courts: list[CourtBriefOut]
    days: list[ClubDayOut]


# --- Pricing ---


class PriceOut(BaseModel):
    court_id: str
    date: date
    start_time: str
    duration_minutes: int
    price_cents: int


class PriceSegmentOut(BaseModel):
    start: str
    end: str
    price_cents: int


class PriceTimelineOut(BaseModel):
    court_id: str
    date: date
    default_price_cents: int
    min_price_cents: int
    max_price_cents: int
    segments: list[PriceSegmentOut]


# --- Trainings ---


class TrainingCheck(BaseModel):
    coach_id: str
    club_id: str
    date: str  # "YYYY-MM-DD", club local
    time: str  # "HH:MM", club local
    duration_minutes: int = Field(default=60, gt=0, le=480)


class SuggestionOut(BaseModel):
    date: str
    time: str
    court_id: str
    court_name: str


class TrainingAcceptedOut(BaseModel):
    ok: bool = True
    court_id: str
    price_cents: int


class ConflictOut(BaseModel):
    ok: bool = False
    reason: str
    message: str
    suggestions: list[SuggestionOut] = []


# --- Statistics ---


class DailyStatisticsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    club_id: str
    date: date
    booked_slots: int
    total_slots: int
    occupancy_percentage: float


class MonthlyStatisticsOut(BaseModel):
    club_id: str
    month: int
    year: int
    average_occupancy: float | None
    previous_month_occupancy: float | None
    occupancy_change_percent: float | None


class ClubMonthlyStatisticsOut(BaseModel):
    club_id: str
    club_name: str
    statistics: MonthlyStatisticsOut | None
    error: str | None = None


class OrganisationMonthlyStatisticsOut(BaseModel):
    organisation_id: str
    month: int
    year: int
    clubs: list[ClubMonthlyStatisticsOut]
