"""Coach, weekly availability and time-off models."""

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arenaone.models.base import Base, TimestampMixin


class Coach(TimestampMixin, Base):
    __tablename__ = "coaches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    weekly_availabilities: Mapped[list["CoachWeeklyAvailability"]] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Coach {self.name}>"


class CoachWeeklyAvailability(Base):
    """A recurring working window. A coach may have several per day."""

    __tablename__ = "coach_weekly_availability"

    id: Mapped[int] = mapped_column(primary_key=True)
    coach_id: Mapped[str] = mapped_column(ForeignKey("coaches.id"), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    note: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (Index("ix_coach_weekly_coach_day", "coach_id", "day_of_week"),)


class CoachTimeOff(Base):
    """Declared unavailability on one date, either the whole day or a window."""

    __tablename__ = "coach_time_off"

    id: Mapped[int] = mapped_column(primary_key=True)
    coach_id: Mapped[str] = mapped_column(ForeignKey("coaches.id"), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    full_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    start_time: Mapped[str | None] = mapped_column(String(5))
    end_time: Mapped[str | None] = mapped_column(String(5))
    reason: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (Index("ix_coach_time_off_coach_date", "coach_id", "date"),)
