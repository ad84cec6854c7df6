"""Organisation and club models.

Organisation = the tenant that owns one or more clubs.
Club = a physical venue with courts, coaches, a timezone and opening hours.
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arenaone.models.base import Base, TimestampMixin


class Organisation(TimestampMixin, Base):
    __tablename__ = "organisations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    clubs: Mapped[list["Club"]] = relationship(back_populates="organisation", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Organisation {self.slug}>"


class Club(TimestampMixin, Base):
    __tablename__ = "clubs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    organisation_id: Mapped[str] = mapped_column(ForeignKey("organisations.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)

    # IANA zone name, e.g. "Europe/Kyiv". Never an offset like "UTC+2".
    timezone: Mapped[str | None] = mapped_column(String(64))

    organisation: Mapped["Organisation"] = relationship(back_populates="clubs")
    business_hours: Mapped[list["ClubBusinessHours"]] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Club {self.name}>"


class ClubBusinessHours(Base):
    """Weekly opening hours. day_of_week is 0=Sunday .. 6=Saturday."""

    __tablename__ = "club_business_hours"

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    open_time: Mapped[str | None] = mapped_column(String(5))  # "HH:MM"
    close_time: Mapped[str | None] = mapped_column(String(5))
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (Index("ix_business_hours_club_day", "club_id", "day_of_week", unique=True),)


class ClubSpecialHours(Base):
    """Date-specific override of the weekly hours (holidays, events)."""

    __tablename__ = "club_special_hours"

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    open_time: Mapped[str | None] = mapped_column(String(5))
    close_time: Mapped[str | None] = mapped_column(String(5))
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(200))

    __table_args__ = (Index("ix_special_hours_club_date", "club_id", "date", unique=True),)


class ClubDailyStatistics(Base):
    __tablename__ = "club_daily_statistics"

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    booked_slots: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_slots: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    occupancy_percentage: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    computed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_daily_stats_club_date", "club_id", "date", unique=True),)

