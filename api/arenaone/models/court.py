"""Court and price-rule models."""

import datetime as dt

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arenaone.models.base import Base, TimestampMixin


class Court(TimestampMixin, Base):
    """A bookable court at a club."""

    __tablename__ = "courts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str | None] = mapped_column(String(50))  # padel, tennis, squash...
    indoor: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Fallback price per booking when no price rule matches
    default_price_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    price_rules: Mapped[list["CourtPriceRule"]] = relationship(back_populates="court", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Court {self.name} @ club {self.club_id}>"


class CourtPriceRule(Base):
    """Time-window override of a court's default price.

    Scoped by exactly one of: a calendar date, a day of week, a weekday group
    in ``rule_type`` (WEEKDAYS / WEEKENDS), or nothing (every day).
    """

    __tablename__ = "court_price_rules"

    id: Mapped[int] = mapped_column(primary_key=True)
    court_id: Mapped[str] = mapped_column(ForeignKey("courts.id"), nullable=False)
    rule_type: Mapped[str | None] = mapped_column(String(20))
    day_of_week: Mapped[int | None] = mapped_column(Integer)  # 0=Sunday
    date: Mapped[dt.date | None] = mapped_column(Date)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # "HH:MM"
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    court: Mapped["Court"] = relationship(back_populates="price_rules")

    __table_args__ = (
        Index("ix_price_rules_court_day", "court_id", "day_of_week"),
        Index("ix_price_rules_court_date", "court_id", "date"),
    )
