import datetime as dt
from sqlalchemy import Integer, Float, DateTime, Date
from sqlalchemy.orm import Mapped, mapped_column

from bugathon.db.base import Base


class DailyStat(Base):
    """Same-day creation/resolution counters, one row per UTC calendar date."""

    __tablename__ = "daily_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, unique=True, index=True)
    bugs_created: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bugs_fixed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_earned: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    active_users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
