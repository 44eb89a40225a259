"""
Ticket — one normalized ticket from the source, keyed by its Jira key.

Overwritten wholesale on every sync; never deleted. reporter_points and
assignee_points are always derived from (is_new_bug, status_category,
sprint_points), see bugathon.services.tickets.normalize_ticket().
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, Boolean, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from bugathon.db.base import Base


class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    is_new_bug: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(128), nullable=False)
    status_category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    reporter_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    reporter_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    assignee_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    assignee_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    sprint_points: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    reporter_points: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    assignee_points: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    priority: Mapped[str | None] = mapped_column(String(64), nullable=True)
    issue_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
