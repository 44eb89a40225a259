"""
UserScore — per-user aggregate, fully recomputed from `tickets` on every sync.

badges: JSON-encoded ordered list of labels stored as Text (no JSON column
so the same schema works on SQLite and Postgres).
"""
import json
from datetime import datetime
from sqlalchemy import Integer, String, Text, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from bugathon.db.base import Base


class UserScore(Base):
    __tablename__ = "user_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    bugs_reported: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bugs_fixed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reporter_points: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    assignee_points: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_points: Mapped[float] = mapped_column(Float, nullable=False, default=0, index=True)
    badges: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @property
    def badge_list(self) -> list[str]:
        try:
            return json.loads(self.badges or "[]")
        except (ValueError, TypeError):
            return []
