"""
Achievement — a milestone granted to a user.

Append-only. One row per (user_name, badge_name) — the unique constraint
enforces idempotency at the DB level. earned_at is set on insert and never
updated.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bugathon.db.base import Base


class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("user_name", "badge_name", name="uq_achievement_user_badge"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    badge_name: Mapped[str] = mapped_column(String(128), nullable=False)
    badge_icon: Mapped[str] = mapped_column(
        String(32), nullable=False,
        comment="Leading token of badge_name, e.g. the emoji",
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
