"""
Achievement notifier — idempotent milestone grants.

Rules (evaluated at the end of every sync)
------------------------------------------
  1. CURRENT_CHAMPION
     Trigger : user ranked first by total_points (ties → user_name ascending)
     Action  : grant "🏆 Current Champion"

Idempotency
-----------
Each (user_name, badge_name) pair is unique in `achievements`.
Before inserting, the notifier checks whether that pair already exists.
If it does, the grant is skipped — earned_at of the first grant is kept.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bugathon.core.errors import StoreError
from bugathon.models.achievement import Achievement
from bugathon.models.user_score import UserScore

logger = logging.getLogger(__name__)

CHAMPION_BADGE = "🏆 Current Champion"
CHAMPION_DESCRIPTION = "Leading the bugathon!"


def badge_icon(badge_name: str) -> str:
    """Leading whitespace-separated token of the badge label."""
    parts = badge_name.split()
    return parts[0] if parts else ""


def _achievement_exists(db: Session, user_name: str, badge_name: str) -> bool:
    return (
        db.query(Achievement.id)
        .filter(
            Achievement.user_name == user_name,
            Achievement.badge_name == badge_name,
        )
        .first()
        is not None
    )


def grant_achievement(
    db: Session,
    user_name: str,
    badge_name: str,
    description: Optional[str] = None,
) -> bool:
    """
    Insert (user_name, badge_name) if absent. Returns True if inserted,
    False if it already existed. Uses the DB unique constraint as the final
    idempotency guard.
    """
    try:
        if _achievement_exists(db, user_name, badge_name):
            return False
        db.add(Achievement(
            user_name=user_name,
            badge_name=badge_name,
            badge_icon=badge_icon(badge_name),
            description=description,
            earned_at=datetime.now(tz=timezone.utc),
        ))
        db.commit()
    except IntegrityError:
        # Race condition: another process inserted first — safe to ignore
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("grant achievement", str(exc)) from exc

    logger.info("Granted %r to %s", badge_name, user_name)
    return True


def check_achievements(db: Session) -> list[str]:
    """Evaluate achievement rules against current user scores; returns new grants."""
    try:
        leader = (
            db.query(UserScore)
            .order_by(UserScore.total_points.desc(), UserScore.user_name.asc())
            .first()
        )
    except SQLAlchemyError as exc:
        raise StoreError("read user scores", str(exc)) from exc

    granted: list[str] = []
    if leader is not None:
        if grant_achievement(db, leader.user_name, CHAMPION_BADGE, CHAMPION_DESCRIPTION):
            granted.append(CHAMPION_BADGE)
    return granted


def list_achievements(
    db: Session,
    user_name: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[Achievement]]:
    """Return (total, page) of achievements ordered by earned_at desc."""
    q = db.query(Achievement)
    if user_name:
        q = q.filter(Achievement.user_name == user_name)
    total = q.count()
    items = (
        q.order_by(Achievement.earned_at.desc(), Achievement.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items
