"""
Score aggregation and badge evaluation.

User scores are a pure fold over the complete `tickets` table, rebuilt on
every sync; nothing is patched incrementally.

  new bug with a reporter          → reporter: bugs_reported += 1, reporter_points += t.reporter_points
  done ticket with an assignee     → assignee: bugs_fixed    += 1, assignee_points += t.assignee_points

Badges (category order, highest tier per category)
--------------------------------------------------
  Hunter       bugs_reported >= 10 → "Elite Hunter",   >= 5  → "Hunter"
  Slayer       bugs_fixed    >= 10 → "Supreme Slayer", >= 5  → "Slayer"
  Points       total_points  >= 100 → "Point Master",  >= 50 → "Rising Star"
  Versatility  reported > 0 and fixed > 0              → "All-Rounder"
  Velocity     bugs_fixed >= 3                         → "Speed Demon"
  nothing matched                                      → "Participant"
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bugathon.core.errors import StoreError
from bugathon.models.ticket import Ticket
from bugathon.models.user_score import UserScore
from bugathon.services.tickets import DONE_CATEGORY

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Badge thresholds
# ---------------------------------------------------------------------------

class Badge:
    ELITE_HUNTER   = "Elite Hunter"
    HUNTER         = "Hunter"
    SUPREME_SLAYER = "Supreme Slayer"
    SLAYER         = "Slayer"
    POINT_MASTER   = "Point Master"
    RISING_STAR    = "Rising Star"
    ALL_ROUNDER    = "All-Rounder"
    SPEED_DEMON    = "Speed Demon"
    PARTICIPANT    = "Participant"


_ELITE_TIER        = 10
_BASE_TIER         = 5
_POINT_MASTER_MIN  = 100
_RISING_STAR_MIN   = 50
_SPEED_DEMON_FIXES = 3


def evaluate_badges(bugs_reported: int, bugs_fixed: int, total_points: float) -> list[str]:
    badges: list[str] = []

    if bugs_reported >= _ELITE_TIER:
        badges.append(Badge.ELITE_HUNTER)
    elif bugs_reported >= _BASE_TIER:
        badges.append(Badge.HUNTER)

    if bugs_fixed >= _ELITE_TIER:
        badges.append(Badge.SUPREME_SLAYER)
    elif bugs_fixed >= _BASE_TIER:
        badges.append(Badge.SLAYER)

    if total_points >= _POINT_MASTER_MIN:
        badges.append(Badge.POINT_MASTER)
    elif total_points >= _RISING_STAR_MIN:
        badges.append(Badge.RISING_STAR)

    if bugs_reported > 0 and bugs_fixed > 0:
        badges.append(Badge.ALL_ROUNDER)

    if bugs_fixed >= _SPEED_DEMON_FIXES:
        badges.append(Badge.SPEED_DEMON)

    return badges or [Badge.PARTICIPANT]


# ---------------------------------------------------------------------------
# Fold
# ---------------------------------------------------------------------------

class TicketFacts(Protocol):
    is_new_bug: bool
    status_category: str
    reporter_name: Optional[str]
    assignee_name: Optional[str]
    reporter_points: float
    assignee_points: float


@dataclass
class UserTotals:
    user_name: str
    bugs_reported: int = 0
    bugs_fixed: int = 0
    reporter_points: float = 0
    assignee_points: float = 0
    total_points: float = 0
    badges: list[str] = field(default_factory=list)
    updated_at: Optional[datetime] = None


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def aggregate_user_scores(
    tickets: Iterable[TicketFacts],
    now: Optional[datetime] = None,
) -> list[UserTotals]:
    """
    Group ticket facts by user name. No ordering is imposed on the result;
    ranking happens at the read boundary (see dashboard.get_leaderboard).
    """
    stamp = now or _utcnow()
    users: dict[str, UserTotals] = {}

    def _user(name: str) -> UserTotals:
        if name not in users:
            users[name] = UserTotals(user_name=name)
        return users[name]

    for t in tickets:
        if t.is_new_bug and t.reporter_name:
            u = _user(t.reporter_name)
            u.bugs_reported += 1
            u.reporter_points += t.reporter_points or 0
        if t.status_category == DONE_CATEGORY and t.assignee_name is not None:
            u = _user(t.assignee_name)
            u.bugs_fixed += 1
            u.assignee_points += t.assignee_points or 0

    for u in users.values():
        u.total_points = u.reporter_points + u.assignee_points
        u.badges = evaluate_badges(u.bugs_reported, u.bugs_fixed, u.total_points)
        u.updated_at = stamp

    return list(users.values())


# ---------------------------------------------------------------------------
# Public — recompute + persist
# ---------------------------------------------------------------------------

def update_user_scores(db: Session, now: Optional[datetime] = None) -> list[UserTotals]:
    """
    Re-read every persisted ticket, rebuild all user scores and upsert them
    by user_name. Rows for users that no longer earn anything are removed so
    `user_scores` always equals the fold of the current ticket set.
    """
    try:
        tickets = db.query(Ticket).all()
        totals = aggregate_user_scores(tickets, now=now)

        existing = {row.user_name: row for row in db.query(UserScore).all()}
        for u in totals:
            row = existing.pop(u.user_name, None)
            if row is None:
                row = UserScore(user_name=u.user_name)
                db.add(row)
            row.bugs_reported = u.bugs_reported
            row.bugs_fixed = u.bugs_fixed
            row.reporter_points = u.reporter_points
            row.assignee_points = u.assignee_points
            row.total_points = u.total_points
            row.badges = json.dumps(u.badges)
            row.updated_at = u.updated_at

        for stale in existing.values():
            db.delete(stale)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("update user scores", str(exc)) from exc

    if existing:
        logger.info("Removed %s stale user score rows", len(existing))
    logger.info("Recomputed scores for %s users from %s tickets", len(totals), len(tickets))
    return totals
