"""
Dashboard read surfaces: leaderboard and combined stats.

Public API
----------
get_leaderboard(db, limit)      -> list[LeaderboardEntry]
get_stats(db, days, today)      -> StatsSnapshot
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from bugathon.models.daily_stat import DailyStat
from bugathon.models.ticket import Ticket
from bugathon.models.user_score import UserScore
from bugathon.services.tickets import DONE_CATEGORY


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class LeaderboardEntry:
    rank: int
    score: UserScore


@dataclass
class TeamTotals:
    total_bugs: int       # tickets in the done category
    total_points: float   # sum of user total_points
    active_users: int     # users with a score row
    today_fixed: int      # bugs_fixed on today's daily_stats row


@dataclass
class StatsSnapshot:
    daily: list[DailyStat]   # newest first
    team: TeamTotals


# Fractional sprint points accumulate float noise; compare at this precision.
_RANK_PRECISION = 6


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

def get_leaderboard(db: Session, limit: int = 20) -> list[LeaderboardEntry]:
    """
    Top `limit` users by total_points desc, ties broken by user_name asc.
    Ranks are dense: users with equal points share a rank.
    """
    scores = (
        db.query(UserScore)
        .order_by(UserScore.total_points.desc(), UserScore.user_name.asc())
        .limit(limit)
        .all()
    )
    entries: list[LeaderboardEntry] = []
    rank = 0
    previous: Optional[float] = None
    for s in scores:
        points = round(s.total_points, _RANK_PRECISION)
        if points != previous:
            rank += 1
            previous = points
        entries.append(LeaderboardEntry(rank=rank, score=s))
    return entries


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

def get_stats(db: Session, days: int = 7, today: Optional[date] = None) -> StatsSnapshot:
    target = today or _today()
    daily = (
        db.query(DailyStat)
        .order_by(DailyStat.date.desc())
        .limit(days)
        .all()
    )

    total_bugs = (
        db.query(func.count(Ticket.id))
        .filter(Ticket.status_category == DONE_CATEGORY)
        .scalar()
        or 0
    )
    total_points = db.query(func.sum(UserScore.total_points)).scalar() or 0
    active_users = db.query(func.count(UserScore.id)).scalar() or 0
    today_row = db.query(DailyStat).filter(DailyStat.date == target).first()

    return StatsSnapshot(
        daily=daily,
        team=TeamTotals(
            total_bugs=total_bugs,
            total_points=total_points,
            active_users=active_users,
            today_fixed=today_row.bugs_fixed if today_row else 0,
        ),
    )
