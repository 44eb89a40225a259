"""
Stats router.

GET /stats   — recent daily stats + team-wide totals
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bugathon.db.base import get_db
from bugathon.models.daily_stat import DailyStat
from bugathon.schemas.stats import DailyStatResponse, StatsResponse, TeamStatsResponse
from bugathon.services.dashboard import get_stats

router = APIRouter(prefix="/stats", tags=["stats"])


def _daily_to_response(d: DailyStat) -> DailyStatResponse:
    return DailyStatResponse(
        date=str(d.date),
        bugs_created=d.bugs_created,
        bugs_fixed=d.bugs_fixed,
        points_earned=d.points_earned,
        active_users=d.active_users,
    )


@router.get("", response_model=StatsResponse, summary="Daily series and team totals")
def stats(
    days: int = Query(default=7, ge=1, le=90, description="How many recent days to return."),
    db: Session = Depends(get_db),
):
    snapshot = get_stats(db, days=days)
    team = snapshot.team
    return StatsResponse(
        daily=[_daily_to_response(d) for d in snapshot.daily],
        team=TeamStatsResponse(
            total_bugs=team.total_bugs,
            total_points=team.total_points,
            active_users=team.active_users,
            today_fixed=team.today_fixed,
        ),
    )
