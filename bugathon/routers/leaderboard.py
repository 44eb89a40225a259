"""
Leaderboard router.

GET /leaderboard   — top N users by total points
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bugathon.db.base import get_db
from bugathon.schemas.leaderboard import LeaderboardEntryResponse, LeaderboardResponse
from bugathon.services.dashboard import LeaderboardEntry, get_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


def _entry_to_response(e: LeaderboardEntry) -> LeaderboardEntryResponse:
    s = e.score
    return LeaderboardEntryResponse(
        rank=e.rank,
        user_name=s.user_name,
        bugs_reported=s.bugs_reported,
        bugs_fixed=s.bugs_fixed,
        reporter_points=s.reporter_points,
        assignee_points=s.assignee_points,
        total_points=s.total_points,
        badges=s.badge_list,
        updated_at=s.updated_at.isoformat() if s.updated_at else "",
    )


@router.get(
    "",
    response_model=LeaderboardResponse,
    summary="Leaderboard (highest total points first)",
)
def leaderboard(
    limit: int = Query(default=20, ge=1, le=100, description="Number of users to return."),
    db: Session = Depends(get_db),
):
    """
    Users ordered by `total_points` descending; ties are broken by
    `user_name` ascending and share the same dense `rank`.
    """
    return LeaderboardResponse(
        items=[_entry_to_response(e) for e in get_leaderboard(db, limit=limit)]
    )
