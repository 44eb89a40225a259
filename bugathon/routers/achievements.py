"""
Achievements router.

GET /achievements   — granted achievements (paginated, newest first)
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bugathon.db.base import get_db
from bugathon.models.achievement import Achievement
from bugathon.schemas.achievement import AchievementListResponse, AchievementResponse
from bugathon.services.achievements import list_achievements

router = APIRouter(prefix="/achievements", tags=["achievements"])


def _achievement_to_response(a: Achievement) -> AchievementResponse:
    return AchievementResponse(
        id=a.id,
        user_name=a.user_name,
        badge_name=a.badge_name,
        badge_icon=a.badge_icon,
        description=a.description,
        earned_at=a.earned_at.isoformat() if a.earned_at else "",
    )


@router.get(
    "",
    response_model=AchievementListResponse,
    summary="List granted achievements (newest first)",
)
def achievements(
    user_name: Optional[str] = Query(default=None, description="Only this user's achievements."),
    limit: int = Query(default=50, ge=1, le=200, description="Page size."),
    offset: int = Query(default=0, ge=0, description="Skip N items."),
    db: Session = Depends(get_db),
):
    """
    Achievements are append-only: at most one per (user_name, badge_name),
    and `earned_at` is the time of the first grant.
    """
    total, items = list_achievements(db, user_name=user_name, limit=limit, offset=offset)
    return AchievementListResponse(
        total=total,
        items=[_achievement_to_response(a) for a in items],
    )
