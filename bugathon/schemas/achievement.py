"""
Achievement feed schemas.

GET /achievements → AchievementListResponse
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_name: str
    badge_name: str
    badge_icon: str
    description: Optional[str] = None
    earned_at: str


class AchievementListResponse(BaseModel):
    total: int
    items: list[AchievementResponse]
