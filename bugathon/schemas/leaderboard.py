"""
Leaderboard schemas.

GET /leaderboard → LeaderboardResponse
"""
from pydantic import BaseModel, Field


class LeaderboardEntryResponse(BaseModel):
    rank: int = Field(description="Dense rank; equal total_points share a rank.")
    user_name: str
    bugs_reported: int
    bugs_fixed: int
    reporter_points: float
    assignee_points: float
    total_points: float
    badges: list[str]
    updated_at: str


class LeaderboardResponse(BaseModel):
    items: list[LeaderboardEntryResponse] = Field(
        description="Sorted by total_points desc, then user_name asc."
    )
