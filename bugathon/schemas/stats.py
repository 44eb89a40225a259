"""
Stats schemas.

GET /stats → StatsResponse
"""
from pydantic import BaseModel, ConfigDict, Field


class DailyStatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    bugs_created: int
    bugs_fixed: int
    points_earned: float
    active_users: int


class TeamStatsResponse(BaseModel):
    total_bugs: int = Field(description="Tickets in the done status category.")
    total_points: float = Field(description="Sum of every user's total_points.")
    active_users: int = Field(description="Users with a score.")
    today_fixed: int = Field(description="Bugs fixed today (UTC).")


class StatsResponse(BaseModel):
    daily: list[DailyStatResponse] = Field(description="Most recent days first.")
    team: TeamStatsResponse
