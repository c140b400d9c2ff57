"""Leaderboard schemas"""

from typing import List

from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    rank: int
    name: str
    total_xp: int = Field(..., alias="totalXP")
    level: int
    streak: int

    class Config:
        populate_by_name = True


class LeaderboardResponse(BaseModel):
    success: bool = True
    leaderboard: List[LeaderboardEntry]
    timeframe: str
    total_users: int = Field(..., alias="totalUsers")

    class Config:
        populate_by_name = True
