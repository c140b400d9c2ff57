"""Learning progress schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.base import CamelModel


class CompleteModuleRequest(CamelModel):
    module_id: str = Field(..., min_length=1)


class CompletedModuleOut(CamelModel):
    module_id: str
    title: Optional[str] = None
    completed_at: Optional[datetime] = None
    xp_earned: int = 0


class CompleteModuleResponse(CamelModel):
    success: bool = True
    message: str
    xp_earned: int
    total_xp: int = Field(..., alias="totalXP")
    level: int
    streak: int
    completed_modules: List[str]


class QuizHistorySummary(CamelModel):
    total_attempted: int
    total_passed: int
    average_score: float


class ProgressResponse(CamelModel):
    success: bool = True
    total_xp: int = Field(..., alias="totalXP")
    level: int
    completed_modules: List[CompletedModuleOut]
    streak: int
    longest_streak: int
    last_active_at: Optional[datetime] = None
    perfect_quizzes: int
    quiz_history: QuizHistorySummary


class AccessInfo(CamelModel):
    is_premium: bool
    subscription_plan: str
    subscription_expires_at: Optional[datetime] = None
    free_modules: int
    premium_modules: int


class StatsResponse(CamelModel):
    success: bool = True
    total_xp: int = Field(..., alias="totalXP")
    level: int
    level_progress: int
    xp_to_next_level: int
    modules_completed: int
    total_modules: int
    completion_percentage: int
    streak: int
    longest_streak: int
    access: AccessInfo
