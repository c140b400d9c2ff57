"""
Quiz schemas for AwareGuard
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, field_validator

from app.models.quiz import DifficultyLevel, QuestionType
from app.schemas.base import CamelModel

OptionIndex = Annotated[int, Field(strict=True, ge=0, le=3)]


class QuestionOption(CamelModel):
    index: OptionIndex
    text: str


class IncorrectExplanation(CamelModel):
    option_index: OptionIndex
    explanation: str


class QuestionPublic(CamelModel):
    """Question as served to learners; answers and explanations stay server side"""
    question_id: str
    question_text: str
    type: str
    options: List[QuestionOption] = []
    difficulty: str
    points: int


class QuestionCreate(CamelModel):
    """Admin question authoring"""
    question_id: str = Field(..., min_length=1)
    module_id: str = Field(..., min_length=1)
    question_text: str = Field(..., min_length=1)
    type: QuestionType = QuestionType.MCQ
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    category: Optional[str] = None
    options: List[QuestionOption] = Field(..., min_length=2, max_length=4)
    correct_answer: OptionIndex
    explanation: Optional[str] = None
    correct_explanation: Optional[str] = None
    incorrect_explanations: List[IncorrectExplanation] = []
    points: int = Field(10, ge=1, le=50)


class QuizResponse(CamelModel):
    module_id: str
    quiz_id: str
    questions: List[QuestionPublic]
    total_questions: int
    passing_score: int
    time_limit: int
    status: str = "success"


class SubmittedAnswerIn(CamelModel):
    question_id: str = Field(..., min_length=1)
    selected_option: OptionIndex


class QuizSubmission(CamelModel):
    module_id: str = Field(..., min_length=1)
    answers: List[SubmittedAnswerIn] = Field(..., min_length=1)
    time_spent_seconds: Optional[Annotated[int, Field(strict=True, ge=0)]] = None

    @field_validator("module_id")
    @classmethod
    def module_id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("moduleId must be a non-empty string")
        return v


class AnswerResult(CamelModel):
    question_id: str
    selected_option: int
    correct: bool
    points: int
    explanation: Optional[str] = None


class FeedbackItem(CamelModel):
    question_id: str
    correct: bool
    explanation: Optional[str] = None


class QuizSubmitResponse(CamelModel):
    status: str = "success"
    quiz_id: str
    module_id: str
    score: int
    total_points: int
    percentage: int
    passed: bool
    xp_earned: int
    total_xp: int = Field(..., alias="totalXP")
    level: int
    answers: List[AnswerResult]
    feedback: List[FeedbackItem]
    message: str


class AttemptOut(CamelModel):
    quiz_id: str
    module_id: str
    submitted_at: datetime
    score: int
    percentage: int
    passed: bool
    time_spent_seconds: int
    answers: List[dict] = []


class UserAttemptsResponse(CamelModel):
    status: str = "success"
    attempts: List[AttemptOut]
    total_attempts: int
    pass_rate: int
    limit: int
    offset: int


class ModuleAttemptsResponse(CamelModel):
    status: str = "success"
    module_id: str
    attempts: List[AttemptOut]
    best_score: int
    average_score: int
    total_attempts: int
    passed: bool
    current_attempt: int


class ModuleStatsResponse(CamelModel):
    status: str = "success"
    module_id: str
    total_attempts: int
    unique_users: int
    average_score: int
    pass_rate: int
    median_score: float
