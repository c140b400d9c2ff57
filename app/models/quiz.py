"""
Quiz question bank model for AwareGuard
"""

import enum

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from app.core.database import Base
from app.utils.time import utcnow


class QuestionType(str, enum.Enum):
    MCQ = "mcq"
    SCENARIO = "scenario"
    TRUE_FALSE = "true-false"


class DifficultyLevel(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizQuestion(Base):
    """One question in a module's question bank"""
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(String, unique=True, nullable=False, index=True)
    module_id = Column(String, nullable=False, index=True)

    question_text = Column(Text, nullable=False)
    type = Column(String, default=QuestionType.MCQ.value, nullable=False)
    difficulty = Column(String, default=DifficultyLevel.MEDIUM.value, nullable=False)
    category = Column(String, nullable=True, index=True)

    options = Column(JSON, default=list)  # [{"index": 0, "text": "..."}]
    correct_answer = Column(Integer, nullable=False)  # 0..3

    explanation = Column(Text, nullable=True)
    correct_explanation = Column(Text, nullable=True)
    incorrect_explanations = Column(JSON, default=list)  # [{"optionIndex": 1, "explanation": "..."}]

    points = Column(Integer, default=10, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (Index("ix_quiz_questions_module_type", "module_id", "type"),)
