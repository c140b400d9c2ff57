"""
Learning progress models for AwareGuard

One UserProgress per user holds XP, level, streak and quiz statistics.
Each module the user has touched gets a ModuleProgress row, and every quiz
submission appends a QuizAttempt under it.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import relationship

from app.core.config import settings
from app.core.database import Base
from app.domain.progress import level_for_xp
from app.utils.time import utcnow


class UserProgress(Base):
    """Per-user learning progress"""
    __tablename__ = "user_progress"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    total_xp = Column(Integer, default=0, nullable=False, index=True)
    level = Column(Integer, default=1, nullable=False)

    current_streak = Column(Integer, default=0, nullable=False)
    longest_streak = Column(Integer, default=0, nullable=False)
    last_active_at = Column(DateTime, nullable=True, index=True)

    # Statistics
    total_lessons_completed = Column(Integer, default=0, nullable=False)
    total_quizzes_attempted = Column(Integer, default=0, nullable=False)
    total_quizzes_passed = Column(Integer, default=0, nullable=False)
    perfect_quizzes = Column(Integer, default=0, nullable=False)
    average_quiz_score = Column(Float, default=0, nullable=False)
    last_lesson_completed_at = Column(DateTime, nullable=True)
    last_quiz_completed_at = Column(DateTime, nullable=True)

    joined_at = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="progress")
    modules = relationship(
        "ModuleProgress",
        back_populates="progress",
        order_by="ModuleProgress.id",
        cascade="all, delete-orphan",
    )


class ModuleProgress(Base):
    """A user's record for one learning module"""
    __tablename__ = "module_progress"

    id = Column(Integer, primary_key=True, index=True)
    progress_id = Column(Integer, ForeignKey("user_progress.id"), nullable=False, index=True)
    module_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=True)
    category = Column(String, nullable=True)

    started_at = Column(DateTime, default=utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    xp_earned = Column(Integer, default=0, nullable=False)
    lessons_completed = Column(JSON, default=list)
    total_time_minutes = Column(Integer, default=0, nullable=False)

    # Relationships
    progress = relationship("UserProgress", back_populates="modules")
    attempts = relationship(
        "QuizAttempt",
        back_populates="module",
        order_by="QuizAttempt.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (UniqueConstraint("progress_id", "module_id", name="uq_module_progress"),)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class QuizAttempt(Base):
    """One graded quiz submission"""
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    module_progress_id = Column(Integer, ForeignKey("module_progress.id"), nullable=False, index=True)

    quiz_id = Column(String, nullable=False)
    module_id = Column(String, nullable=False, index=True)
    submitted_at = Column(DateTime, default=utcnow, nullable=False)

    score = Column(Integer, nullable=False)
    percentage = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False)
    time_spent_seconds = Column(Integer, default=0, nullable=False)

    answers = Column(JSON, default=list)  # [{"questionId", "selectedOption", "correct", "points"}]

    module = relationship("ModuleProgress", back_populates="attempts")


@event.listens_for(UserProgress, "before_insert")
@event.listens_for(UserProgress, "before_update")
def _recompute_level(mapper, connection, target):
    """Level always follows total XP on persist"""
    target.level = level_for_xp(target.total_xp or 0, settings.XP_PER_LEVEL)
