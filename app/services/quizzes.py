"""Quiz question bank and submission service"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictException, NotFoundException
from app.domain.grading import GradingResult, SubmittedAnswer, grade
from app.models.quiz import QuizQuestion
from app.schemas.quiz import QuestionCreate
from app.services.progress import ProgressService, quiz_id_for
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


@dataclass
class QuizOutcome:
    result: GradingResult
    total_xp: int
    level: int


def sanitize_question(question: QuizQuestion) -> dict:
    """Public view of a question, without the answer key or explanations"""
    return {
        "question_id": question.question_id,
        "question_text": question.question_text,
        "type": question.type,
        "options": question.options or [],
        "difficulty": question.difficulty,
        "points": question.points,
    }


class QuizService:
    @staticmethod
    def get_questions(db: Session, module_id: str) -> List[QuizQuestion]:
        return (
            db.query(QuizQuestion)
            .filter(QuizQuestion.module_id == module_id)
            .order_by(QuizQuestion.id)
            .all()
        )

    @staticmethod
    def get_quiz(db: Session, module_id: str) -> dict:
        """
        Raises:
            NotFoundException: no questions exist for the module
        """
        questions = QuizService.get_questions(db, module_id)
        if not questions:
            raise NotFoundException("Quiz")

        return {
            "module_id": module_id,
            "quiz_id": quiz_id_for(module_id),
            "questions": [sanitize_question(q) for q in questions],
            "total_questions": len(questions),
            "passing_score": settings.QUIZ_PASS_THRESHOLD,
            "time_limit": settings.QUIZ_TIME_LIMIT_SECONDS,
        }

    @staticmethod
    def grade_submission(
        db: Session, module_id: str, answers: Iterable[SubmittedAnswer]
    ) -> GradingResult:
        questions = QuizService.get_questions(db, module_id)
        if not questions:
            raise NotFoundException("Quiz")

        return grade(
            questions,
            answers,
            pass_threshold=settings.QUIZ_PASS_THRESHOLD,
            pass_xp=settings.QUIZ_PASS_XP,
        )

    @staticmethod
    def submit(
        db: Session,
        user_id: int,
        module_id: str,
        answers: Iterable[SubmittedAnswer],
        time_spent: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> QuizOutcome:
        """
        Grade, record the attempt, grant pass XP and advance the streak
        """
        now = now or utcnow()
        result = QuizService.grade_submission(db, module_id, answers)

        progress = ProgressService.get_or_create(db, user_id)
        ProgressService.record_attempt(db, user_id, module_id, result, time_spent, now=now)

        ProgressService.apply_streak(progress, now)
        db.commit()

        if result.xp_earned:
            totals = ProgressService.award_xp(db, user_id, result.xp_earned)
            total_xp, level = totals["totalXP"], totals["level"]
        else:
            db.refresh(progress)
            total_xp, level = progress.total_xp, progress.level

        logger.info(
            f"User {user_id} scored {result.percentage}% on {module_id} "
            f"({'passed' if result.passed else 'failed'})"
        )
        return QuizOutcome(result=result, total_xp=total_xp, level=level)

    @staticmethod
    def create_question(db: Session, data: QuestionCreate) -> QuizQuestion:
        """
        Raises:
            ConflictException: question id already exists
        """
        if db.query(QuizQuestion).filter(QuizQuestion.question_id == data.question_id).first():
            raise ConflictException(f"Question {data.question_id} already exists")

        question = QuizQuestion(
            question_id=data.question_id,
            module_id=data.module_id,
            question_text=data.question_text,
            type=data.type.value,
            difficulty=data.difficulty.value,
            category=data.category,
            options=[o.model_dump() for o in data.options],
            correct_answer=data.correct_answer,
            explanation=data.explanation,
            correct_explanation=data.correct_explanation,
            incorrect_explanations=[e.model_dump(by_alias=True) for e in data.incorrect_explanations],
            points=data.points,
        )
        db.add(question)
        db.commit()
        db.refresh(question)

        logger.info(f"Created question {question.question_id} for {question.module_id}")
        return question


quiz_service = QuizService()
