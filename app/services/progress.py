"""
Progress ledger service

Owns every write to a user's XP, level, streak and quiz statistics. Quiz
submissions and module completions are the two flows that grant XP; both
land in the single ``UserProgress.total_xp``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthorizationException, NotFoundException, ValidationException
from app.domain.catalog import MODULE_CATALOG, ModuleInfo, catalog_counts, get_module
from app.domain.grading import GradingResult
from app.domain.progress import (
    average_score,
    level_for_xp,
    level_progress,
    median_score,
    pass_rate,
    round_half_up,
    update_streak,
)
from app.domain.subscription import check_and_downgrade, is_active
from app.models.progress import ModuleProgress, QuizAttempt, UserProgress
from app.models.user import User
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


@dataclass
class ModuleCompletion:
    xp_earned: int
    total_xp: int
    level: int
    streak: int
    completed_modules: List[str] = field(default_factory=list)
    already_completed: bool = False


def quiz_id_for(module_id: str) -> str:
    return f"quiz-{module_id}"


def _attempt_dict(attempt: QuizAttempt) -> Dict[str, Any]:
    return {
        "quiz_id": attempt.quiz_id,
        "module_id": attempt.module_id,
        "submitted_at": attempt.submitted_at,
        "score": attempt.score,
        "percentage": attempt.percentage,
        "passed": attempt.passed,
        "time_spent_seconds": attempt.time_spent_seconds,
        "answers": attempt.answers or [],
    }


class ProgressService:
    @staticmethod
    def get(db: Session, user_id: int) -> Optional[UserProgress]:
        return db.query(UserProgress).filter(UserProgress.user_id == user_id).first()

    @staticmethod
    def get_or_create(db: Session, user_id: int) -> UserProgress:
        """Progress record for ``user_id``, created empty on first use"""
        progress = ProgressService.get(db, user_id)
        if progress is None:
            progress = UserProgress(user_id=user_id)
            db.add(progress)
            db.commit()
            db.refresh(progress)
            logger.info(f"Created progress record for user {user_id}")
        return progress

    @staticmethod
    def _require(db: Session, user_id: int) -> UserProgress:
        progress = ProgressService.get(db, user_id)
        if progress is None:
            raise NotFoundException("User progress")
        return progress

    @staticmethod
    def module_entry(progress: UserProgress, module_id: str) -> ModuleProgress:
        """Find the user's entry for ``module_id`` or start a fresh one"""
        for entry in progress.modules:
            if entry.module_id == module_id:
                return entry

        info = get_module(module_id)
        entry = ModuleProgress(
            module_id=module_id,
            title=info.title if info else None,
            xp_earned=0,
            lessons_completed=[],
        )
        progress.modules.append(entry)
        return entry

    @staticmethod
    def apply_streak(progress: UserProgress, now: datetime) -> int:
        streak, last_active = update_streak(
            progress.current_streak or 0, progress.last_active_at, now
        )
        progress.current_streak = streak
        progress.last_active_at = last_active
        progress.longest_streak = max(progress.longest_streak or 0, streak)
        return streak

    @staticmethod
    def record_attempt(
        db: Session,
        user_id: int,
        module_id: str,
        result: GradingResult,
        time_spent: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> QuizAttempt:
        """
        Append a graded attempt and refresh quiz statistics

        Raises:
            NotFoundException: the user has no progress record
        """
        now = now or utcnow()
        progress = ProgressService._require(db, user_id)
        entry = ProgressService.module_entry(progress, module_id)

        attempt = QuizAttempt(
            quiz_id=quiz_id_for(module_id),
            module_id=module_id,
            submitted_at=now,
            score=result.score,
            percentage=result.percentage,
            passed=result.passed,
            time_spent_seconds=time_spent or 0,
            answers=[a.to_record() for a in result.answers],
        )
        entry.attempts.append(attempt)

        progress.total_quizzes_attempted = (progress.total_quizzes_attempted or 0) + 1
        if result.passed:
            progress.total_quizzes_passed = (progress.total_quizzes_passed or 0) + 1
        if result.percentage == 100:
            progress.perfect_quizzes = (progress.perfect_quizzes or 0) + 1

        # Unweighted mean over every attempt of every module
        progress.average_quiz_score = average_score(
            a.percentage for m in progress.modules for a in m.attempts
        )
        progress.last_quiz_completed_at = now

        db.commit()
        db.refresh(progress)
        return attempt

    @staticmethod
    def award_xp(db: Session, user_id: int, amount: int) -> Dict[str, int]:
        """
        Add ``amount`` XP; the level follows on persist

        Raises:
            NotFoundException: the user has no progress record
        """
        progress = ProgressService._require(db, user_id)
        progress.total_xp = (progress.total_xp or 0) + amount
        db.commit()
        db.refresh(progress)

        logger.info(f"Awarded {amount} XP to user {user_id} (total {progress.total_xp})")
        return {"totalXP": progress.total_xp, "level": progress.level, "xpEarned": amount}

    @staticmethod
    def completed_module_ids(progress: UserProgress) -> List[str]:
        return [m.module_id for m in progress.modules if m.is_completed]

    @staticmethod
    def complete_module(
        db: Session,
        user: User,
        module_id: str,
        now: Optional[datetime] = None,
        catalog: Mapping[str, ModuleInfo] = MODULE_CATALOG,
    ) -> ModuleCompletion:
        """
        Mark a catalog module complete and grant its XP once

        Raises:
            ValidationException: unknown module id
            AuthorizationException: premium module without an active
                subscription
        """
        now = now or utcnow()
        info = get_module(module_id, catalog)
        if info is None:
            raise ValidationException("Invalid module ID", details={"moduleId": module_id})

        if info.premium_required:
            if check_and_downgrade(user, now):
                db.commit()
            if not is_active(user, now):
                raise AuthorizationException(
                    "This module requires a premium subscription",
                    details={"requiresPremium": True, "moduleId": module_id},
                )

        progress = ProgressService.get_or_create(db, user.id)
        entry = ProgressService.module_entry(progress, module_id)

        if entry.is_completed:
            return ModuleCompletion(
                xp_earned=0,
                total_xp=progress.total_xp,
                level=progress.level,
                streak=progress.current_streak,
                completed_modules=ProgressService.completed_module_ids(progress),
                already_completed=True,
            )

        entry.completed_at = now
        entry.xp_earned = info.xp
        progress.total_xp = (progress.total_xp or 0) + info.xp
        progress.total_lessons_completed = (progress.total_lessons_completed or 0) + 1
        progress.last_lesson_completed_at = now
        ProgressService.apply_streak(progress, now)

        db.commit()
        db.refresh(progress)

        logger.info(f"User {user.id} completed {module_id} (+{info.xp} XP)")
        return ModuleCompletion(
            xp_earned=info.xp,
            total_xp=progress.total_xp,
            level=progress.level,
            streak=progress.current_streak,
            completed_modules=ProgressService.completed_module_ids(progress),
        )

    @staticmethod
    def get_user_attempts(db: Session, user_id: int, limit: int = 20, offset: int = 0) -> Dict[str, Any]:
        """Newest attempts first, with pagination and overall pass rate"""
        progress = ProgressService.get(db, user_id)
        if progress is None:
            return {"attempts": [], "total": 0, "pass_rate": 0}

        attempts = sorted(
            (a for m in progress.modules for a in m.attempts),
            key=lambda a: (a.submitted_at, a.id),
            reverse=True,
        )
        return {
            "attempts": [_attempt_dict(a) for a in attempts[offset:offset + limit]],
            "total": len(attempts),
            "pass_rate": pass_rate(a.passed for a in attempts),
        }

    @staticmethod
    def get_module_attempts(db: Session, user_id: int, module_id: str) -> Dict[str, Any]:
        progress = ProgressService.get(db, user_id)
        attempts: List[QuizAttempt] = []
        if progress is not None:
            for entry in progress.modules:
                if entry.module_id == module_id:
                    attempts = list(entry.attempts)
                    break

        percentages = [a.percentage for a in attempts]
        return {
            "attempts": [_attempt_dict(a) for a in attempts],
            "best_score": max(percentages, default=0),
            "average_score": average_score(percentages),
            "total_attempts": len(attempts),
            "passed": any(a.passed for a in attempts),
            "current_attempt": len(attempts) + 1,
        }

    @staticmethod
    def get_module_stats(db: Session, module_id: str) -> Dict[str, Any]:
        """Aggregate attempt statistics for one module across all users"""
        rows = (
            db.query(QuizAttempt.percentage, QuizAttempt.passed, ModuleProgress.progress_id)
            .join(ModuleProgress, QuizAttempt.module_progress_id == ModuleProgress.id)
            .filter(QuizAttempt.module_id == module_id)
            .all()
        )
        percentages = [r.percentage for r in rows]
        return {
            "total_attempts": len(rows),
            "unique_users": len({r.progress_id for r in rows}),
            "average_score": average_score(percentages),
            "pass_rate": pass_rate(r.passed for r in rows),
            "median_score": median_score(percentages),
        }

    @staticmethod
    def progress_view(db: Session, user: User) -> Dict[str, Any]:
        progress = ProgressService.get_or_create(db, user.id)
        completed = [m for m in progress.modules if m.is_completed]
        return {
            "total_xp": progress.total_xp,
            "level": progress.level,
            "completed_modules": [
                {
                    "module_id": m.module_id,
                    "title": m.title,
                    "completed_at": m.completed_at,
                    "xp_earned": m.xp_earned,
                }
                for m in completed
            ],
            "streak": progress.current_streak,
            "longest_streak": progress.longest_streak,
            "last_active_at": progress.last_active_at,
            "perfect_quizzes": progress.perfect_quizzes,
            "quiz_history": {
                "total_attempted": progress.total_quizzes_attempted,
                "total_passed": progress.total_quizzes_passed,
                "average_score": progress.average_quiz_score,
            },
        }

    @staticmethod
    def stats_view(db: Session, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Level band, completion ratio and access summary"""
        now = now or utcnow()
        if check_and_downgrade(user, now):
            db.commit()

        progress = ProgressService.get_or_create(db, user.id)
        counts = catalog_counts()
        completed = len(ProgressService.completed_module_ids(progress))
        band = level_progress(progress.total_xp or 0, settings.XP_PER_LEVEL)

        return {
            "total_xp": progress.total_xp,
            "level": level_for_xp(progress.total_xp or 0, settings.XP_PER_LEVEL),
            "level_progress": band["levelProgress"],
            "xp_to_next_level": band["xpToNextLevel"],
            "modules_completed": completed,
            "total_modules": counts["total"],
            "completion_percentage": round_half_up(completed * 100 / counts["total"]) if counts["total"] else 0,
            "streak": progress.current_streak,
            "longest_streak": progress.longest_streak,
            "access": {
                "is_premium": is_active(user, now),
                "subscription_plan": user.subscription_plan,
                "subscription_expires_at": user.subscription_expires_at,
                "free_modules": counts["free"],
                "premium_modules": counts["premium"],
            },
        }


progress_service = ProgressService()
