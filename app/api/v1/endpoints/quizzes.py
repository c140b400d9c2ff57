"""
Quiz endpoints
Question delivery, submission grading and attempt history
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.database import get_db
from app.core.security import ensure_self_or_admin, get_current_user, require_admin
from app.domain.grading import SubmittedAnswer
from app.schemas.quiz import (
    ModuleAttemptsResponse,
    ModuleStatsResponse,
    QuestionCreate,
    QuestionPublic,
    QuizResponse,
    QuizSubmission,
    QuizSubmitResponse,
    UserAttemptsResponse,
)
from app.services.progress import ProgressService
from app.services.quizzes import quiz_service, sanitize_question

router = APIRouter()


@router.get("/{module_id}", response_model=QuizResponse)
async def get_quiz(module_id: str, db: Session = Depends(get_db)):
    """Questions for a module, without answers"""
    return quiz_service.get_quiz(db, module_id)


@router.post("/{quiz_id}/submit", response_model=QuizSubmitResponse)
async def submit_quiz(
    quiz_id: str,
    submission: QuizSubmission,
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Grade a submission, record the attempt and grant XP on a pass"""
    answers = [SubmittedAnswer(a.question_id, a.selected_option) for a in submission.answers]
    outcome = quiz_service.submit(
        db, current_user.id, submission.module_id, answers, submission.time_spent_seconds
    )
    result = outcome.result

    if result.xp_earned:
        await cache_manager.clear_pattern("leaderboard:*")

    return {
        "quiz_id": quiz_id,
        "module_id": submission.module_id,
        "score": result.score,
        "total_points": result.total_points,
        "percentage": result.percentage,
        "passed": result.passed,
        "xp_earned": result.xp_earned,
        "total_xp": outcome.total_xp,
        "level": outcome.level,
        "answers": [vars(a) for a in result.answers],
        "feedback": result.feedback,
        "message": (
            f"Congratulations! You passed with {result.percentage}%"
            if result.passed
            else f"You scored {result.percentage}%. Keep practising and try again!"
        ),
    }


@router.get("/user/{user_id}/attempts", response_model=UserAttemptsResponse)
async def get_user_attempts(
    user_id: int,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """A user's attempts, newest first"""
    ensure_self_or_admin(current_user, user_id)
    history = ProgressService.get_user_attempts(db, user_id, limit=limit, offset=offset)
    return {
        "attempts": history["attempts"],
        "total_attempts": history["total"],
        "pass_rate": history["pass_rate"],
        "limit": limit,
        "offset": offset,
    }


@router.get("/user/{user_id}/module/{module_id}", response_model=ModuleAttemptsResponse)
async def get_module_attempts(
    user_id: int,
    module_id: str,
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_self_or_admin(current_user, user_id)
    return {"module_id": module_id, **ProgressService.get_module_attempts(db, user_id, module_id)}


@router.get("/stats/module/{module_id}", response_model=ModuleStatsResponse)
async def get_module_stats(module_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    """Aggregate attempt statistics across all users (admin)"""
    return {"module_id": module_id, **ProgressService.get_module_stats(db, module_id)}


@router.post("/questions", response_model=QuestionPublic, status_code=status.HTTP_201_CREATED)
async def create_question(
    question: QuestionCreate, _admin=Depends(require_admin), db: Session = Depends(get_db)
):
    """Add a question to a module's bank (admin)"""
    return sanitize_question(quiz_service.create_question(db, question))
