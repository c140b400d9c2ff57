"""
Learning progress endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.database import get_db
from app.core.exceptions import ConflictException
from app.core.security import get_current_user
from app.schemas.learning import (
    CompleteModuleRequest,
    CompleteModuleResponse,
    ProgressResponse,
    StatsResponse,
)
from app.services.progress import progress_service

router = APIRouter()


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return progress_service.progress_view(db, current_user)


@router.post("/complete", response_model=CompleteModuleResponse)
async def complete_module(
    request: CompleteModuleRequest,
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark a module complete and grant its catalog XP"""
    completion = progress_service.complete_module(db, current_user, request.module_id)
    if completion.already_completed:
        raise ConflictException(
            "Module already completed",
            details={"moduleId": request.module_id, "completedModules": completion.completed_modules},
        )

    await cache_manager.clear_pattern("leaderboard:*")
    return {
        "message": f"Module completed! +{completion.xp_earned} XP",
        "xp_earned": completion.xp_earned,
        "total_xp": completion.total_xp,
        "level": completion.level,
        "streak": completion.streak,
        "completed_modules": completion.completed_modules,
    }


@router.get("/stats", response_model=StatsResponse)
async def get_stats(current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return progress_service.stats_view(db, current_user)
