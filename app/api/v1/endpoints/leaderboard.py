"""
Leaderboard endpoints
Public XP ranking, cached per timeframe and limit
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.cache import cache_key, cache_manager
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ValidationException
from app.domain.leaderboard import TIMEFRAME_WINDOWS, clamp_limit
from app.schemas.leaderboard import LeaderboardResponse
from app.services.leaderboard import leaderboard_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/leaderboard", response_model=LeaderboardResponse, response_model_by_alias=True)
async def get_leaderboard(
    timeframe: str = Query("all"),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """Get global leaderboard"""
    if timeframe not in TIMEFRAME_WINDOWS:
        raise ValidationException(
            "Invalid timeframe", details={"allowed": sorted(TIMEFRAME_WINDOWS)}
        )
    limit = clamp_limit(limit, settings.LEADERBOARD_DEFAULT_LIMIT, settings.LEADERBOARD_MAX_LIMIT)

    key = cache_key("leaderboard", timeframe=timeframe, limit=limit)
    cached = await cache_manager.get(key)
    if cached is not None:
        logger.debug(f"Leaderboard cache hit: {key}")
        return cached

    board = leaderboard_service.get_leaderboard(db, timeframe, limit)
    await cache_manager.set(key, board, expire=settings.LEADERBOARD_CACHE_TTL)
    return board
