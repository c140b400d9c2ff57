"""Leaderboard service"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.domain.leaderboard import clamp_limit, rank_entries, window_start
from app.domain.progress import level_for_xp
from app.models.progress import UserProgress
from app.models.user import User
from app.utils.time import utcnow


class LeaderboardService:
    @staticmethod
    def get_leaderboard(
        db: Session,
        timeframe: str = "all",
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Users ranked by total XP

        Raises:
            ValueError: unknown timeframe
        """
        start = window_start(timeframe, now or utcnow())
        limit = clamp_limit(limit, settings.LEADERBOARD_DEFAULT_LIMIT, settings.LEADERBOARD_MAX_LIMIT)

        total_xp = func.coalesce(UserProgress.total_xp, 0)
        query = (
            db.query(
                User.id,
                User.name,
                User.email,
                total_xp.label("total_xp"),
                func.coalesce(UserProgress.current_streak, 0).label("streak"),
            )
            .outerjoin(UserProgress, UserProgress.user_id == User.id)
        )
        if start is not None:
            query = query.filter(UserProgress.last_active_at >= start)

        rows = query.order_by(total_xp.desc(), User.id.asc()).limit(limit).all()

        entries = rank_entries(
            {
                "name": row.name or row.email.split("@")[0],
                "totalXP": row.total_xp,
                "level": level_for_xp(row.total_xp, settings.XP_PER_LEVEL),
                "streak": row.streak,
            }
            for row in rows
        )
        return {"leaderboard": entries, "timeframe": timeframe, "totalUsers": len(entries)}


leaderboard_service = LeaderboardService()
