"""
Leaderboard ranking rules

Users are ordered by XP, highest first. Equal XP keeps the incoming order
(the query breaks ties by user id), and every entry gets its own
consecutive rank: two users on 100 XP are ranked 3 and 4, not 3 and 3.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

TIMEFRAME_WINDOWS = {
    "all": None,
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}


def window_start(timeframe: str, now: datetime) -> Optional[datetime]:
    """Earliest last-activity time included in ``timeframe``"""
    if timeframe not in TIMEFRAME_WINDOWS:
        raise ValueError(f"Invalid timeframe: {timeframe}")
    window = TIMEFRAME_WINDOWS[timeframe]
    return now - window if window else None


def clamp_limit(limit: Optional[int], default: int = 50, cap: int = 100) -> int:
    if limit is None:
        return default
    return max(1, min(limit, cap))


def rank_entries(entries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort by ``totalXP`` descending (stable) and attach 1-based ranks"""
    ordered = sorted(entries, key=lambda e: e["totalXP"], reverse=True)
    return [{"rank": index + 1, **entry} for index, entry in enumerate(ordered)]
