"""
Progress rules: levels, streaks and attempt aggregates
"""

import statistics
from datetime import datetime
from typing import Iterable, Optional, Tuple

XP_PER_LEVEL = 500


def level_for_xp(total_xp: int, xp_per_level: int = XP_PER_LEVEL) -> int:
    """Level is floor(totalXP / 500) + 1"""
    return max(total_xp or 0, 0) // xp_per_level + 1


def level_progress(total_xp: int, xp_per_level: int = XP_PER_LEVEL) -> dict:
    """Position of ``total_xp`` inside its level band"""
    level = level_for_xp(total_xp, xp_per_level)
    current_level_xp = (level - 1) * xp_per_level
    return {
        "level": level,
        "levelProgress": round_half_up((total_xp - current_level_xp) * 100 / xp_per_level),
        "xpToNextLevel": level * xp_per_level - total_xp,
    }


def update_streak(
    streak: int, last_activity: Optional[datetime], now: datetime
) -> Tuple[int, Optional[datetime]]:
    """
    Advance a daily activity streak.

    Days are counted as UTC calendar days between ``last_activity`` and
    ``now``, so activity at 23:50 followed by activity at 00:10 counts as
    consecutive days.

    Returns:
        (new streak, new last activity). On a same-day repeat both come
        back unchanged.
    """
    if last_activity is None:
        return 1, now

    days_since = (now.date() - last_activity.date()).days

    if days_since <= 0:
        return streak, last_activity
    if days_since == 1:
        return (streak or 0) + 1, now
    return 1, now


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def average_score(percentages: Iterable[int]) -> int:
    values = list(percentages)
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def pass_rate(passed_flags: Iterable[bool]) -> int:
    flags = list(passed_flags)
    if not flags:
        return 0
    return round_half_up(sum(1 for f in flags if f) * 100 / len(flags))


def median_score(percentages: Iterable[int]) -> float:
    values = list(percentages)
    if not values:
        return 0
    return statistics.median(values)
