from datetime import datetime

import pytest

from app.domain.progress import (
    average_score,
    level_for_xp,
    level_progress,
    median_score,
    pass_rate,
    update_streak,
)


@pytest.mark.parametrize(
    "xp, level",
    [(0, 1), (499, 1), (500, 2), (999, 2), (1000, 3)],
)
def test_level_for_xp(xp, level):
    assert level_for_xp(xp) == level


def test_level_progress_band():
    assert level_progress(750) == {"level": 2, "levelProgress": 50, "xpToNextLevel": 250}


def test_first_activity_starts_streak():
    now = datetime(2025, 3, 10, 12, 0)
    assert update_streak(0, None, now) == (1, now)


def test_same_day_activity_leaves_streak_untouched():
    last = datetime(2025, 3, 10, 8, 0)
    assert update_streak(4, last, datetime(2025, 3, 10, 22, 0)) == (4, last)


def test_consecutive_calendar_days_across_midnight():
    last = datetime(2025, 3, 10, 23, 50)
    now = datetime(2025, 3, 11, 0, 10)
    assert update_streak(3, last, now) == (4, now)


def test_gap_of_more_than_a_day_resets():
    last = datetime(2025, 3, 10, 23, 0)
    now = datetime(2025, 3, 12, 0, 0)
    assert update_streak(9, last, now) == (1, now)


def test_twenty_five_hours_over_two_midnights_resets():
    last = datetime(2025, 3, 10, 23, 30)
    now = datetime(2025, 3, 12, 0, 30)
    assert update_streak(2, last, now)[0] == 1


@pytest.mark.parametrize(
    "last, now, expected",
    [
        # 25 hours from midday lands on the next calendar day
        (datetime(2025, 3, 10, 12, 0), datetime(2025, 3, 11, 13, 0), 6),
        # 47 hours that stay within adjacent days
        (datetime(2025, 3, 10, 0, 30), datetime(2025, 3, 11, 23, 30), 6),
        # 00:00 to 23:59 is still the same day
        (datetime(2025, 3, 10, 0, 0), datetime(2025, 3, 10, 23, 59), 5),
        # 47 hours from midday reaches the day after next
        (datetime(2025, 3, 10, 12, 0), datetime(2025, 3, 12, 11, 0), 1),
    ],
)
def test_streak_counts_calendar_days_not_elapsed_hours(last, now, expected):
    assert update_streak(5, last, now)[0] == expected


def test_aggregates():
    assert average_score([100, 50, 75]) == 75
    assert average_score([]) == 0
    assert pass_rate([True, False, True]) == 67
    assert pass_rate([]) == 0
    assert median_score([40, 100, 70, 90]) == 80
    assert median_score([]) == 0
