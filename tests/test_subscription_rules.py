from datetime import datetime
from types import SimpleNamespace

import pytest

from app.domain.leaderboard import clamp_limit, rank_entries, window_start
from app.domain.subscription import (
    check_and_downgrade,
    days_remaining,
    is_active,
    subscription_expiry,
)

NOW = datetime(2025, 6, 15, 12, 0)


def subscriber(is_premium=True, expires_at=None, plan="monthly"):
    return SimpleNamespace(
        is_premium=is_premium, subscription_expires_at=expires_at, subscription_plan=plan
    )


def test_active_requires_future_expiry():
    assert is_active(subscriber(expires_at=datetime(2025, 7, 1)), NOW)
    assert not is_active(subscriber(expires_at=datetime(2025, 6, 1)), NOW)
    assert not is_active(subscriber(expires_at=None), NOW)
    assert not is_active(subscriber(is_premium=False, expires_at=datetime(2025, 7, 1)), NOW)


def test_expired_subscription_is_downgraded():
    user = subscriber(expires_at=datetime(2025, 6, 14))

    assert check_and_downgrade(user, NOW) is True
    assert user.is_premium is False
    assert user.subscription_plan == "none"
    assert user.subscription_expires_at is None


def test_current_subscription_is_left_alone():
    user = subscriber(expires_at=datetime(2025, 7, 14))

    assert check_and_downgrade(user, NOW) is False
    assert user.is_premium is True


@pytest.mark.parametrize(
    "plan, start, expected",
    [
        ("monthly", datetime(2025, 1, 15), datetime(2025, 2, 15)),
        ("monthly", datetime(2025, 1, 31), datetime(2025, 2, 28)),
        ("monthly", datetime(2025, 12, 10), datetime(2026, 1, 10)),
        ("annual", datetime(2024, 2, 29), datetime(2025, 2, 28)),
    ],
)
def test_subscription_expiry(plan, start, expected):
    assert subscription_expiry(plan, start) == expected


def test_unknown_plan_has_no_expiry():
    with pytest.raises(ValueError):
        subscription_expiry("weekly", NOW)


def test_days_remaining_rounds_up():
    assert days_remaining(subscriber(expires_at=datetime(2025, 6, 16, 0, 0)), NOW) == 1
    assert days_remaining(subscriber(expires_at=datetime(2025, 6, 10)), NOW) == 0
    assert days_remaining(subscriber(is_premium=False, expires_at=datetime(2025, 7, 1)), NOW) == 0


def test_rank_entries_gives_consecutive_ranks():
    ranked = rank_entries(
        [
            {"name": "a", "totalXP": 100},
            {"name": "b", "totalXP": 300},
            {"name": "c", "totalXP": 100},
        ]
    )
    assert [(e["rank"], e["name"]) for e in ranked] == [(1, "b"), (2, "a"), (3, "c")]


def test_leaderboard_limits_and_windows():
    assert clamp_limit(None) == 50
    assert clamp_limit(0) == 1
    assert clamp_limit(500) == 100
    assert window_start("all", NOW) is None
    assert window_start("week", NOW) == datetime(2025, 6, 8, 12, 0)
    with pytest.raises(ValueError):
        window_start("year", NOW)
