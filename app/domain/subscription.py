"""
Subscription state rules

Premium status is always derived from the expiry date at read time. The
stored ``is_premium`` flag is only written back to False when a read path
calls :func:`check_and_downgrade`; there is no background sweep.
"""

import calendar
import math
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


class SubscriptionPlan(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"
    NONE = "none"


PAID_PLANS = (SubscriptionPlan.MONTHLY.value, SubscriptionPlan.ANNUAL.value)


def is_expired(user: Any, now: datetime) -> bool:
    expires_at = user.subscription_expires_at
    return expires_at is not None and now > expires_at


def is_active(user: Any, now: datetime) -> bool:
    """True iff premium, an expiry is set and it lies in the future"""
    if not user.is_premium or user.subscription_expires_at is None:
        return False
    return now < user.subscription_expires_at


def check_and_downgrade(user: Any, now: datetime) -> bool:
    """
    Clear premium fields of an expired subscription.

    Returns:
        True if the record was changed and needs persisting
    """
    if user.is_premium and is_expired(user, now):
        user.is_premium = False
        user.subscription_plan = SubscriptionPlan.NONE.value
        user.subscription_expires_at = None
        return True
    return False


def add_months(start: datetime, months: int) -> datetime:
    """Same day ``months`` later, clamped to the end of shorter months"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def subscription_expiry(plan: str, start: datetime) -> datetime:
    if plan == SubscriptionPlan.MONTHLY.value:
        return add_months(start, 1)
    if plan == SubscriptionPlan.ANNUAL.value:
        return add_months(start, 12)
    raise ValueError(f"Unknown subscription plan: {plan}")


def days_remaining(user: Any, now: datetime) -> int:
    if not user.is_premium or user.subscription_expires_at is None:
        return 0
    remaining = (user.subscription_expires_at - now) / timedelta(days=1)
    return max(0, math.ceil(remaining))
