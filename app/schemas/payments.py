"""Payment and subscription schemas"""

from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel


class SubscriptionStatus(CamelModel):
    success: bool = True
    is_premium: bool
    subscription_plan: str
    subscription_expires_at: Optional[datetime] = None
    days_remaining: int
    is_active: bool


class VerifyPaymentResponse(CamelModel):
    success: bool = True
    message: str
    already_processed: bool = False
    is_premium: bool
    subscription_plan: str
    subscription_expires_at: Optional[datetime] = None


class PlanAmounts(CamelModel):
    monthly: int
    annual: int


class PaystackConfig(CamelModel):
    public_key: str
    currency: str = "NGN"
    amounts: PlanAmounts
