"""Public client configuration"""

from fastapi import APIRouter

from app.core.config import settings
from app.schemas.payments import PaystackConfig

router = APIRouter()


@router.get("/paystack", response_model=PaystackConfig)
async def paystack_config():
    """Publishable key and plan prices (NGN) for the checkout widget"""
    return {
        "public_key": settings.PAYSTACK_PUBLIC_KEY or "",
        "amounts": {
            "monthly": settings.MONTHLY_PLAN_AMOUNT,
            "annual": settings.ANNUAL_PLAN_AMOUNT,
        },
    }
