"""
Payment endpoints
Paystack verification, webhook intake and subscription management
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging import LoggerFactory
from app.core.security import get_current_user
from app.schemas.payments import SubscriptionStatus, VerifyPaymentResponse
from app.schemas.base import MessageResponse
from app.services.payments import payment_service

router = APIRouter()
audit = LoggerFactory.get_audit_logger()


def _subscription_fields(user) -> dict:
    return {
        "is_premium": user.is_premium,
        "subscription_plan": user.subscription_plan,
        "subscription_expires_at": user.subscription_expires_at,
    }


@router.get("/subscription-status", response_model=SubscriptionStatus)
async def subscription_status(current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return payment_service.subscription_status(db, current_user)


@router.post("/verify/{reference}", response_model=VerifyPaymentResponse)
async def verify_payment(
    reference: str, current_user=Depends(get_current_user), db: Session = Depends(get_db)
):
    """Verify a Paystack transaction and activate premium for the caller"""
    activation = await payment_service.verify_payment(db, current_user, reference)
    audit.info(
        "payment_verified",
        extra={
            "user_id": current_user.id,
            "reference": reference,
            "already_processed": activation.already_processed,
        },
    )
    return {
        "message": (
            "Payment already processed"
            if activation.already_processed
            else "Premium subscription activated successfully!"
        ),
        "already_processed": activation.already_processed,
        **_subscription_fields(activation.user),
    }


@router.post("/webhook")
async def paystack_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """Paystack event intake; the signature covers the raw body"""
    raw_body = await request.body()
    result = payment_service.handle_webhook(db, raw_body, x_paystack_signature)
    audit.info("paystack_webhook", extra=result)
    return {**result, "message": "Webhook processed"}


@router.post("/cancel-subscription", response_model=MessageResponse)
async def cancel_subscription(current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    payment_service.cancel_subscription(db, current_user)
    audit.info("subscription_cancelled", extra={"user_id": current_user.id})
    return {"message": "Subscription cancelled"}
