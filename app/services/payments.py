"""
Payment and subscription service

Activation is replay guarded: a reference that already produced a
successful payment never extends the subscription a second time, whether
it arrives through client verification or the Paystack webhook.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundException, PaymentException
from app.domain.subscription import (
    PAID_PLANS,
    SubscriptionPlan,
    check_and_downgrade,
    days_remaining,
    is_active,
    subscription_expiry,
)
from app.models.user import Payment, PaymentStatus, User
from app.services.paystack import PaystackClient, paystack_client, to_kobo
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


@dataclass
class Activation:
    user: User
    already_processed: bool = False


def _plan_from_metadata(metadata: Optional[Dict[str, Any]]) -> str:
    plan = (metadata or {}).get("plan") or SubscriptionPlan.MONTHLY.value
    if plan not in PAID_PLANS:
        raise PaymentException(f"Unknown subscription plan: {plan}")
    return plan


class PaymentService:
    def __init__(self, client: PaystackClient = paystack_client):
        self.client = client

    @staticmethod
    def is_processed(db: Session, reference: str) -> bool:
        return (
            db.query(Payment)
            .filter(Payment.reference == reference, Payment.status == PaymentStatus.SUCCESS.value)
            .first()
            is not None
        )

    @staticmethod
    def activate_premium(
        db: Session,
        user_id: int,
        plan: str,
        reference: str,
        amount: float,
        now: Optional[datetime] = None,
    ) -> Activation:
        """
        Grant premium access for ``plan`` starting at ``now``

        Args:
            amount: Amount paid in NGN

        Raises:
            NotFoundException: unknown user
        """
        now = now or utcnow()
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundException("User")

        if PaymentService.is_processed(db, reference):
            logger.warning(f"Payment reference {reference} already processed, skipping")
            return Activation(user=user, already_processed=True)

        user.is_premium = True
        user.subscription_plan = plan
        user.subscription_started_at = now
        user.subscription_expires_at = subscription_expiry(plan, now)
        user.paystack_reference = reference
        user.last_payment_amount = amount
        user.payments.append(
            Payment(
                reference=reference,
                amount=amount,
                plan=plan,
                status=PaymentStatus.SUCCESS.value,
                created_at=now,
            )
        )
        try:
            db.commit()
        except IntegrityError:
            # Another request recorded this reference first
            db.rollback()
            logger.warning(f"Payment reference {reference} processed concurrently, skipping")
            db.refresh(user)
            return Activation(user=user, already_processed=True)
        db.refresh(user)

        logger.info(f"Premium {plan} activated for user {user.id} until {user.subscription_expires_at}")
        return Activation(user=user)

    async def verify_payment(
        self, db: Session, user: User, reference: str, now: Optional[datetime] = None
    ) -> Activation:
        """
        Confirm a transaction with Paystack and activate it for ``user``

        Raises:
            PaymentException: provider says no, wrong amount for the plan,
                or the transaction belongs to another account
        """
        now = now or utcnow()
        if check_and_downgrade(user, now):
            db.commit()

        body = await self.client.verify_transaction(reference)
        if not body.get("status"):
            raise PaymentException("Payment verification failed")

        transaction = body.get("data") or {}
        if transaction.get("status") != "success":
            raise PaymentException("Payment was not successful")

        metadata = transaction.get("metadata") or {}
        plan = _plan_from_metadata(metadata)
        if transaction.get("amount") != to_kobo(settings.plan_amount(plan)):
            raise PaymentException("Payment amount mismatch")

        if str(metadata.get("userId")) != str(user.id):
            raise PaymentException("User mismatch - payment does not match your account")

        return self.activate_premium(
            db, user.id, plan, reference, transaction["amount"] / 100, now=now
        )

    def handle_webhook(
        self, db: Session, raw_body: bytes, signature: Optional[str], now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Process a Paystack webhook delivery

        Raises:
            PaymentException: bad signature, unreadable body or a
                charge.success without a user id
        """
        if not self.client.verify_signature(raw_body, signature):
            logger.error("Invalid webhook signature")
            raise PaymentException("Invalid signature")

        try:
            event = json.loads(raw_body)
        except ValueError:
            raise PaymentException("Invalid webhook payload")
        if not isinstance(event, dict):
            raise PaymentException("Invalid webhook payload")
        data = event.get("data") or {}
        if not isinstance(data, dict):
            raise PaymentException("Invalid webhook payload")
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise PaymentException("Invalid webhook payload")

        event_type = event.get("event")
        reference = data.get("reference")

        if event_type == "charge.success":
            user_id = metadata.get("userId")
            if not user_id or not str(user_id).isdigit():
                logger.error("No userId in webhook metadata")
                raise PaymentException("Missing userId")
            if not reference:
                raise PaymentException("Missing reference")

            activation = self.activate_premium(
                db,
                int(user_id),
                _plan_from_metadata(metadata),
                reference,
                (data.get("amount") or 0) / 100,
                now=now,
            )
            logger.info(f"Webhook: payment successful for user {user_id} - reference {reference}")
            return {"status": "success", "alreadyProcessed": activation.already_processed}

        if event_type == "charge.failed":
            logger.warning(f"Webhook: payment failed - reference {reference}")
            user_id = metadata.get("userId")
            user = (
                db.query(User).filter(User.id == int(user_id)).first()
                if user_id and str(user_id).isdigit()
                else None
            )
            if user is not None:
                user.payments.append(
                    Payment(
                        reference=reference or "",
                        amount=(data.get("amount") or 0) / 100,
                        plan=metadata.get("plan"),
                        status=PaymentStatus.FAILED.value,
                    )
                )
                db.commit()
            return {"status": "success"}

        logger.info(f"Webhook: ignoring event {event_type}")
        return {"status": "success"}

    @staticmethod
    def cancel_subscription(db: Session, user: User) -> User:
        user.is_premium = False
        user.subscription_plan = SubscriptionPlan.NONE.value
        user.subscription_expires_at = None
        user.payments.append(
            Payment(
                reference=user.paystack_reference or "",
                amount=0,
                plan=SubscriptionPlan.NONE.value,
                status=PaymentStatus.CANCELLED.value,
            )
        )
        db.commit()
        db.refresh(user)

        logger.info(f"Subscription cancelled for user {user.id}")
        return user

    @staticmethod
    def subscription_status(db: Session, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Current subscription, downgrading an expired one first"""
        now = now or utcnow()
        if check_and_downgrade(user, now):
            db.commit()
            logger.info(f"Subscription expired for user {user.id}, downgraded")

        return {
            "is_premium": user.is_premium,
            "subscription_plan": user.subscription_plan,
            "subscription_expires_at": user.subscription_expires_at,
            "days_remaining": days_remaining(user, now),
            "is_active": is_active(user, now),
        }


payment_service = PaymentService()
