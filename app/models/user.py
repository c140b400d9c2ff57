"""
User and payment models for AwareGuard
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.domain.subscription import SubscriptionPlan
from app.utils.time import utcnow


class UserRole(str, enum.Enum):
    """User roles"""
    USER = "user"
    ADMIN = "admin"


class PaymentStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)
    provider = Column(String, default="local", nullable=False)
    role = Column(String, default=UserRole.USER.value, nullable=False)

    # Subscription
    is_premium = Column(Boolean, default=False, nullable=False, index=True)
    subscription_plan = Column(String, default=SubscriptionPlan.NONE.value, nullable=False)
    subscription_started_at = Column(DateTime, nullable=True)
    subscription_expires_at = Column(DateTime, nullable=True, index=True)
    paystack_reference = Column(String, nullable=True)
    last_payment_amount = Column(Float, default=0, nullable=False)

    # Password reset
    reset_token_hash = Column(String, nullable=True, index=True)
    reset_token_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    payments = relationship(
        "Payment", back_populates="user", order_by="Payment.id", cascade="all, delete-orphan"
    )
    progress = relationship(
        "UserProgress", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


class Payment(Base):
    """Payment history entry"""
    __tablename__ = "payments"
    __table_args__ = (
        # A reference can succeed at most once
        Index(
            "uq_payments_success_reference",
            "reference",
            unique=True,
            sqlite_where=text("status = 'success'"),
            postgresql_where=text("status = 'success'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reference = Column(String, nullable=False, index=True)
    amount = Column(Float, default=0, nullable=False)  # NGN
    plan = Column(String, nullable=True)
    status = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="payments")
