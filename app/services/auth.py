"""
Authentication service for AwareGuard
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictException, ValidationException
from app.core.security import SecurityUtils
from app.models.progress import UserProgress
from app.models.user import User
from app.schemas.auth import SignupRequest
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service"""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def create_user(db: Session, user_create: SignupRequest) -> User:
        """
        Create a local account together with its progress record

        Raises:
            ConflictException: email already registered
        """
        email = user_create.email.strip().lower()
        if AuthService.get_by_email(db, email):
            raise ConflictException("User with this email already exists")

        db_user = User(
            name=(user_create.name or "").strip() or None,
            email=email,
            password_hash=SecurityUtils.get_password_hash(user_create.password),
        )
        db_user.progress = UserProgress()

        db.add(db_user)
        db.commit()
        db.refresh(db_user)

        logger.info(f"New user registered: {db_user.id}")
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user, None on unknown email or wrong password"""
        user = AuthService.get_by_email(db, email)
        if not user or not SecurityUtils.verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def start_password_reset(db: Session, email: str) -> Optional[Tuple[User, str]]:
        """
        Issue a reset token for a known email

        Only the SHA-256 of the token is stored. Returns (user, raw token)
        for the caller to email, or None when the email is unknown.
        """
        user = AuthService.get_by_email(db, email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return None

        token = SecurityUtils.generate_reset_token()
        user.reset_token_hash = SecurityUtils.hash_token(token)
        user.reset_token_expires_at = utcnow() + timedelta(
            minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES
        )
        db.commit()
        return user, token

    @staticmethod
    def reset_password(db: Session, token: str, new_password: str) -> User:
        """
        Raises:
            ValidationException: token unknown or expired
        """
        user = (
            db.query(User)
            .filter(
                User.reset_token_hash == SecurityUtils.hash_token(token),
                User.reset_token_expires_at > utcnow(),
            )
            .first()
        )
        if not user:
            raise ValidationException("Invalid or expired reset token")

        user.password_hash = SecurityUtils.get_password_hash(new_password)
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        db.commit()

        logger.info(f"Password reset completed for user {user.id}")
        return user


auth_service = AuthService()
