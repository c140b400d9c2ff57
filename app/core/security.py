"""
Security utilities for authentication and authorization
Handles JWT tokens, password hashing, reset tokens and permission checks
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationException, AuthorizationException

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

# HTTP Bearer scheme; missing credentials are reported through our own envelope
security = HTTPBearer(auto_error=False)


class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify a plain password against hashed password"""
        if not hashed_password:
            return False
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token

        Args:
            data: Data to encode in token
            expires_delta: Token expiration time

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire, "type": "access"})

        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode JWT token

        Raises:
            AuthenticationException: If token is invalid or expired
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise AuthenticationException("Could not validate credentials")

    @staticmethod
    def generate_reset_token() -> str:
        """Generate a password reset token (sent to the user, never stored)"""
        return secrets.token_hex(32)

    @staticmethod
    def hash_token(token: str) -> str:
        """SHA-256 digest of a reset token, the form kept in the database"""
        return hashlib.sha256(token.encode()).hexdigest()


def create_user_token(user) -> str:
    return SecurityUtils.create_access_token(
        {"sub": str(user.id), "email": user.email, "role": user.role}
    )


def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials], db: Session
):
    from app.models import User

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationException()

    payload = SecurityUtils.decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise AuthenticationException("Invalid authentication credentials")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise AuthenticationException()
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
):
    """
    Resolve the authenticated user from the bearer token

    Raises:
        AuthenticationException: missing, invalid or expired token, or the
            user no longer exists
    """
    return _user_from_credentials(credentials, db)


def require_admin(current_user=Depends(get_current_user)):
    """Dependency to require admin role"""
    if not current_user.is_admin:
        raise AuthorizationException("Admin access required")
    return current_user


def ensure_self_or_admin(current_user, user_id: int) -> None:
    if current_user.id != user_id and not current_user.is_admin:
        raise AuthorizationException("Not authorized to view this user's attempts")
