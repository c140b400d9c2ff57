"""
Authentication endpoints
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import AuthenticationException, AwareGuardException
from app.core.logging import LoggerFactory
from app.core.security import create_user_token, get_current_user
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SigninRequest,
    SignupRequest,
    UserPublic,
)
from app.schemas.base import MessageResponse
from app.services.auth import auth_service
from app.services.email import EmailService

router = APIRouter()
logger = logging.getLogger(__name__)
audit = LoggerFactory.get_audit_logger()

RESET_REQUESTED_MESSAGE = "If an account exists with that email, a reset link has been sent"


async def _send_quietly(send, *args):
    """Run an email send where delivery failure must not fail the request"""
    try:
        await send(*args)
    except AwareGuardException as e:
        logger.warning(f"Email not delivered: {e.message}")


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_create: SignupRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db)
):
    """Register new user"""
    user = auth_service.create_user(db, user_create)
    audit.info("user_registered", extra={"user_id": user.id})
    background_tasks.add_task(_send_quietly, EmailService.send_welcome_email, user.email, user.name)
    return {"token": create_user_token(user), "user": user}


@router.post("/signin", response_model=AuthResponse)
async def signin(credentials: SigninRequest, db: Session = Depends(get_db)):
    """Login user"""
    user = auth_service.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        audit.info("signin_failed", extra={"email": credentials.email})
        raise AuthenticationException("Invalid email or password")
    return {"token": create_user_token(user), "user": user}


@router.get("/me", response_model=UserPublic)
async def me(current_user=Depends(get_current_user)):
    """Get current user"""
    return current_user


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db)
):
    """Start a password reset; the answer does not reveal whether the email exists"""
    issued = auth_service.start_password_reset(db, request.email)
    if issued:
        user, token = issued
        audit.info("password_reset_requested", extra={"user_id": user.id})
        background_tasks.add_task(
            _send_quietly, EmailService.send_password_reset_email, user.email, token, user.name
        )
    return {"message": RESET_REQUESTED_MESSAGE}


@router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Set a new password using an emailed reset token"""
    user = auth_service.reset_password(db, token, request.password)
    audit.info("password_reset_completed", extra={"user_id": user.id})
    background_tasks.add_task(
        _send_quietly, EmailService.send_password_reset_confirmation, user.email, user.name
    )
    return {"message": "Password has been reset successfully"}
