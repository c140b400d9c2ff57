"""Authentication schemas"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.config import settings


class SignupRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)


class SigninRequest(BaseModel):
    email: EmailStr
    password: str


class UserPublic(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    role: str
    is_premium: bool = Field(False, serialization_alias="isPremium")

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)
