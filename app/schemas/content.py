"""Story, contact, lead and report schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from app.models.content import InquiryType
from app.schemas.base import CamelModel


def strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class StoryCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    title: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=50)
    content: str = Field(..., min_length=1)

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)


class CommentCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    text: str = Field(..., min_length=1, max_length=2000)

    @field_validator("text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)


class CommentOut(CamelModel):
    id: int
    name: str
    text: str
    created_at: datetime


class StoryOut(CamelModel):
    id: int
    name: str
    title: str
    category: str
    content: str
    likes_count: int
    comments: List[CommentOut] = []
    created_at: datetime


class ContactCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    company: Optional[str] = Field(None, max_length=200)
    inquiry_type: InquiryType
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("name", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)


class ContactOut(CamelModel):
    id: int
    name: str
    email: str
    company: str
    inquiry_type: str
    message: str
    status: str
    created_at: datetime


class LeadCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    organization: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = Field(None, max_length=5000)


class LeadOut(CamelModel):
    id: int
    name: Optional[str] = None
    email: str
    organization: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime


class ReportCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    details: str = Field(..., min_length=1, max_length=10000)

    @field_validator("name", "details")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)
