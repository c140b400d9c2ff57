"""Scam-awareness assistant schemas"""

from pydantic import BaseModel, Field, field_validator

from app.schemas.content import strip_required


class AskRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)

    @field_validator("prompt")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return strip_required(v)


class AskResponse(BaseModel):
    answer: str
