"""
Community content and inbound form models
"""

import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.utils.time import utcnow


class InquiryType(str, enum.Enum):
    ENTERPRISE = "enterprise"
    GENERAL = "general"
    SUPPORT = "support"


class ContactStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    RESOLVED = "resolved"


class Story(Base):
    """Scam story shared by a visitor"""
    __tablename__ = "stories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, default="Anonymous", nullable=False)
    title = Column(String, nullable=False)
    category = Column(String, default="General", nullable=False)
    content = Column(Text, nullable=False)
    likes_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    comments = relationship(
        "StoryComment",
        back_populates="story",
        order_by="StoryComment.id",
        cascade="all, delete-orphan",
    )


class StoryComment(Base):
    __tablename__ = "story_comments"

    id = Column(Integer, primary_key=True, index=True)
    story_id = Column(Integer, ForeignKey("stories.id"), nullable=False, index=True)
    name = Column(String, default="Anonymous", nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    story = relationship("Story", back_populates="comments")


class Contact(Base):
    """Contact form submission"""
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    company = Column(String, default="", nullable=False)
    inquiry_type = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String, default=ContactStatus.NEW.value, nullable=False)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Lead(Base):
    """Upgrade interest captured from the pricing page"""
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, nullable=False)
    organization = Column(String, nullable=True)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
