"""Community scam stories"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.content import Story, StoryComment
from app.schemas.content import CommentCreate, StoryCreate

logger = logging.getLogger(__name__)

RECENT_STORIES_LIMIT = 50


class StoryService:
    @staticmethod
    def create(db: Session, data: StoryCreate) -> Story:
        story = Story(
            name=(data.name or "").strip() or "Anonymous",
            title=data.title,
            category=(data.category or "").strip() or "General",
            content=data.content,
        )
        db.add(story)
        db.commit()
        db.refresh(story)
        logger.info(f"Story {story.id} submitted")
        return story

    @staticmethod
    def recent(db: Session, limit: int = RECENT_STORIES_LIMIT) -> List[Story]:
        return db.query(Story).order_by(Story.created_at.desc(), Story.id.desc()).limit(limit).all()

    @staticmethod
    def get(db: Session, story_id: int) -> Story:
        story = db.query(Story).filter(Story.id == story_id).first()
        if story is None:
            raise NotFoundException("Story")
        return story

    @staticmethod
    def like(db: Session, story_id: int) -> Story:
        story = StoryService.get(db, story_id)
        story.likes_count = (story.likes_count or 0) + 1
        db.commit()
        db.refresh(story)
        return story

    @staticmethod
    def comment(db: Session, story_id: int, data: CommentCreate) -> Story:
        story = StoryService.get(db, story_id)
        story.comments.append(
            StoryComment(name=(data.name or "").strip() or "Anonymous", text=data.text)
        )
        db.commit()
        db.refresh(story)
        return story


story_service = StoryService()
