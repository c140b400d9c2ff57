"""
Community story endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.content import CommentCreate, StoryCreate, StoryOut
from app.services.stories import story_service

router = APIRouter()


@router.post("/submit", response_model=StoryOut, status_code=status.HTTP_201_CREATED)
async def submit_story(story: StoryCreate, db: Session = Depends(get_db)):
    return story_service.create(db, story)


@router.get("/", response_model=List[StoryOut])
async def list_stories(db: Session = Depends(get_db)):
    """Most recent stories first"""
    return story_service.recent(db)


@router.post("/{story_id}/like", response_model=StoryOut)
async def like_story(story_id: int, db: Session = Depends(get_db)):
    return story_service.like(db, story_id)


@router.post("/{story_id}/comment", response_model=StoryOut)
async def comment_story(story_id: int, comment: CommentCreate, db: Session = Depends(get_db)):
    return story_service.comment(db, story_id, comment)
