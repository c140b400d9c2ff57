"""
Scam-awareness assistant endpoint
"""

from fastapi import APIRouter, Request

from app.core.config import settings
from app.middleware.rate_limit import limiter
from app.schemas.assistant import AskRequest, AskResponse
from app.services.assistant import assistant_service

router = APIRouter()


@router.post("/", response_model=AskResponse)
@limiter.limit(settings.ASSISTANT_RATE_LIMIT)
async def ask(request: Request, body: AskRequest):
    """Ask the AwareGuard assistant a question about scams"""
    answer = await assistant_service.ask(body.prompt)
    return {"answer": answer}
