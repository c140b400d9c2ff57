"""
Scam-awareness assistant

Forwards a learner's question to an OpenRouter chat model behind a fixed
system prompt that keeps answers on scams and digital safety.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

ASSISTANT_TIMEOUT_SECONDS = 60.0
NO_REPLY = "No reply from AI."

SYSTEM_PROMPT = (
    "You are AwareGuard AI, a professional and user-friendly scam awareness "
    "assistant dedicated solely to educating users on scams and digital safety; "
    "provide detailed, accurate answers related to scam prevention, and if asked "
    "any question beyond your scope, politely respond that you are designed only "
    "for scam awareness and cannot assist with that topic, while also temporarily "
    "storing previous responses during a session to maintain conversational "
    "context and provide relevant, coherent answers to follow-up questions."
)


def extract_reply(body: Dict[str, Any]) -> str:
    """First choice's message content, or the no-reply text"""
    choices = body.get("choices") if isinstance(body, dict) else None
    if not choices or not isinstance(choices[0], dict):
        return NO_REPLY
    message = choices[0].get("message") or {}
    return message.get("content") or NO_REPLY


class AssistantService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.OPENROUTER_API_KEY
        self.api_url = api_url or settings.OPENROUTER_API_URL
        self.model = model or settings.ASSISTANT_MODEL

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def ask(self, prompt: str) -> str:
        """
        Answer a single scam-awareness question

        Raises:
            ExternalServiceException: no API key, provider unreachable, or
                provider returned an error status
        """
        if not self.is_configured():
            logger.error("Assistant requested but OPENROUTER_API_KEY is not set")
            raise ExternalServiceException("OpenRouter", "AI failed to respond")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "stream": False,
        }
        try:
            async with httpx.AsyncClient(timeout=ASSISTANT_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"OpenRouter request failed: {e}")
            raise ExternalServiceException("OpenRouter", "AI failed to respond")

        return extract_reply(body)


assistant_service = AssistantService()
