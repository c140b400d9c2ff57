"""
Rate limiting for AwareGuard

In-memory fixed windows keyed by client address. Counters live in the
process, so they are not shared between workers and reset on restart.
"""

from fastapi import FastAPI
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


def add_rate_limiting(app: FastAPI) -> None:
    """Attach the shared limiter to the application"""
    app.state.limiter = limiter
