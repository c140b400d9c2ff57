"""
Health check endpoints
"""

import psutil
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.config import settings
from app.core.database import DatabaseHealthCheck, get_db

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check"""
    health_status = {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "checks": {},
    }

    health_status["checks"]["database"] = DatabaseHealthCheck.check_connection(db)
    if health_status["checks"]["database"] != "healthy":
        health_status["status"] = "degraded"

    if settings.REDIS_ENABLED:
        health_status["checks"]["redis"] = "healthy" if cache_manager.connected else "disconnected"
    else:
        health_status["checks"]["redis"] = "disabled"

    # Check system resources
    memory = psutil.virtual_memory()
    health_status["checks"]["resources"] = {
        "cpu_percent": psutil.cpu_percent(interval=None),
        "memory_percent": memory.percent,
        "memory_available_mb": round(memory.available / (1024 * 1024), 1),
    }

    return health_status
