"""
API v1 main router
Combines all v1 endpoint routers
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    ask,
    auth,
    config,
    contact,
    health,
    leaderboard,
    learning,
    payments,
    quizzes,
    stories,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(quizzes.router, prefix="/quizzes", tags=["Quizzes"])
api_router.include_router(learning.router, prefix="/learning", tags=["Learning"])
api_router.include_router(leaderboard.router, prefix="/learning", tags=["Leaderboard"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(config.router, prefix="/config", tags=["Config"])
api_router.include_router(stories.router, prefix="/stories", tags=["Stories"])
api_router.include_router(contact.contact_router, prefix="/contact", tags=["Contact"])
api_router.include_router(contact.leads_router, prefix="/leads", tags=["Leads"])
api_router.include_router(contact.report_router, prefix="/report", tags=["Report"])
api_router.include_router(ask.router, prefix="/ask", tags=["Assistant"])
