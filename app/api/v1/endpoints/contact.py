"""
Contact, lead and scam report endpoints
Public forms are rate limited per client address
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ExternalServiceException
from app.core.security import require_admin
from app.middleware.rate_limit import limiter
from app.schemas.base import MessageResponse
from app.schemas.content import ContactCreate, ContactOut, LeadCreate, LeadOut, ReportCreate
from app.services.contact import contact_service, lead_service
from app.services.email import EmailService

logger = logging.getLogger(__name__)

contact_router = APIRouter()
leads_router = APIRouter()
report_router = APIRouter()


@contact_router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CONTACT_RATE_LIMIT)
async def submit_contact(request: Request, contact: ContactCreate, db: Session = Depends(get_db)):
    """Store a contact submission and notify the admin inbox"""
    saved = contact_service.create(
        db,
        contact,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    try:
        await EmailService.send_contact_notification(saved)
    except ExternalServiceException as e:
        logger.warning(f"Contact {saved.id} stored but admin notification failed: {e.message}")

    return {"message": "Thank you for contacting us. We'll get back to you soon."}


@contact_router.get("/", response_model=List[ContactOut])
async def list_contacts(_admin=Depends(require_admin), db: Session = Depends(get_db)):
    return contact_service.recent(db)


@leads_router.post("/upgrade", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CONTACT_RATE_LIMIT)
async def capture_lead(request: Request, lead: LeadCreate, db: Session = Depends(get_db)):
    lead_service.create(db, lead)
    return {"message": "Thanks! We'll be in touch about upgrading."}


@leads_router.get("/", response_model=List[LeadOut])
async def list_leads(_admin=Depends(require_admin), db: Session = Depends(get_db)):
    return lead_service.recent(db)


@report_router.post("/", response_model=MessageResponse)
@limiter.limit(settings.CONTACT_RATE_LIMIT)
async def report_scam(request: Request, report: ReportCreate):
    """Forward a scam report to the admin inbox; delivery failure is a 502"""
    await EmailService.send_scam_report(report.name, report.email, report.details)
    return {"message": "Report received. Thank you for helping keep others safe."}
