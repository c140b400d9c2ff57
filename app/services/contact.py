"""Contact form and upgrade lead capture"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.content import Contact, Lead
from app.schemas.content import ContactCreate, LeadCreate

logger = logging.getLogger(__name__)


class ContactService:
    @staticmethod
    def create(
        db: Session,
        data: ContactCreate,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Contact:
        contact = Contact(
            name=data.name,
            email=data.email.lower(),
            company=(data.company or "").strip(),
            inquiry_type=data.inquiry_type.value,
            message=data.message,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.add(contact)
        db.commit()
        db.refresh(contact)
        logger.info(f"Contact {contact.id} received ({contact.inquiry_type})")
        return contact

    @staticmethod
    def recent(db: Session, limit: int = 100) -> List[Contact]:
        return db.query(Contact).order_by(Contact.created_at.desc(), Contact.id.desc()).limit(limit).all()


class LeadService:
    @staticmethod
    def create(db: Session, data: LeadCreate) -> Lead:
        lead = Lead(
            name=data.name,
            email=data.email.lower(),
            organization=data.organization,
            message=data.message,
        )
        db.add(lead)
        db.commit()
        db.refresh(lead)
        logger.info(f"Upgrade lead {lead.id} captured")
        return lead

    @staticmethod
    def recent(db: Session, limit: int = 200) -> List[Lead]:
        return db.query(Lead).order_by(Lead.created_at.desc(), Lead.id.desc()).limit(limit).all()


contact_service = ContactService()
lead_service = LeadService()
