"""Email service backed by the Resend HTTP API"""

import html
import logging
from typing import Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

EMAIL_TIMEOUT_SECONDS = 10.0


def escape(value: Optional[str]) -> str:
    """HTML-escape user supplied text before it goes into a message body"""
    return html.escape(str(value)) if value else ""


def _layout(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\"></head>"
        "<body style=\"font-family: Arial, sans-serif; line-height: 1.6; color: #333; "
        "max-width: 600px; margin: 0 auto; padding: 20px;\">"
        f"<h2>{title}</h2>{body}"
        "<p style=\"font-size: 12px; color: #666;\">AwareGuard - stay one step ahead of scammers</p>"
        "</body></html>"
    )


class EmailService:
    @staticmethod
    def is_configured() -> bool:
        """Check if email service is configured"""
        return settings.EMAILS_ENABLED and bool(settings.RESEND_API_KEY)

    @staticmethod
    async def send(to: str, subject: str, html_body: str, reply_to: Optional[str] = None) -> dict:
        """
        Deliver one message through Resend

        Raises:
            ExternalServiceException: email is not configured, or the
                provider rejected or could not be reached
        """
        if not EmailService.is_configured():
            logger.warning(f"Email service not configured, dropping '{subject}' to {to}")
            raise ExternalServiceException("Email", "Email delivery is not configured")

        payload = {"from": settings.EMAIL_FROM, "to": [to], "subject": subject, "html": html_body}
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            async with httpx.AsyncClient(timeout=EMAIL_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    settings.RESEND_API_URL,
                    json=payload,
                    headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e}")
            raise ExternalServiceException("Email", "Failed to send email")

        logger.info(f"Sent '{subject}' to {to}")
        return response.json()

    @staticmethod
    async def send_welcome_email(email: str, name: Optional[str]):
        body = (
            f"<p>Hi {escape(name) or 'there'},</p>"
            "<p>Welcome to AwareGuard. Start with the free modules to learn how to "
            "spot phishing, job scams and other online fraud.</p>"
            f"<p><a href=\"{settings.FRONTEND_URL}/learn\">Start learning</a></p>"
        )
        return await EmailService.send(email, "Welcome to AwareGuard", _layout("Welcome!", body))

    @staticmethod
    async def send_password_reset_email(email: str, token: str, name: Optional[str] = None):
        """Send password reset link, valid for the configured reset window"""
        reset_url = f"{settings.FRONTEND_URL}/reset-password/{token}"
        minutes = settings.PASSWORD_RESET_EXPIRE_MINUTES
        body = (
            f"<p>Hi {escape(name) or 'User'},</p>"
            "<p>We received a request to reset your password.</p>"
            f"<p><a href=\"{reset_url}\">Reset password</a></p>"
            f"<p>This link expires in {minutes} minutes. If you did not ask for a reset, "
            "you can ignore this email.</p>"
        )
        return await EmailService.send(
            email, "Reset Your Password - AwareGuard", _layout("Password reset", body)
        )

    @staticmethod
    async def send_password_reset_confirmation(email: str, name: Optional[str] = None):
        body = (
            f"<p>Hi {escape(name) or 'User'},</p>"
            "<p>Your password was changed. If this was not you, contact support immediately.</p>"
        )
        return await EmailService.send(
            email, "Your Password Was Changed - AwareGuard", _layout("Password changed", body)
        )

    @staticmethod
    async def send_contact_notification(contact) -> dict:
        """Notify the admin inbox about a new contact form submission"""
        body = (
            f"<p><strong>Name:</strong> {escape(contact.name)}</p>"
            f"<p><strong>Email:</strong> {escape(contact.email)}</p>"
            f"<p><strong>Company:</strong> {escape(contact.company) or '-'}</p>"
            f"<p><strong>Inquiry:</strong> {escape(contact.inquiry_type)}</p>"
            f"<p>{escape(contact.message)}</p>"
        )
        return await EmailService.send(
            settings.ADMIN_EMAIL or settings.EMAIL_FROM,
            f"New {contact.inquiry_type} inquiry from {contact.name}",
            _layout("New contact submission", body),
            reply_to=contact.email,
        )

    @staticmethod
    async def send_scam_report(name: str, email: str, details: str) -> dict:
        body = (
            f"<p><strong>Reporter:</strong> {escape(name)} ({escape(email)})</p>"
            f"<p>{escape(details)}</p>"
        )
        return await EmailService.send(
            settings.ADMIN_EMAIL or settings.EMAIL_FROM,
            f"Scam report from {name}",
            _layout("New scam report", body),
            reply_to=email,
        )
