"""
Email notifications for new contact enquiries, sent through Mailgun's HTTP API.
Sending is best-effort: failures are logged and never reach the caller.
"""
import logging

import requests

from showroom.config import settings
from showroom.schemas import ContactInquiryResponse

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10


def is_email_configured() -> bool:
    return bool(settings.MAILGUN_API_KEY and settings.MAILGUN_DOMAIN and settings.NOTIFICATION_EMAIL)


def build_inquiry_email(inquiry: ContactInquiryResponse) -> dict:
    """Form fields for a Mailgun messages request."""
    return {
        "from": settings.EMAIL_FROM,
        "to": settings.NOTIFICATION_EMAIL,
        "subject": f"New enquiry from {inquiry.name}: {inquiry.service}",
        "h:Reply-To": inquiry.email,
        "text": (
            f"A new enquiry was submitted through the website.\n\n"
            f"Name:    {inquiry.name}\n"
            f"Email:   {inquiry.email}\n"
            f"Phone:   {inquiry.phone}\n"
            f"Service: {inquiry.service}\n\n"
            f"Message:\n{inquiry.message}\n\n"
            f"Enquiry ID: {inquiry.id}\n"
        ),
    }


def send_contact_inquiry_email(inquiry: ContactInquiryResponse) -> bool:
    """
    Send the enquiry notification email.
    Runs as a background task after the contact response has been sent.

    Returns:
        True if Mailgun accepted the message, False if skipped or failed
    """
    if not is_email_configured():
        logger.info(f"Email notifications not configured, skipping enquiry {inquiry.id}")
        return False

    try:
        response = requests.post(
            f"{settings.MAILGUN_API_BASE}/{settings.MAILGUN_DOMAIN}/messages",
            auth=("api", settings.MAILGUN_API_KEY),
            data=build_inquiry_email(inquiry),
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to send contact inquiry email for {inquiry.id}: {str(e)}", exc_info=True)
        return False

    logger.info(f"Sent enquiry notification for {inquiry.id} to {settings.NOTIFICATION_EMAIL}")
    return True
