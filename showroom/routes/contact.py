"""
Public contact form submission.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
import logging

from showroom.dependencies import get_storage
from showroom.schemas import ContactInquiryCreate, ContactSubmissionResponse
from showroom.services.email_service import send_contact_inquiry_email
from showroom.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/contact", response_model=ContactSubmissionResponse)
async def submit_contact_inquiry(
    inquiry_data: ContactInquiryCreate,
    background_tasks: BackgroundTasks,
    storage: Storage = Depends(get_storage)
):
    """
    Create a contact inquiry with status "unread".

    The notification email is sent after the response; its failure never
    affects the submission.

    Raises:
        HTTPException: 400 if a field is missing (via validation), 500 if the inquiry could not be saved
    """
    inquiry = await storage.create_contact_inquiry(inquiry_data)
    if not inquiry:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit inquiry"
        )

    background_tasks.add_task(send_contact_inquiry_email, inquiry)
    logger.info(f"Contact inquiry submitted: {inquiry.id}")

    return ContactSubmissionResponse(
        success=True,
        message="Your inquiry has been submitted successfully. We'll contact you soon!",
        inquiryId=inquiry.id,
    )
