"""
Admin session and enquiry management routes.
Login/check/logout manage the server-side admin session; enquiry routes require it.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from typing import List
import logging

from showroom.dependencies import get_storage
from showroom.schemas import ContactInquiryResponse, InquiryStatusUpdate, LoginRequest
from showroom.services.storage import Storage
from showroom.utils.auth import verify_admin_password
from showroom.utils.rate_limit import RATE_LIMITS, limiter
from showroom.utils.session import end_session, get_session, require_admin, start_admin_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.post("/login")
@limiter.limit(RATE_LIMITS["login"])
async def login(request: Request, response: Response, credentials: LoginRequest):
    """
    Verify the admin password and start an admin session.

    Raises:
        HTTPException: 401 if the password is wrong, 500 if no password hash is configured
    """
    try:
        is_valid = verify_admin_password(credentials.password)
    except ValueError as e:
        logger.error(f"Admin login unavailable: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin password not configured"
        )

    if not is_valid:
        logger.warning("Admin login failed: invalid password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password"
        )

    start_admin_session(request, response)
    return {"success": True}


@router.get("/check")
async def check_session(request: Request):
    """Report whether the caller holds an admin session."""
    session = get_session(request)
    if session is None or not session.admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return {"authenticated": True}


@router.post("/logout")
async def logout(request: Request, response: Response):
    end_session(request, response)
    return {"success": True}


@router.get("/enquiries", response_model=List[ContactInquiryResponse], dependencies=[Depends(require_admin)])
async def get_enquiries(storage: Storage = Depends(get_storage)):
    """Get all contact enquiries, newest first."""
    enquiries = await storage.get_contact_inquiries()
    logger.info(f"Retrieved {len(enquiries)} enquiries")
    return enquiries


@router.put("/enquiries/{enquiry_id}", response_model=ContactInquiryResponse, dependencies=[Depends(require_admin)])
async def update_enquiry_status(
    enquiry_id: str,
    status_update: InquiryStatusUpdate,
    storage: Storage = Depends(get_storage)
):
    """
    Set an enquiry's status (unread, read or responded).

    Raises:
        HTTPException: 404 if the enquiry does not exist
    """
    enquiry = await storage.update_contact_inquiry_status(enquiry_id, status_update.status)
    if not enquiry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enquiry not found"
        )
    logger.info(f"Enquiry {enquiry_id} marked as {status_update.status}")
    return enquiry


@router.delete("/enquiries/{enquiry_id}", dependencies=[Depends(require_admin)])
async def delete_enquiry(enquiry_id: str, storage: Storage = Depends(get_storage)):
    deleted = await storage.delete_contact_inquiry(enquiry_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enquiry not found"
        )
    logger.info(f"Deleted enquiry {enquiry_id}")
    return {"success": True}
