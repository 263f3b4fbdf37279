"""
Validation for multipart image uploads.
"""
from fastapi import HTTPException, UploadFile, status
from typing import Optional, Tuple
import logging

from showroom.config import settings

logger = logging.getLogger(__name__)

# Accepted MIME types and the extension stored blobs get
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


async def read_image_upload(file: Optional[UploadFile]) -> Tuple[bytes, str, str]:
    """
    Validate and read an uploaded image.

    Args:
        file: The `image` field of the multipart form, if present

    Returns:
        Tuple of (file bytes, original filename, content type)

    Raises:
        HTTPException: 400 if missing or not an allowed image type, 413 if over the size cap
    """
    if file is None or not getattr(file, "filename", None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No image file provided"
        )

    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_IMAGE_TYPES:
        logger.warning(f"Rejected upload {file.filename} with content type {content_type or 'unknown'}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed."
        )

    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB}MB."
        )
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded image is empty"
        )

    return data, file.filename, content_type
