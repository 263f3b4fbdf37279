"""
Cloudinary CDN client used by the cloudinary image sink.
The SDK is synchronous, so every call runs in a worker thread and transient
Cloudinary errors are retried with exponential backoff.
"""
import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from showroom.config import settings
import logging
import asyncio
import re
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
# Uploaded images are capped at this size; aspect ratio is kept
MAX_DIMENSIONS = {"width": 1920, "height": 1080, "crop": "limit"}
PUBLIC_ID_PATTERN = re.compile(r'/image/upload(?:/v\d+)?/(.+)$')

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True
)


async def _call_with_retries(action: str, sdk_call: Callable[..., Dict[str, Any]], *args, max_retries: int = MAX_RETRIES, **kwargs) -> Dict[str, Any]:
    """
    Run a blocking SDK call off the event loop, retrying Cloudinary errors.
    Waits 1s, 2s, 4s... between attempts and re-raises the last error.
    """
    for attempt in range(1, max_retries + 1):
        try:
            return await asyncio.to_thread(sdk_call, *args, **kwargs)
        except CloudinaryError as e:
            if attempt == max_retries:
                logger.error(f"Cloudinary {action} failed after {max_retries} attempts: {str(e)}")
                raise
            logger.warning(f"Cloudinary {action} error (attempt {attempt}/{max_retries}): {str(e)}")
            await asyncio.sleep(2 ** (attempt - 1))


async def upload_image(
    file: Any,
    folder: str = "showroom",
    public_id: Optional[str] = None,
    max_retries: int = MAX_RETRIES
) -> Dict[str, Any]:
    """
    Upload image bytes (or a path/file object) to Cloudinary.

    Cloudinary picks the delivery format and quality; oversized images are
    scaled down to MAX_DIMENSIONS.

    Returns:
        dict with url (secure HTTPS URL), public_id, format, width, height, bytes

    Raises:
        CloudinaryError: If every attempt fails
    """
    result = await _call_with_retries(
        "upload",
        cloudinary.uploader.upload,
        file,
        max_retries=max_retries,
        folder=folder,
        public_id=public_id,
        resource_type="image",
        fetch_format="auto",
        quality="auto",
        transformation=[MAX_DIMENSIONS],
    )
    logger.info(f"Uploaded image to Cloudinary: {result['public_id']}")

    return {
        "url": result["secure_url"],
        "public_id": result["public_id"],
        "format": result.get("format"),
        "width": result.get("width"),
        "height": result.get("height"),
        "bytes": result.get("bytes"),
    }


async def delete_image(public_id: str, max_retries: int = MAX_RETRIES) -> Dict[str, Any]:
    """
    Remove an image from Cloudinary and invalidate its CDN cache.

    Returns:
        The SDK result; result["result"] is "ok" or "not found"
    """
    result = await _call_with_retries(
        f"delete of {public_id}",
        cloudinary.uploader.destroy,
        public_id,
        max_retries=max_retries,
        invalidate=True,
        resource_type="image",
    )

    outcome = result.get("result")
    if outcome in ("ok", "not found"):
        logger.info(f"Cloudinary delete {public_id}: {outcome}")
    else:
        logger.warning(f"Unexpected Cloudinary delete result for {public_id}: {result}")
    return result


def extract_public_id_from_url(cloudinary_url: str) -> str:
    """
    Recover the public_id from a delivery URL such as
    https://res.cloudinary.com/<cloud>/image/upload/v123/showroom/gallery/abc.webp

    Raises:
        ValueError: If the URL is not a Cloudinary upload URL
    """
    match = PUBLIC_ID_PATTERN.search(cloudinary_url)
    if not match:
        raise ValueError(f"Invalid Cloudinary URL format: {cloudinary_url}")

    folder, _, filename = match.group(1).rpartition('/')
    stem = filename.rsplit('.', 1)[0] if '.' in filename else filename
    return f"{folder}/{stem}" if folder else stem


def validate_cloudinary_config() -> bool:
    """Return True when cloud name, API key and secret are all set."""
    missing = [
        name for name in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET")
        if not getattr(settings, name)
    ]
    if missing:
        logger.warning(f"Cloudinary not configured, missing: {', '.join(missing)}")
        return False
    return True
