"""
Cloudinary image sink implementation
"""
import logging
from typing import Optional

from showroom.services.cloudinary_service import (
    delete_image,
    extract_public_id_from_url,
    upload_image,
    validate_cloudinary_config,
)
from showroom.services.image_sinks.base import ImageSink, StoredImage
from showroom.utils.image_converter import convert_to_webp

logger = logging.getLogger(__name__)


class CloudinaryImageSink(ImageSink):
    """Uploads images to the Cloudinary CDN; records keep the secure URL."""

    name = "cloudinary"

    def __init__(self, folder: str = "showroom"):
        self.folder = folder
        if not validate_cloudinary_config():
            logger.warning("Cloudinary not fully configured (missing cloud_name, api_key, or api_secret)")

    async def save(self, data: bytes, filename: str, content_type: str, metadata: Optional[dict] = None) -> StoredImage:
        # Animated GIFs would lose their frames in conversion
        if content_type != "image/gif":
            converted, conversion_success = await convert_to_webp(data, quality=85, skip_if_webp=True)
            if conversion_success and len(converted) < len(data):
                logger.info(f"Converted {filename} to WebP: {len(data):,} bytes -> {len(converted):,} bytes")
                data = converted
            elif not conversion_success:
                logger.warning(f"WebP conversion failed for {filename}, uploading original format")

        folder = self.folder
        if metadata and metadata.get("type"):
            folder = f"{self.folder}/{metadata['type']}"

        logger.info(f"Uploading image to Cloudinary: {filename}")
        result = await upload_image(data, folder=folder)
        return StoredImage(blob_id=result["public_id"], path=result["url"])

    async def delete(self, blob_id: str) -> bool:
        result = await delete_image(blob_id)
        return result.get("result") == "ok"

    def blob_id_for(self, image_path: str, blob_id: Optional[str]) -> Optional[str]:
        if blob_id:
            return blob_id
        if image_path and "res.cloudinary.com" in image_path:
            try:
                return extract_public_id_from_url(image_path)
            except ValueError as e:
                logger.warning(f"Failed to extract public_id from URL: {str(e)}")
        return None
