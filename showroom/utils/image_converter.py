"""
WebP re-encoding for images bound for the Cloudinary sink.
"""
import asyncio
import io
import logging
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

WEBP_QUALITY = 85
WEBP_METHOD = 6       # 0-6, slower encodes compress better
MAX_DIMENSION = 3840  # longest edge before downscaling

# Modes WebP encodes directly; everything else is flattened to RGB first
WEBP_MODES = ('RGB', 'RGBA', 'LA')


def _encode_webp(data: bytes, quality: int, method: int, max_dimension: Optional[int], skip_if_webp: bool) -> bytes:
    image = Image.open(io.BytesIO(data))
    if skip_if_webp and image.format == 'WEBP':
        return data

    if image.mode == 'P':
        # Keep palette transparency
        image = image.convert('RGBA')
    elif image.mode not in WEBP_MODES:
        image = image.convert('RGB')

    if max_dimension and max(image.size) > max_dimension:
        original_size = image.size
        image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        logger.info(f"Downscaled image from {original_size} to {image.size}")

    output = io.BytesIO()
    image.save(output, format="WEBP", quality=quality, method=method, lossless=(quality == 100))
    return output.getvalue()


async def convert_to_webp(
    image_bytes: bytes,
    quality: int = WEBP_QUALITY,
    method: int = WEBP_METHOD,
    max_dimension: Optional[int] = MAX_DIMENSION,
    skip_if_webp: bool = True
) -> Tuple[bytes, bool]:
    """
    Re-encode an image as WebP in a worker thread.

    Returns:
        (bytes, ok): the WebP bytes and True, or the untouched input and False
        when Pillow cannot read or encode it. Input that is already WebP is
        returned as-is with True when skip_if_webp is set.
    """
    try:
        converted = await asyncio.to_thread(_encode_webp, image_bytes, quality, method, max_dimension, skip_if_webp)
    except UnidentifiedImageError:
        logger.warning("Cannot identify image format, keeping original bytes")
        return image_bytes, False
    except (OSError, ValueError) as e:
        logger.error(f"WebP conversion failed: {str(e)}", exc_info=True)
        return image_bytes, False
    return converted, True
