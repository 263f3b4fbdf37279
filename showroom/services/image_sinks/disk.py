"""
Local disk image sink
"""
from pathlib import Path
from typing import Iterator, Optional
import asyncio
import logging
import re
import uuid

from showroom.services.image_sinks.base import ImageBlob, ImageSink, StoredImage
from showroom.utils.uploads import ALLOWED_IMAGE_TYPES

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
BLOB_ID_PATTERN = re.compile(r"^[0-9a-f]{32}\.(jpg|png|webp|gif)$")
CONTENT_TYPES = {extension: mime for mime, extension in ALLOWED_IMAGE_TYPES.items()}


class DiskImageSink(ImageSink):
    """Writes uploads to UPLOAD_DIR and serves them through /api/images/{blob_id}."""

    name = "disk"

    def __init__(self, upload_dir: str):
        self.upload_dir = Path(upload_dir)

    def _path_for(self, blob_id: str) -> Optional[Path]:
        # Blob ids are generated here; anything else could escape upload_dir
        if not BLOB_ID_PATTERN.match(blob_id):
            return None
        return self.upload_dir / blob_id

    async def save(self, data: bytes, filename: str, content_type: str, metadata: Optional[dict] = None) -> StoredImage:
        await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)
        blob_id = f"{uuid.uuid4().hex}{ALLOWED_IMAGE_TYPES[content_type]}"
        await asyncio.to_thread(self._path_for(blob_id).write_bytes, data)
        logger.info(f"Saved {filename} to disk as {blob_id} ({len(data):,} bytes)")
        return StoredImage(blob_id=blob_id, path=f"/api/images/{blob_id}")

    async def delete(self, blob_id: str) -> bool:
        path = self._path_for(blob_id)
        if path is None or not path.is_file():
            logger.warning(f"Image {blob_id} not found on disk, nothing to delete")
            return False
        await asyncio.to_thread(path.unlink)
        logger.info(f"Deleted image from disk: {blob_id}")
        return True

    async def open(self, blob_id: str) -> Optional[ImageBlob]:
        path = self._path_for(blob_id)
        if path is None or not path.is_file():
            return None
        content_type = CONTENT_TYPES.get(path.suffix, "application/octet-stream")
        return ImageBlob(
            filename=path.name,
            content_type=content_type,
            length=path.stat().st_size,
            chunks=_read_chunks(path),
        )


def _read_chunks(path: Path) -> Iterator[bytes]:
    with path.open("rb") as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
