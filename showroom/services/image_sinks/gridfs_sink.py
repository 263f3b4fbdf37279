"""
GridFS image sink
Stores image bytes as chunked files inside MongoDB.
"""
from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from typing import AsyncIterator, Optional
import logging

from showroom.services.image_sinks.base import ImageBlob, ImageSink, StoredImage

logger = logging.getLogger(__name__)


class GridFSImageSink(ImageSink):
    """Saves uploads to a GridFS bucket and serves them through /api/images/{blob_id}."""

    name = "gridfs"

    def __init__(self, bucket=None):
        if bucket is None:
            from showroom.mongodb import get_gridfs_bucket
            bucket = get_gridfs_bucket()
        self.bucket = bucket

    @staticmethod
    def _object_id(blob_id: str) -> Optional[ObjectId]:
        try:
            return ObjectId(blob_id)
        except (InvalidId, TypeError):
            return None

    async def save(self, data: bytes, filename: str, content_type: str, metadata: Optional[dict] = None) -> StoredImage:
        file_metadata = {**(metadata or {}), "contentType": content_type}
        file_id = await self.bucket.upload_from_stream(filename, data, metadata=file_metadata)
        logger.info(f"Uploaded {filename} to GridFS: {file_id} ({len(data):,} bytes)")
        return StoredImage(blob_id=str(file_id), path=f"/api/images/{file_id}")

    async def delete(self, blob_id: str) -> bool:
        file_id = self._object_id(blob_id)
        if file_id is None:
            logger.warning(f"Invalid GridFS id {blob_id}, nothing to delete")
            return False
        try:
            await self.bucket.delete(file_id)
        except NoFile:
            logger.warning(f"GridFS file {blob_id} not found, nothing to delete")
            return False
        logger.info(f"Deleted image from GridFS: {blob_id}")
        return True

    async def open(self, blob_id: str) -> Optional[ImageBlob]:
        file_id = self._object_id(blob_id)
        if file_id is None:
            return None
        try:
            grid_out = await self.bucket.open_download_stream(file_id)
        except NoFile:
            return None

        metadata = grid_out.metadata or {}
        return ImageBlob(
            filename=grid_out.filename,
            content_type=metadata.get("contentType", "application/octet-stream"),
            length=grid_out.length,
            chunks=_stream_chunks(grid_out),
        )


async def _stream_chunks(grid_out) -> AsyncIterator[bytes]:
    while True:
        chunk = await grid_out.readchunk()
        if not chunk:
            break
        yield chunk
