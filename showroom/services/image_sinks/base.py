"""
Abstract base class for image sinks
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Iterator, Optional, Union


@dataclass
class StoredImage:
    """Where an uploaded image ended up."""
    blob_id: str
    path: str


@dataclass
class ImageBlob:
    """A stored image opened for streaming back to a client."""
    filename: str
    content_type: str
    length: int
    chunks: Union[Iterator[bytes], AsyncIterator[bytes]]


class ImageSink(ABC):
    """Abstract interface for the storage target holding uploaded image bytes"""

    name: str = "base"

    @abstractmethod
    async def save(self, data: bytes, filename: str, content_type: str, metadata: Optional[dict] = None) -> StoredImage:
        """
        Persist image bytes.

        Args:
            data: Image bytes
            filename: Original filename from the upload
            content_type: Validated MIME type
            metadata: Optional metadata (owning record type, category)

        Returns:
            StoredImage with the sink-specific blob id and the path/URL to store on the record

        Raises:
            Exception: If the bytes could not be stored
        """
        pass

    @abstractmethod
    async def delete(self, blob_id: str) -> bool:
        """
        Delete a stored image.

        Returns:
            True if the blob was removed, False if it did not exist
        """
        pass

    def blob_id_for(self, image_path: str, blob_id: Optional[str]) -> Optional[str]:
        """Identify the blob backing a record, or None if the sink does not hold it."""
        return blob_id or None

    async def open(self, blob_id: str) -> Optional[ImageBlob]:
        """
        Open a stored image for streaming.
        Sinks that hand out external URLs return None.
        """
        return None
