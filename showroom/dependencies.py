"""
Dependency wiring for the FastAPI app.
Backends are chosen from settings and kept as process-wide singletons.
"""
from typing import Optional

from showroom.config import settings
from showroom.services.image_sinks import DiskImageSink, ImageSink
from showroom.services.storage import MemoryStorage, Storage

STORAGE_BACKENDS = ("memory", "sql", "mongo")
IMAGE_SINKS = ("disk", "gridfs", "cloudinary")

_storage: Optional[Storage] = None
_image_sink: Optional[ImageSink] = None


def build_storage(backend: str) -> Storage:
    if backend == "memory":
        return MemoryStorage()
    if backend == "sql":
        from showroom.services.storage.sql import SqlStorage
        return SqlStorage()
    if backend == "mongo":
        from showroom.services.storage.mongo import MongoStorage
        return MongoStorage()
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}', expected one of {STORAGE_BACKENDS}")


def build_image_sink(sink: str) -> ImageSink:
    if sink == "disk":
        return DiskImageSink(settings.UPLOAD_DIR)
    if sink == "gridfs":
        from showroom.services.image_sinks.gridfs_sink import GridFSImageSink
        return GridFSImageSink()
    if sink == "cloudinary":
        from showroom.services.image_sinks.cloudinary_provider import CloudinaryImageSink
        return CloudinaryImageSink(folder=settings.CLOUDINARY_FOLDER)
    raise ValueError(f"Unknown IMAGE_SINK '{sink}', expected one of {IMAGE_SINKS}")


def get_storage() -> Storage:
    """Return the singleton storage backend so state persists across requests."""
    global _storage
    if _storage is None:
        _storage = build_storage(settings.STORAGE_BACKEND)
    return _storage


def get_image_sink() -> ImageSink:
    """Return the singleton image sink for this deployment."""
    global _image_sink
    if _image_sink is None:
        _image_sink = build_image_sink(settings.IMAGE_SINK)
    return _image_sink
