"""
Image sinks: where uploaded image bytes are stored
"""
from showroom.services.image_sinks.base import ImageBlob, ImageSink, StoredImage
from showroom.services.image_sinks.disk import DiskImageSink

__all__ = ["ImageBlob", "ImageSink", "StoredImage", "DiskImageSink"]
