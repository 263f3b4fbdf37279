"""
Storage backends
"""
from showroom.services.storage.base import Storage
from showroom.services.storage.memory import MemoryStorage

__all__ = ["Storage", "MemoryStorage"]
