"""
Object-store backends for the GCS proxy.
"""

from .base import BaseObjectStore, StoredObject
from .memory_storage import MemoryObjectStore
from .storage_factory import get_storage

__all__ = ["BaseObjectStore", "StoredObject", "MemoryObjectStore", "get_storage"]
