"""
In-memory object store.

Reference implementation of BaseObjectStore backed by a dict. Keeps the app
and integration tests fast and deterministic, and lets the proxy run locally
without cloud credentials (PROXY_STORAGE_BACKEND=memory).
"""

import hashlib
from email.utils import formatdate
from typing import Dict, Iterator, Optional

from ..errors import ObjectNotFound
from .base import BaseObjectStore, StoredObject


class MemoryObjectStore(BaseObjectStore):
    def __init__(self, chunk_size: int = 64 * 1024):
        """
        Initialize an empty store.

        Internal schema:
            self.objects = {
                key: {"data": bytes, "headers": Dict[str, str]}
            }
        """
        self.chunk_size = chunk_size
        self.objects: Dict[str, Dict] = {}

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        **metadata: Optional[str],
    ) -> None:
        """
        Store (or replace) an object.

        Extra keyword arguments map to mirrored headers, e.g.
        `cache_control="no-store"` becomes `Cache-Control: no-store`.
        """
        headers = {
            "Content-Type": content_type,
            "Content-Length": str(len(data)),
            "ETag": f'"{hashlib.md5(data).hexdigest()}"',
            "Last-Modified": formatdate(usegmt=True),
        }
        for name, value in metadata.items():
            if value is not None:
                headers[name.replace("_", "-").title().replace("Etag", "ETag")] = value
        self.objects[key] = {"data": data, "headers": headers}

    def open_object(self, key: str) -> StoredObject:
        entry = self.objects.get(key)
        if entry is None:
            raise ObjectNotFound(f"no object {key!r}")
        return StoredObject(key=key, chunks=self._iter_chunks(entry["data"]), headers=dict(entry["headers"]))

    def _iter_chunks(self, data: bytes) -> Iterator[bytes]:
        for start in range(0, len(data), self.chunk_size):
            yield data[start:start + self.chunk_size]

    def describe(self) -> str:
        return f"memory ({len(self.objects)} objects)"
