"""
Base object-store interface for the GCS proxy.

Purpose:
    Define the narrow contract the router relies on, so the GCS backend and the
    in-memory backend used in tests are interchangeable.

Testing & Coverage:
    Abstract methods are not executed directly in tests and are marked
    `# pragma: no cover`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterator


@dataclass
class StoredObject:
    """An opened object: its key, a lazy byte-chunk iterator and response headers."""

    key: str
    chunks: Iterator[bytes]
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def media_type(self) -> str:
        return self.headers.get("Content-Type", "application/octet-stream")


class BaseObjectStore(ABC):
    """Abstract base class for object-store backends."""

    @abstractmethod  # pragma: no cover
    def open_object(self, key: str) -> StoredObject:
        """
        Resolve a key to an object and open it for streaming.

        Returns:
            StoredObject: Headers are known up front; bytes are read lazily.

        Raises:
            ObjectNotFound: No object under this key.
            AccessDenied: The backend refused the read.
            BackendUnavailable: Any other backend failure.
        """
        raise NotImplementedError

    def describe(self) -> str:
        """Short human label used in startup logs."""
        return type(self).__name__
