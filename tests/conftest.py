"""
Global pytest fixtures for the GCS proxy test suite.

Responsibilities:
    - Provide settings matching the documented deployment example
      (USERPASS="mike:abc123,sam:def456")
    - Provide an isolated in-memory object store seeded with a few objects
    - Provide a fresh FastAPI TestClient built through the app factory

Why an app factory?
    `create_app(settings, store)` gives each test fresh state and lets tests
    inspect exactly which keys the store was asked for.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from gcs_proxy.config import ProxySettings
from gcs_proxy.storage.memory_storage import MemoryObjectStore

USERPASS = "mike:abc123,sam:def456"
REALM = "Sign in"


class RecordingStore(MemoryObjectStore):
    """MemoryObjectStore that remembers every key it was asked for."""

    def __init__(self, chunk_size: int = 64 * 1024):
        super().__init__(chunk_size=chunk_size)
        self.opened = []

    def open_object(self, key):
        self.opened.append(key)
        return super().open_object(key)


@pytest.fixture
def settings() -> ProxySettings:
    """Settings for the memory backend with the two demo users."""
    return ProxySettings(userpass=USERPASS, realm=REALM, storage_backend="memory")


@pytest.fixture
def store() -> RecordingStore:
    """
    Fresh in-memory store with a handful of objects.

    A small chunk size makes multi-chunk streaming visible in tests, and the
    recording wrapper lets tests assert which keys reached the store.
    """
    s = RecordingStore(chunk_size=4)
    s.put_object("file.txt", b"hello from the bucket\n", content_type="text/plain")
    s.put_object("index.html", b"<h1>index</h1>", content_type="text/html", cache_control="public, max-age=60")
    s.put_object("reports/2024 q1.csv", b"a,b\n1,2\n", content_type="text/csv",
                 content_disposition='attachment; filename="q1.csv"')
    return s


@pytest.fixture
def client(settings: ProxySettings, store: RecordingStore) -> TestClient:
    """Provide a fresh TestClient with a new app instance wired to the store fixture."""
    return TestClient(create_app(settings=settings, store=store))
