"""
Storage factory – switch object-store backend from settings
===========================================================

Centralizes selection of the object-store backend (GCS vs in-memory) so the
rest of the app stays ignorant of where bytes live.

- Takes every value from its arguments; `create_app` passes them from
  `ProxySettings`, which is the only place the environment is read.
- Imports the GCS backend **only if** it is selected, so tests and local runs
  never touch google-cloud-storage or credentials.
- Any failure to build the store is a StartupError: the process must not
  serve in a broken state.
"""

import logging

from gcs_proxy.config import DEFAULT_CHUNK_SIZE
from gcs_proxy.errors import StartupError
from gcs_proxy.storage.memory_storage import MemoryObjectStore

log = logging.getLogger("gcs_proxy.storage")


def get_storage(backend: str, **kwargs):
    """
    Return a BaseObjectStore-compatible object for the named backend.

    Parameters
    ----------
    backend : str
        "gcs" or "memory" (settings.storage_backend).
    kwargs : dict
        Extra args for the backend: bucket_name, client, chunk_size.

    Raises
    ------
    StartupError
        Unknown backend, missing bucket name, or the storage client could not
        be constructed.
    """
    chunk_size = kwargs.get("chunk_size", DEFAULT_CHUNK_SIZE)
    be = (backend or "").strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return MemoryObjectStore(chunk_size=chunk_size)

    if be == "gcs":
        bucket_name = kwargs.get("bucket_name") or ""
        if not bucket_name:
            raise StartupError("BUCKET_NAME is required for the gcs backend")
        # Local import to avoid loading google-cloud-storage when not used
        from gcs_proxy.storage.gcs_storage import GCSObjectStore

        try:
            return GCSObjectStore(
                bucket_name=bucket_name,
                client=kwargs.get("client"),
                chunk_size=chunk_size,
            )
        except Exception as exc:
            raise StartupError(f"cannot construct storage client: {exc}") from exc

    raise StartupError(f"Unknown storage backend: {be!r}")
