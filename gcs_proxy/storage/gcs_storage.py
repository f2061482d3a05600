"""
GCSObjectStore – Google Cloud Storage backend for the proxy
===========================================================

Implements `BaseObjectStore` on top of `google-cloud-storage`, so the router can
stream bucket objects without knowing where bytes come from.

Key Design Points
-----------------
- **Two-step read**: `bucket.get_blob(key)` fetches metadata (headers are known
  before the first byte is sent), then `blob.open("rb")` streams the body in
  `chunk_size` pieces.
- **Raw bytes**: objects stored with `Content-Encoding: gzip` are streamed as
  stored (`raw_download=True`) so the mirrored `Content-Encoding` and
  `Content-Length` stay truthful.
- **Error mapping**: the store owns the mapping of backend failures to HTTP
  errors. Missing object -> 404, permission failure -> 403, anything else the
  client library raises -> 502.
- **Cancellation**: the chunk generator closes its reader in `finally`, which
  runs when Starlette stops iterating on client disconnect.

Example
-------
>>> store = GCSObjectStore(bucket_name="my-bucket")
>>> obj = store.open_object("reports/2024.csv")
>>> obj.headers["Content-Type"]
'text/csv'
"""

import logging
from email.utils import formatdate
from typing import Dict, Iterator, Optional

from google.api_core.exceptions import Forbidden, GoogleAPICallError, NotFound, RetryError, Unauthorized
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from ..config import DEFAULT_CHUNK_SIZE
from ..errors import AccessDenied, BackendUnavailable, ObjectNotFound
from .base import BaseObjectStore, StoredObject

log = logging.getLogger("gcs_proxy.storage")


class GCSObjectStore(BaseObjectStore):
    """Google Cloud Storage implementation of the object-store contract.

    Parameters
    ----------
    bucket_name : str
        Bucket every key is resolved against.
    client : google.cloud.storage.Client, optional
        Pre-built client. When omitted, one is created from Application
        Default Credentials.
    chunk_size : int
        Bytes per streamed chunk.
    """

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.bucket_name = bucket_name
        self.client = client if client is not None else storage.Client()
        self.bucket = self.client.bucket(bucket_name)
        self.chunk_size = chunk_size

    # ---- Contract methods -------------------------------------------------

    def open_object(self, key: str) -> StoredObject:
        """Look up `key` and return a StoredObject whose chunks stream lazily."""
        try:
            blob = self.bucket.get_blob(key)
        except (Forbidden, Unauthorized) as exc:
            log.warning("access denied reading gs://%s/%s: %s", self.bucket_name, key, exc)
            raise AccessDenied(str(exc)) from exc
        except NotFound as exc:
            # get_blob already maps a missing object to None; this is a missing bucket.
            log.warning("not found reading gs://%s/%s: %s", self.bucket_name, key, exc)
            raise ObjectNotFound(str(exc)) from exc
        except (GoogleAPICallError, RetryError, GoogleAuthError) as exc:
            log.error("backend failure reading gs://%s/%s: %s", self.bucket_name, key, exc)
            raise BackendUnavailable(str(exc)) from exc

        if blob is None:
            raise ObjectNotFound(f"gs://{self.bucket_name}/{key} does not exist")

        return StoredObject(key=key, chunks=self._iter_chunks(blob), headers=self._headers_for(blob))

    def describe(self) -> str:
        return f"gcs (gs://{self.bucket_name})"

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _headers_for(blob) -> Dict[str, str]:
        """Mirror blob metadata onto response headers, skipping unset fields."""
        headers = {"Content-Type": blob.content_type or "application/octet-stream"}
        if blob.size is not None:
            headers["Content-Length"] = str(blob.size)
        for name, value in (
            ("Content-Encoding", blob.content_encoding),
            ("Content-Language", blob.content_language),
            ("Content-Disposition", blob.content_disposition),
            ("Cache-Control", blob.cache_control),
        ):
            if value:
                headers[name] = value
        if blob.etag:
            headers["ETag"] = blob.etag if blob.etag.startswith('"') else f'"{blob.etag}"'
        if blob.updated is not None:
            headers["Last-Modified"] = formatdate(blob.updated.timestamp(), usegmt=True)
        return headers

    def _iter_chunks(self, blob) -> Iterator[bytes]:
        reader = blob.open("rb", chunk_size=self.chunk_size, raw_download=True)
        try:
            while True:
                chunk = reader.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk
        except (GoogleAPICallError, RetryError, GoogleAuthError) as exc:
            # Headers are already on the wire; the connection is cut short.
            log.error("stream of gs://%s/%s aborted: %s", self.bucket_name, blob.name, exc)
            raise BackendUnavailable(str(exc)) from exc
        finally:
            reader.close()
