"""
Method router for authenticated requests.

Runs after the Basic Auth gate. GET is forwarded to the object store; every
other method is answered with 405 without touching the store.
"""

import logging
from typing import Callable, Dict

from fastapi.responses import StreamingResponse
from starlette.responses import Response

from .errors import UnsupportedMethod
from .storage.base import BaseObjectStore

log = logging.getLogger("gcs_proxy")


class ProxyRouter:
    """Dispatch a request method and path through an explicit method -> handler table."""

    def __init__(self, store: BaseObjectStore, index_object: str = "index.html"):
        self.store = store
        self.index_object = index_object
        self.handlers: Dict[str, Callable[[str], Response]] = {
            "GET": self.get_object,
        }

    @property
    def allowed_methods(self) -> str:
        return ", ".join(self.handlers)

    def dispatch(self, method: str, path: str) -> Response:
        """
        Route one request.

        Args:
            method (str): HTTP method, matched exactly (methods are case-sensitive).
            path (str): Request path, with or without its leading "/".

        Raises:
            UnsupportedMethod: For anything but GET.
            BackendError: Propagated from the store on GET.
        """
        handler = self.handlers.get(method)
        if handler is None:
            raise UnsupportedMethod(f"{method} is not supported", headers={"Allow": self.allowed_methods})
        return handler(path)

    def object_key(self, path: str) -> str:
        """Map a request path to an object key; "/" maps to the index object."""
        key = path[1:] if path.startswith("/") else path
        return key or self.index_object

    def get_object(self, path: str) -> Response:
        key = self.object_key(path)
        obj = self.store.open_object(key)
        log.debug("streaming %s (%s)", key, obj.headers.get("Content-Length", "unknown length"))
        return StreamingResponse(obj.chunks, status_code=200, media_type=obj.media_type, headers=obj.headers)
