"""HTTP middleware: Basic Auth gate for every request.

Pure ASGI middleware (not BaseHTTPMiddleware), so streamed object bodies pass
through untouched and the gate runs before routing for every method and path.
"""

import logging

from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from gcs_proxy.errors import AuthFailure

from .config import CredentialList
from .service import authenticate
from .utils import extract_credentials

log = logging.getLogger("auth")


class BasicAuthMiddleware:
    """Reject with 401 unless the request carries a configured username/password pair."""

    def __init__(self, app: ASGIApp, credentials: CredentialList, realm: str) -> None:
        self.app = app
        self.credentials = credentials
        self.realm = realm

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        incoming = extract_credentials(request.headers.get("authorization"))

        if authenticate(incoming, self.credentials):
            request.state.username = incoming.username.decode("utf-8", errors="replace")
            await self.app(scope, receive, send)
            return

        if incoming.present:
            log.warning("auth failed: username=%r path=%s", incoming.username, request.url.path)
        else:
            log.info("auth missing or malformed: method=%s path=%s", request.method, request.url.path)

        failure = AuthFailure(self.realm)
        response = PlainTextResponse(failure.body, status_code=failure.status_code, headers=failure.headers)
        await response(scope, receive, send)
