"""
Error taxonomy for the GCS proxy.

Every error a caller can see is a ProxyError carrying an HTTP status and a
short, fixed plain-text body. Backend details stay in the server log.

    ProxyError
    ├── AuthFailure          401  (AuthGate)
    ├── UnsupportedMethod    405  (Router)
    └── BackendError              (ObjectStore)
        ├── ObjectNotFound   404
        ├── AccessDenied     403
        └── BackendUnavailable 502

StartupError is separate: it is never rendered, it stops the process.
"""

from typing import Dict, Optional


class ProxyError(Exception):
    """Base class for errors rendered as plain-text HTTP responses."""

    status_code: int = 500
    body: str = "500 - Internal Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(message or self.body)
        self.headers = headers or {}


class AuthFailure(ProxyError):
    status_code = 401
    body = "Unauthorised.\n"

    def __init__(self, realm: str, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": f'Basic realm="{realm}"'})
        self.realm = realm


class UnsupportedMethod(ProxyError):
    status_code = 405
    body = "405 - Method Not Allowed"


class BackendError(ProxyError):
    """Raised by an object store; the subclass picks the status."""

    status_code = 502
    body = "502 - Bad Gateway"


class ObjectNotFound(BackendError):
    status_code = 404
    body = "404 - Not Found"


class AccessDenied(BackendError):
    status_code = 403
    body = "403 - Forbidden"


class BackendUnavailable(BackendError):
    status_code = 502
    body = "502 - Bad Gateway"


class StartupError(RuntimeError):
    """Configuration or client construction failed; the process must not serve."""
