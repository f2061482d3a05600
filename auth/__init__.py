"""
Auth package for the GCS proxy.

HTTP Basic Auth against a flat, admin-configured list of username/password
pairs. Parsing lives in `config`, header extraction in `utils`, fixed-time
matching in `service`, and the request gate in `middleware`.
"""

from .config import parse_credentials
from .middleware import BasicAuthMiddleware
from .service import authenticate

__all__ = ["parse_credentials", "BasicAuthMiddleware", "authenticate"]
