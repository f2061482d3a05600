"""
Utility functions for the auth module.
"""

import base64
import binascii
from typing import Optional

from fastapi.security.utils import get_authorization_scheme_param

from .schemas import IncomingCredential

MISSING = IncomingCredential()


def extract_credentials(authorization: Optional[str]) -> IncomingCredential:
    """
    Decode an `Authorization: Basic <base64(user:pass)>` header value.

    Returns `MISSING` (present=False) when the header is absent, uses another
    scheme, is not valid base64, or has no ':' in the decoded payload. The
    username is everything before the first ':'; the password may contain ':'.
    """
    scheme, param = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "basic" or not param:
        return MISSING
    try:
        decoded = base64.b64decode(param, validate=True)
    except (binascii.Error, ValueError):
        return MISSING
    username, separator, password = decoded.partition(b":")
    if not separator:
        return MISSING
    return IncomingCredential(username=username, password=password, present=True)
