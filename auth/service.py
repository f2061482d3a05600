"""
Core authentication logic.

Matches request credentials against the configured credential list using
fixed-time comparisons, so response latency does not reveal how much of a
username or password was correct.
"""

import secrets

from .config import CredentialList
from .schemas import IncomingCredential


def authenticate(incoming: IncomingCredential, credentials: CredentialList) -> bool:
    """
    Decide whether the supplied credentials match any configured pair.

    Args:
        incoming (IncomingCredential): Credentials extracted from the request.
        credentials (CredentialList): Configured pairs, in order.

    Returns:
        bool: True if some pair matches on both username and password.

    Notes:
        - A missing or malformed header fails before any comparison.
        - Username and password are compared separately with
          `secrets.compare_digest`; both comparisons always run for each pair.
        - The first matching pair ends the scan.
    """
    if not incoming.present:
        return False

    for credential in credentials:
        username_ok = secrets.compare_digest(incoming.username, credential.username)
        password_ok = secrets.compare_digest(incoming.password, credential.password)
        if username_ok & password_ok:
            return True
    return False
