"""
Credential-list parsing for the auth module.

The list arrives as one configuration string of comma separated
`username:password` entries, e.g. "mike:abc123,sam:def456". It is parsed once
at startup and never mutated afterwards.
"""

import logging
from typing import Tuple

from .schemas import Credential

log = logging.getLogger("auth")

CredentialList = Tuple[Credential, ...]


def parse_credentials(source: str) -> CredentialList:
    """
    Parse a `user1:pass1,user2:pass2` string into an ordered credential list.

    Args:
        source (str): Raw configuration value. May be empty.

    Returns:
        CredentialList: Valid pairs in configuration order.

    Notes:
        - An entry is valid only if it splits into exactly two colon separated
          fields. Anything else is dropped and can never match.
        - Values are encoded to UTF-8 bytes as-is: no trimming, no case folding.
        - An empty source yields an empty list, so every request is rejected.
    """
    if not source:
        return ()

    credentials = []
    for position, entry in enumerate(source.split(",")):
        fields = entry.split(":")
        if len(fields) != 2:
            # Never log the entry itself; it may hold a password.
            log.warning("ignoring malformed credential entry #%d (expected user:password)", position)
            continue
        username, password = fields
        credentials.append(Credential(username=username.encode("utf-8"), password=password.encode("utf-8")))

    return tuple(credentials)
