"""
Pydantic schemas for credentials handled by the auth module.
"""

from pydantic import BaseModel, ConfigDict


class Credential(BaseModel):
    """One configured username/password pair, kept as opaque bytes."""
    model_config = ConfigDict(frozen=True)

    username: bytes
    password: bytes

    def __repr__(self) -> str:
        return f"Credential(username={self.username!r}, password=<redacted>)"


class IncomingCredential(BaseModel):
    """Credentials supplied on a request; `present` is False when the header is missing or malformed."""
    model_config = ConfigDict(frozen=True)

    username: bytes = b""
    password: bytes = b""
    present: bool = False

    def __repr__(self) -> str:
        return f"IncomingCredential(username={self.username!r}, present={self.present})"
