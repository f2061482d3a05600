"""
Runtime configuration for the GCS proxy
=======================================

Reads environment variables (only here) into a `ProxySettings` object that is
built once at startup and handed to `create_app`. Nothing else in the codebase
reads the environment; import from this module instead.

Deployment contract
-------------------
- BUCKET_NAME           : bucket to serve (required for the "gcs" backend)
- USERPASS              : comma separated "user:pass" list, e.g. "mike:abc123,sam:def456"
- PORT                  : listen port; default 8080 (a warning is logged when defaulted)
- AUTH_REALM            : realm shown in the Basic Auth challenge; default "Sign in"

Proxy knobs
-----------
- PROXY_STORAGE_BACKEND : "gcs" (default) or "memory"
- PROXY_INDEX_OBJECT    : key served for "/" (default "index.html")
- PROXY_CHUNK_SIZE      : bytes per streamed chunk; default 256 KiB, clamped to [1 KiB, 16 MiB]
- LOG_LEVEL             : root logging level (default "INFO")
"""

import logging
import os
from typing import Mapping, Optional

from .errors import StartupError

log = logging.getLogger("gcs_proxy")

DEFAULT_PORT = 8080
DEFAULT_REALM = "Sign in"
DEFAULT_CHUNK_SIZE = 256 * 1024


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


class ProxySettings:
    """Immutable-by-convention bag of startup configuration."""

    def __init__(
        self,
        bucket_name: str = "",
        userpass: str = "",
        port: int = DEFAULT_PORT,
        realm: str = DEFAULT_REALM,
        storage_backend: str = "gcs",
        index_object: str = "index.html",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        log_level: str = "INFO",
        port_defaulted: bool = False,
    ) -> None:
        if '"' in realm:
            raise StartupError("AUTH_REALM must not contain double quotes")
        self.bucket_name = bucket_name
        self.userpass = userpass
        self.port = port
        self.realm = realm
        self.storage_backend = storage_backend
        self.index_object = index_object
        self.chunk_size = max(1024, min(16 * 1024 * 1024, chunk_size))
        self.log_level = log_level
        self.port_defaulted = port_defaulted

    def __repr__(self) -> str:
        # USERPASS stays out of reprs and logs
        return (
            f"ProxySettings(bucket_name={self.bucket_name!r}, port={self.port}, "
            f"realm={self.realm!r}, storage_backend={self.storage_backend!r})"
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ProxySettings:
    """
    Build settings from the environment.

    Args:
        environ: Mapping to read instead of `os.environ` (tests pass a dict).

    Returns:
        ProxySettings: Fully resolved configuration.

    Raises:
        StartupError: If AUTH_REALM contains a double quote.
    """
    env = os.environ if environ is None else environ

    port_raw = env.get("PORT", "")
    port = DEFAULT_PORT
    port_defaulted = True
    if port_raw == "":
        log.warning("defaulting to port %s", port)
    else:
        try:
            port = int(port_raw)
            port_defaulted = False
        except ValueError:
            log.warning("invalid PORT %r, defaulting to port %s", port_raw, port)

    return ProxySettings(
        bucket_name=env.get("BUCKET_NAME", ""),
        userpass=env.get("USERPASS", ""),
        port=port,
        realm=env.get("AUTH_REALM", DEFAULT_REALM),
        storage_backend=env.get("PROXY_STORAGE_BACKEND", "gcs").strip().lower(),
        index_object=env.get("PROXY_INDEX_OBJECT", "index.html"),
        chunk_size=_get_int(env, "PROXY_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        port_defaulted=port_defaulted,
    )
