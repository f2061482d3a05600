"""
gcs_proxy package initializer.

Basic-Auth protected HTTP proxy in front of a Google Cloud Storage bucket.
"""

from .config import ProxySettings, load_settings
from .router import ProxyRouter

__all__ = ["ProxySettings", "load_settings", "ProxyRouter"]
