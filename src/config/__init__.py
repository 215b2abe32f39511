"""Configuration module exports (env-resolved constants only)."""

from .server import MEDIA_HOST, MEDIA_PORT
from .limits import MAX_CONCURRENT_CONNECTIONS
from .staging import MEDIA_STAGING_DIR

__all__ = [
    "MAX_CONCURRENT_CONNECTIONS",
    "MEDIA_HOST",
    "MEDIA_PORT",
    "MEDIA_STAGING_DIR",
]
