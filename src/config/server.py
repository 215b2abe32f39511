"""Listener configuration (env-resolved constants only)."""

from __future__ import annotations

import os

ENV_MEDIA_HOST = "MEDIA_HOST"
ENV_MEDIA_PORT = "MEDIA_PORT"

DEFAULT_MEDIA_HOST = "0.0.0.0"
DEFAULT_MEDIA_PORT = 8080

_MAX_PORT = 65535


def parse_port(raw: str | None, default: int = DEFAULT_MEDIA_PORT) -> int:
    """Return ``raw`` as a TCP port, or ``default`` when it is missing or invalid."""
    value = (raw or "").strip()
    if not value:
        return default
    try:
        port = int(value)
    except ValueError:
        return default
    if port <= 0 or port > _MAX_PORT:
        return default
    return port


MEDIA_HOST = (os.getenv(ENV_MEDIA_HOST) or "").strip() or DEFAULT_MEDIA_HOST
MEDIA_PORT = parse_port(os.getenv(ENV_MEDIA_PORT))

__all__ = [
    "ENV_MEDIA_HOST",
    "ENV_MEDIA_PORT",
    "DEFAULT_MEDIA_HOST",
    "DEFAULT_MEDIA_PORT",
    "MEDIA_HOST",
    "MEDIA_PORT",
    "parse_port",
]
