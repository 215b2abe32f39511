"""Admission control and handoff bookkeeping limits (env-resolved constants only)."""

from __future__ import annotations

import os

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
ENV_HANDOFF_PENDING_TTL_S = "HANDOFF_PENDING_TTL_S"

DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100
DEFAULT_HANDOFF_PENDING_TTL_S = 0.0

_DISABLED_VALUES = {"0", "none", "null", "disabled", "disable", "off"}

_MAX_CONCURRENT_CONNECTIONS_RAW = (os.getenv(ENV_MAX_CONCURRENT_CONNECTIONS) or "").strip()
try:
    MAX_CONCURRENT_CONNECTIONS: int = (
        int(_MAX_CONCURRENT_CONNECTIONS_RAW)
        if _MAX_CONCURRENT_CONNECTIONS_RAW
        else DEFAULT_MAX_CONCURRENT_CONNECTIONS
    )
except Exception:
    MAX_CONCURRENT_CONNECTIONS = DEFAULT_MAX_CONCURRENT_CONNECTIONS
MAX_CONCURRENT_CONNECTIONS = max(1, int(MAX_CONCURRENT_CONNECTIONS))

# Consents waiting for their counterpart are dropped after this many seconds.
_HANDOFF_PENDING_TTL_S_RAW = (os.getenv(ENV_HANDOFF_PENDING_TTL_S) or "").strip()
if _HANDOFF_PENDING_TTL_S_RAW.lower() in _DISABLED_VALUES:
    HANDOFF_PENDING_TTL_S: float = 0.0
else:
    try:
        HANDOFF_PENDING_TTL_S = (
            float(_HANDOFF_PENDING_TTL_S_RAW) if _HANDOFF_PENDING_TTL_S_RAW else DEFAULT_HANDOFF_PENDING_TTL_S
        )
    except Exception:
        HANDOFF_PENDING_TTL_S = DEFAULT_HANDOFF_PENDING_TTL_S
    if HANDOFF_PENDING_TTL_S < 0:
        HANDOFF_PENDING_TTL_S = 0.0

__all__ = [
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_HANDOFF_PENDING_TTL_S",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_HANDOFF_PENDING_TTL_S",
    "MAX_CONCURRENT_CONNECTIONS",
    "HANDOFF_PENDING_TTL_S",
]
