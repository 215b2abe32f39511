"""WebSocket protocol configuration and constants."""

from __future__ import annotations

import os

ENV_WS_ENDPOINT_PATH = "WS_ENDPOINT_PATH"
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_ENDPOINT_PATH = "/"
DEFAULT_WS_IDLE_TIMEOUT_S = 600.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 0.0


def _get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        return float(raw)
    except Exception:
        return float(default)


WS_ENDPOINT_PATH = (os.getenv(ENV_WS_ENDPOINT_PATH) or "").strip() or DEFAULT_WS_ENDPOINT_PATH

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_MAX_DURATION_CODE = 4003
WS_CLOSE_INTERNAL_ERROR_CODE = 1011

WS_CLOSE_BUSY_REASON = "server at capacity"
WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"
WS_CLOSE_STAGING_UNAVAILABLE_REASON = "staging unavailable"

# Idle watchdog (0 disables the corresponding check)
WS_IDLE_TIMEOUT_S = max(0.0, _get_float(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S))
WS_WATCHDOG_TICK_S = _get_float(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)
if WS_WATCHDOG_TICK_S <= 0:
    WS_WATCHDOG_TICK_S = DEFAULT_WS_WATCHDOG_TICK_S
WS_MAX_CONNECTION_DURATION_S = max(
    0.0, _get_float(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S)
)

__all__ = [
    "ENV_WS_ENDPOINT_PATH",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_ENDPOINT_PATH",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
    "WS_ENDPOINT_PATH",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_BUSY_REASON",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_CLOSE_STAGING_UNAVAILABLE_REASON",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_MAX_CONNECTION_DURATION_S",
]
