"""Per-connection session flags shared between the message loop and watchdog."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SessionState:
    connection_id: int
    exporting: bool = False
    messages_received: int = 0
    bytes_received: int = 0


__all__ = ["SessionState"]
