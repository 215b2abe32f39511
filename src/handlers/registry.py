"""Process-wide registry of live connections.

Connection ids come from a single counter that starts at 0 and is never
rewound, so an id is never reused while the process runs. Admission is capped;
a rejected connection does not consume an id.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.state.session import SessionState
    from src.capture.modes import Mode, ModeConfig
    from src.capture.machine import ConnectionStateMachine

    from .websocket.channel import ClientChannel


@dataclass(slots=True)
class RegisteredConnection:
    connection_id: int
    channel: ClientChannel
    machine: ConnectionStateMachine
    session: SessionState | None = None

    def mode(self) -> Mode:
        return self.machine.mode

    def config(self) -> ModeConfig:
        return self.machine.config

    def as_dict(self) -> dict[str, object]:
        row: dict[str, object] = {"connection_id": self.connection_id, "mode": self.mode().value}
        if self.session is not None:
            row["exporting"] = self.session.exporting
            row["messages_received"] = self.session.messages_received
            row["bytes_received"] = self.session.bytes_received
        return row


class ConnectionRegistry:
    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._ids = itertools.count()
        self._admitted: set[int] = set()
        self._entries: dict[int, RegisteredConnection] = {}

    async def admit(self) -> int | None:
        """Reserve a slot and return the new connection id, or None at capacity."""
        async with self._lock:
            if len(self._admitted) >= self._max:
                return None
            connection_id = next(self._ids)
            self._admitted.add(connection_id)
            return connection_id

    def publish(self, entry: RegisteredConnection) -> None:
        if entry.connection_id not in self._admitted:
            raise KeyError(f"connection {entry.connection_id} was not admitted")
        self._entries[entry.connection_id] = entry

    async def release(self, connection_id: int) -> None:
        async with self._lock:
            self._admitted.discard(connection_id)
            self._entries.pop(connection_id, None)

    def get(self, connection_id: int) -> RegisteredConnection | None:
        return self._entries.get(connection_id)

    def connection_ids(self) -> list[int]:
        return sorted(self._entries)

    def snapshot(self) -> list[dict[str, object]]:
        return [self._entries[cid].as_dict() for cid in sorted(self._entries)]

    def get_connection_count(self) -> int:
        return len(self._admitted)


__all__ = ["ConnectionRegistry", "RegisteredConnection"]
