"""Outbound side of a client connection, shared with other connections' handlers."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any

from src.config.websocket import WS_CLOSE_CLIENT_REQUEST_CODE

from .errors import safe_send_text, safe_send_bytes

logger = logging.getLogger(__name__)


class ClientChannel:
    """Serializes sends to one websocket.

    Handoff notifications are sent from the peer's handler task, so two tasks
    may write to the same socket concurrently.
    """

    def __init__(self, ws: Any, connection_id: int) -> None:
        self._ws = ws
        self.connection_id = connection_id
        self._send_lock = asyncio.Lock()

    async def send_text(self, text: str) -> bool:
        async with self._send_lock:
            ok = await safe_send_text(self._ws, text)
        if not ok:
            logger.debug("%s: dropped text message %r", self.connection_id, text)
        return ok

    async def send_bytes(self, data: bytes) -> bool:
        async with self._send_lock:
            return await safe_send_bytes(self._ws, data)

    async def close(self, *, code: int = WS_CLOSE_CLIENT_REQUEST_CODE, reason: str | None = None) -> None:
        with contextlib.suppress(Exception):
            await self._ws.close(code=code, reason=reason or "")


__all__ = ["ClientChannel"]
