"""Send helpers that never raise into the message loop."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocketDisconnect

logger = logging.getLogger(__name__)


async def safe_send_text(ws: Any, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_bytes(ws: Any, data: bytes) -> bool:
    try:
        await ws.send_bytes(data)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket binary send failed", exc_info=True)
        return False
    return True


async def reject_connection(ws: Any, *, message: str, close_code: int) -> None:
    # Accept so we can send a readable error, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await safe_send_text(ws, f"error: {message}")
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = ["reject_connection", "safe_send_bytes", "safe_send_text"]
