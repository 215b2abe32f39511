"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib
from typing import Any

from src.state import RuntimeDeps, SessionState
from src.state.errors import StorageError
from src.capture.machine import ConnectionStateMachine
from src.handlers.registry import RegisteredConnection
from src.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_BUSY_REASON,
    WS_CLOSE_INTERNAL_ERROR_CODE,
    WS_CLOSE_STAGING_UNAVAILABLE_REASON,
)

from .channel import ClientChannel
from .errors import reject_connection
from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def _release(connection_id: int, runtime_deps: RuntimeDeps) -> None:
    runtime_deps.handoffs.drop_connection(connection_id)
    await runtime_deps.registry.release(connection_id)
    try:
        await runtime_deps.staging.remove(connection_id)
    except StorageError as exc:
        logger.warning("%s: %s", connection_id, exc)
    else:
        logger.info("%s: deleted %s/", connection_id, runtime_deps.staging.path_for(connection_id))


async def _open_session(ws: Any, session: SessionState, runtime_deps: RuntimeDeps) -> RegisteredConnection | None:
    connection_id = session.connection_id
    await ws.accept()
    channel = ClientChannel(ws, connection_id)
    try:
        folder = await runtime_deps.staging.create(connection_id)
    except StorageError as exc:
        logger.error("%s: cannot create staging area: %s", connection_id, exc)
        await channel.close(code=WS_CLOSE_INTERNAL_ERROR_CODE, reason=WS_CLOSE_STAGING_UNAVAILABLE_REASON)
        return None

    entry = RegisteredConnection(
        connection_id=connection_id,
        channel=channel,
        machine=ConnectionStateMachine(connection_id, runtime_deps.staging),
        session=session,
    )
    runtime_deps.registry.publish(entry)
    logger.info(
        "Connected client %s with folder %s, mode: %s. Active: %s",
        connection_id,
        folder,
        entry.mode().value,
        runtime_deps.registry.get_connection_count(),
    )
    return entry


async def handle_websocket_connection(ws: Any, runtime_deps: RuntimeDeps) -> None:
    connection_id = await runtime_deps.registry.admit()
    if connection_id is None:
        await reject_connection(ws, message=WS_CLOSE_BUSY_REASON, close_code=WS_CLOSE_BUSY_CODE)
        return

    lifecycle: WebSocketLifecycle | None = None
    try:
        session = SessionState(connection_id=connection_id)
        entry = await _open_session(ws, session, runtime_deps)
        if entry is None:
            return

        ws_settings = runtime_deps.settings.websocket
        lifecycle = WebSocketLifecycle(
            ws,
            connection_id=connection_id,
            is_busy_fn=lambda: session.exporting,
            idle_timeout_s=ws_settings.idle_timeout_s,
            watchdog_tick_s=ws_settings.watchdog_tick_s,
            max_connection_duration_s=ws_settings.max_connection_duration_s,
        )
        lifecycle.start()

        await entry.channel.send_text(str(connection_id))
        await run_message_loop(ws, entry.channel, entry.machine, session, lifecycle, runtime_deps)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()
        await _release(connection_id, runtime_deps)
        logger.info(
            "%s: connection closed. Active: %s", connection_id, runtime_deps.registry.get_connection_count()
        )


__all__ = ["handle_websocket_connection"]
