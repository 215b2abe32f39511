"""WebSocket message loop: text commands and binary frames for one connection."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocketDisconnect

from src.capture.modes import Mode
from src.state import RuntimeDeps, SessionState
from src.capture.parser import CommandKind, parse_command
from src.state.errors import CommandError, StorageError
from src.capture.machine import ConnectionStateMachine

from .dispatch import HANDLERS
from .channel import ClientChannel
from .lifecycle import WebSocketLifecycle

logger = logging.getLogger(__name__)

_DISCONNECT = "websocket.disconnect"


async def _recv_with_watchdog(ws: Any, lifecycle: WebSocketLifecycle) -> tuple[dict[str, Any] | None, bool]:
    try:
        message = await asyncio.wait_for(ws.receive(), timeout=lifecycle.watchdog_tick_s * 2)
        return message, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def handle_text(
    text: str,
    *,
    channel: ClientChannel,
    machine: ConnectionStateMachine,
    session: SessionState,
    runtime_deps: RuntimeDeps,
) -> None:
    cid = session.connection_id
    logger.info("%s: %s", cid, text)
    try:
        command = parse_command(text)
    except CommandError as exc:
        logger.info("%s: ignored command: %s", cid, exc)
        return

    if command.kind in (CommandKind.BEGIN, CommandKind.END):
        if machine.apply(command):
            await channel.send_text(f"mode: {machine.mode.value}")
        return

    if machine.mode is not Mode.COMMAND:
        logger.info("%s: ignored '%s' while in %s mode", cid, command.kind.value, machine.mode.value)
        return

    handler = HANDLERS.get(command.kind)
    if handler is not None:
        await handler(channel, runtime_deps, session, command)


async def handle_binary(data: bytes, *, machine: ConnectionStateMachine, session: SessionState) -> None:
    session.bytes_received += len(data)
    await machine.feed(data)


async def run_message_loop(
    ws: Any,
    channel: ClientChannel,
    machine: ConnectionStateMachine,
    session: SessionState,
    lifecycle: WebSocketLifecycle,
    runtime_deps: RuntimeDeps,
) -> None:
    cid = session.connection_id
    try:
        while True:
            message, should_exit = await _recv_with_watchdog(ws, lifecycle)
            if should_exit:
                return
            if message is None:
                continue
            if message.get("type") == _DISCONNECT:
                logger.info("%s: closed connection: %s", cid, message.get("code"))
                return

            lifecycle.touch()
            session.messages_received += 1
            data = message.get("bytes")
            text = message.get("text")
            try:
                if data is not None:
                    await handle_binary(data, machine=machine, session=session)
                elif text is not None:
                    await handle_text(
                        text, channel=channel, machine=machine, session=session, runtime_deps=runtime_deps
                    )
            except StorageError as exc:
                logger.error("%s: storage error: %s", cid, exc)
                await channel.send_text(f"storage error: {exc.operation} failed")
    except WebSocketDisconnect:
        logger.info("%s: closed connection", cid)


__all__ = ["handle_binary", "handle_text", "run_message_loop"]
