"""Handlers for top-level verbs, honoured only while a connection is in command mode."""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from src.state import RuntimeDeps, SessionState
from src.capture.parser import Command, CommandKind

from .channel import ClientChannel

HandlerFn = Callable[[ClientChannel, RuntimeDeps, SessionState, Command], Awaitable[None]]


async def _handle_export(
    channel: ClientChannel,
    runtime_deps: RuntimeDeps,
    session: SessionState,
    _command: Command,
) -> None:
    session.exporting = True
    try:
        await runtime_deps.exporter.run(session.connection_id, channel)
    finally:
        session.exporting = False


async def _handle_give_audio(
    channel: ClientChannel,
    runtime_deps: RuntimeDeps,
    session: SessionState,
    command: Command,
) -> None:
    if command.peer_id is None:
        return
    cid = session.connection_id
    await channel.send_text(f"{cid}: gives audio to {command.peer_id}")
    await runtime_deps.handoffs.give(cid, command.peer_id)


async def _handle_accept_audio(
    channel: ClientChannel,
    runtime_deps: RuntimeDeps,
    session: SessionState,
    command: Command,
) -> None:
    if command.peer_id is None:
        return
    cid = session.connection_id
    await channel.send_text(f"{cid}: accepts audio from {command.peer_id}")
    await runtime_deps.handoffs.accept(cid, command.peer_id)


HANDLERS: dict[CommandKind, HandlerFn] = {
    CommandKind.EXPORT: _handle_export,
    CommandKind.GIVE_AUDIO: _handle_give_audio,
    CommandKind.ACCEPT_AUDIO: _handle_accept_audio,
}

__all__ = ["HANDLERS", "HandlerFn"]
