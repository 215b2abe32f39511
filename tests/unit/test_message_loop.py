from __future__ import annotations

from pathlib import Path

import pytest

from src.state import SessionState
from src.errors import StorageError
from src.staging.area import StagingArea
from src.runtime.dependencies import build_runtime_deps
from src.config.websocket import WS_CLOSE_INTERNAL_ERROR_CODE
from src.capture.machine import ConnectionStateMachine
from src.handlers.websocket.channel import ClientChannel
from src.handlers.websocket.lifecycle import WebSocketLifecycle
from src.handlers.registry import RegisteredConnection
from src.handlers.websocket.manager import handle_websocket_connection
from src.handlers.websocket.message_loop import handle_text, run_message_loop


@pytest.mark.asyncio
async def test_full_capture_and_export_session(app_settings, fake_ws_factory, fake_transcoder) -> None:
    deps = await build_runtime_deps(app_settings, transcoder=fake_transcoder)
    ws = fake_ws_factory()
    ws.push_text("begin captureimageframes")
    for i in range(3):
        ws.push_bytes(f"frame-{i}".encode())
    ws.push_text("end")
    ws.push_text("begin audioupload")
    ws.push_bytes(b"RIFF")
    ws.push_text("end")
    ws.push_text("export")
    ws.push_disconnect()

    await handle_websocket_connection(ws, deps)

    assert ws.accepted
    assert ws.texts == [
        "0",
        "mode: captureimageframes",
        "mode: command",
        "mode: audioupload",
        "mode: command",
        "begining transcode",
        "transcoder detected png list",
        "...",
        "finished transcode",
    ]
    assert ws.binaries == [b"video:avout.mp4"]
    assert not deps.staging.path_for(0).exists()
    assert deps.registry.get_connection_count() == 0


@pytest.mark.asyncio
async def test_connection_ids_increase_across_sessions(app_settings, fake_ws_factory, fake_transcoder) -> None:
    deps = await build_runtime_deps(app_settings, transcoder=fake_transcoder)
    first_ids = []
    for _ in range(3):
        ws = fake_ws_factory()
        ws.push_disconnect()
        await handle_websocket_connection(ws, deps)
        first_ids.append(ws.texts[0])
    assert first_ids == ["0", "1", "2"]


@pytest.mark.asyncio
async def test_rejects_when_at_capacity(app_settings, fake_ws_factory, fake_transcoder) -> None:
    deps = await build_runtime_deps(app_settings, transcoder=fake_transcoder)
    for _ in range(app_settings.limits.max_concurrent_connections):
        assert await deps.registry.admit() is not None

    ws = fake_ws_factory()
    await handle_websocket_connection(ws, deps)

    assert ws.texts == ["error: server at capacity"]
    assert ws.close_code == 4002


@pytest.mark.asyncio
async def test_staging_failure_closes_with_internal_error(
    app_settings, fake_ws_factory, fake_transcoder, monkeypatch: pytest.MonkeyPatch
) -> None:
    deps = await build_runtime_deps(app_settings, transcoder=fake_transcoder)

    async def _broken_create(connection_id: int) -> Path:
        raise StorageError("mkdir", str(deps.staging.path_for(connection_id)), "No space left on device")

    monkeypatch.setattr(deps.staging, "create", _broken_create)
    ws = fake_ws_factory()
    await handle_websocket_connection(ws, deps)

    assert ws.texts == []
    assert ws.close_code == WS_CLOSE_INTERNAL_ERROR_CODE
    assert deps.registry.get_connection_count() == 0


@pytest.mark.asyncio
async def test_storage_error_is_reported_and_connection_survives(
    staging_root: Path, fake_ws_factory, app_settings
) -> None:
    deps = await build_runtime_deps(app_settings)
    staging = StagingArea(staging_root)
    # Staging directory is never created, so every frame write fails.
    machine = ConnectionStateMachine(7, staging)
    ws = fake_ws_factory()
    channel = ClientChannel(ws, 7)
    lifecycle = WebSocketLifecycle(ws, idle_timeout_s=0.0, watchdog_tick_s=0.05, max_connection_duration_s=0.0)
    ws.push_text("begin captureimageframes")
    ws.push_bytes(b"frame")
    ws.push_text("end")
    ws.push_disconnect()

    session = SessionState(connection_id=7)
    await run_message_loop(ws, channel, machine, session, lifecycle, deps)

    assert ws.texts == ["mode: captureimageframes", "storage error: write failed", "mode: command"]
    assert session.messages_received == 3
    assert session.bytes_received == 5


@pytest.mark.asyncio
async def test_verbs_ignored_outside_command_mode(app_settings, fake_ws_factory, fake_transcoder) -> None:
    deps = await build_runtime_deps(app_settings, transcoder=fake_transcoder)
    machine = ConnectionStateMachine(0, deps.staging)
    ws = fake_ws_factory()
    channel = ClientChannel(ws, 0)
    session = SessionState(connection_id=0)

    await handle_text("begin captureimageframes", channel=channel, machine=machine, session=session, runtime_deps=deps)
    await handle_text("export", channel=channel, machine=machine, session=session, runtime_deps=deps)
    await handle_text("give audio to 1", channel=channel, machine=machine, session=session, runtime_deps=deps)
    await handle_text("nonsense", channel=channel, machine=machine, session=session, runtime_deps=deps)

    assert ws.texts == ["mode: captureimageframes"]
    assert fake_transcoder.calls == []
    assert deps.handoffs.pending() == []


@pytest.mark.asyncio
async def test_handoff_commands_between_two_connections(app_settings, fake_ws_factory, fake_transcoder) -> None:
    deps = await build_runtime_deps(app_settings, transcoder=fake_transcoder)
    peers = {}
    for _ in range(2):
        cid = await deps.registry.admit()
        await deps.staging.create(cid)
        ws = fake_ws_factory()
        entry = RegisteredConnection(
            connection_id=cid,
            channel=ClientChannel(ws, cid),
            machine=ConnectionStateMachine(cid, deps.staging),
        )
        deps.registry.publish(entry)
        peers[cid] = (ws, entry, SessionState(connection_id=cid))

    await deps.staging.write_artifact(1, "a_001.wav", b"from-one")

    def _kwargs(cid: int) -> dict:
        _ws, entry, session = peers[cid]
        return {"channel": entry.channel, "machine": entry.machine, "session": session, "runtime_deps": deps}

    await handle_text("accept audio from 1", **_kwargs(0))
    await handle_text("give audio to 0", **_kwargs(1))

    assert peers[0][0].texts == ["0: accepts audio from 1", "0: 1 gave audio"]
    assert peers[1][0].texts == ["1: gives audio to 0", "1: 0 accepted audio"]
    assert await deps.staging.read_artifact(0, "a_001.wav") == b"from-one"
    assert not await deps.staging.exists(1, "a_001.wav")
