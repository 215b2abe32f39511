from __future__ import annotations

import asyncio
from typing import Any
from pathlib import Path

import pytest

from src.state.errors import TranscodeError
from src.export.transcoder import Transcoder
from src.state.settings import (
    AppSettings,
    ServerSettings,
    LimitsSettings,
    HandoffSettings,
    StagingSettings,
    WebSocketSettings,
    TranscoderSettings,
)


class FakeWebSocket:
    """In-memory stand-in for a Starlette WebSocket.

    Inbound messages are scripted with ``push_text``/``push_bytes``/``push_disconnect``
    and consumed by ``receive()``; everything sent is recorded in ``sent``.
    """

    def __init__(self) -> None:
        self.sent: list[tuple[str, Any]] = []
        self.accepted = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self._inbound: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def push_text(self, text: str) -> None:
        self._inbound.put_nowait({"type": "websocket.receive", "text": text})

    def push_bytes(self, data: bytes) -> None:
        self._inbound.put_nowait({"type": "websocket.receive", "bytes": data})

    def push_disconnect(self, code: int = 1000) -> None:
        self._inbound.put_nowait({"type": "websocket.disconnect", "code": code})

    async def receive(self) -> dict[str, Any]:
        return await self._inbound.get()

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        self.sent.append(("text", text))

    async def send_bytes(self, data: bytes) -> None:
        self.sent.append(("bytes", data))

    async def close(self, *, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code
        self.close_reason = reason or ""

    @property
    def texts(self) -> list[str]:
        return [payload for kind, payload in self.sent if kind == "text"]

    @property
    def binaries(self) -> list[bytes]:
        return [payload for kind, payload in self.sent if kind == "bytes"]


@pytest.fixture
def fake_ws_factory():
    return FakeWebSocket


@pytest.fixture
def staging_root(tmp_path: Path) -> Path:
    root = tmp_path / "staging"
    root.mkdir()
    return root


@pytest.fixture
def app_settings(staging_root: Path) -> AppSettings:
    return AppSettings(
        server=ServerSettings(host="127.0.0.1", port=8080),
        limits=LimitsSettings(max_concurrent_connections=8),
        websocket=WebSocketSettings(
            endpoint_path="/",
            idle_timeout_s=0.0,
            watchdog_tick_s=0.05,
            max_connection_duration_s=0.0,
        ),
        staging=StagingSettings(root=staging_root, purge_concurrency=4),
        transcoder=TranscoderSettings(
            binary="ffmpeg",
            timeout_s=5.0,
            capture_framerate=10,
            output_framerate=30,
            pix_fmt="yuv420p",
            video_codec="libx264",
            audio_codec="aac",
        ),
        handoff=HandoffSettings(pending_ttl_s=0.0),
    )


class FakeTranscoder(Transcoder):
    """Records argv instead of launching a process; writes the expected output file.

    ``fail_with`` makes every run raise, ``skip_output`` makes runs succeed
    without producing the output file.
    """

    def __init__(self, settings: TranscoderSettings, *, fail_with: str | None = None, skip_output: bool = False):
        super().__init__(settings)
        self.calls: list[list[str]] = []
        self.fail_with = fail_with
        self.skip_output = skip_output

    async def run(self, argv: list[str], *, label: str = "") -> None:
        self.calls.append(list(argv))
        if self.fail_with is not None:
            raise TranscodeError(self.fail_with)
        if not self.skip_output:
            Path(argv[-1]).write_bytes(b"video:" + Path(argv[-1]).name.encode())


@pytest.fixture
def fake_transcoder(app_settings: AppSettings) -> FakeTranscoder:
    return FakeTranscoder(app_settings.transcoder)


@pytest.fixture
def fake_transcoder_factory(app_settings: AppSettings):
    def _make(**kwargs: Any) -> FakeTranscoder:
        return FakeTranscoder(app_settings.transcoder, **kwargs)

    return _make
