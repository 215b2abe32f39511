"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    endpoint_path: str
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class StagingSettings:
    root: Path
    purge_concurrency: int


@dataclass(frozen=True, slots=True)
class TranscoderSettings:
    binary: str
    timeout_s: float
    capture_framerate: int
    output_framerate: int
    pix_fmt: str
    video_codec: str
    audio_codec: str


@dataclass(frozen=True, slots=True)
class HandoffSettings:
    pending_ttl_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    server: ServerSettings
    limits: LimitsSettings
    websocket: WebSocketSettings
    staging: StagingSettings
    transcoder: TranscoderSettings
    handoff: HandoffSettings


__all__ = [
    "AppSettings",
    "HandoffSettings",
    "LimitsSettings",
    "ServerSettings",
    "StagingSettings",
    "TranscoderSettings",
    "WebSocketSettings",
]
