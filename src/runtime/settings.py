"""Load runtime settings.

Configuration values are resolved from the environment in `src/config/*` and
exposed here as structured dataclasses for the rest of the server.
"""

from __future__ import annotations

from src.config.server import MEDIA_HOST, MEDIA_PORT
from src.config.limits import HANDOFF_PENDING_TTL_S, MAX_CONCURRENT_CONNECTIONS
from src.config.staging import MEDIA_STAGING_DIR, STAGING_PURGE_CONCURRENCY
from src.config.websocket import (
    WS_ENDPOINT_PATH,
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_MAX_CONNECTION_DURATION_S,
)
from src.state.settings import (
    AppSettings,
    ServerSettings,
    LimitsSettings,
    HandoffSettings,
    StagingSettings,
    WebSocketSettings,
    TranscoderSettings,
)
from src.config.transcoder import (
    AUDIO_CODEC,
    VIDEO_CODEC,
    OUTPUT_PIX_FMT,
    TRANSCODER_BIN,
    OUTPUT_FRAMERATE,
    CAPTURE_FRAMERATE,
    TRANSCODE_TIMEOUT_S,
)


def load_settings() -> AppSettings:
    return AppSettings(
        server=ServerSettings(host=MEDIA_HOST, port=MEDIA_PORT),
        limits=LimitsSettings(max_concurrent_connections=MAX_CONCURRENT_CONNECTIONS),
        websocket=WebSocketSettings(
            endpoint_path=WS_ENDPOINT_PATH,
            idle_timeout_s=WS_IDLE_TIMEOUT_S,
            watchdog_tick_s=WS_WATCHDOG_TICK_S,
            max_connection_duration_s=WS_MAX_CONNECTION_DURATION_S,
        ),
        staging=StagingSettings(root=MEDIA_STAGING_DIR, purge_concurrency=STAGING_PURGE_CONCURRENCY),
        transcoder=TranscoderSettings(
            binary=TRANSCODER_BIN,
            timeout_s=TRANSCODE_TIMEOUT_S,
            capture_framerate=CAPTURE_FRAMERATE,
            output_framerate=OUTPUT_FRAMERATE,
            pix_fmt=OUTPUT_PIX_FMT,
            video_codec=VIDEO_CODEC,
            audio_codec=AUDIO_CODEC,
        ),
        handoff=HandoffSettings(pending_ttl_s=HANDOFF_PENDING_TTL_S),
    )


__all__ = ["load_settings"]
