"""External transcoder tool settings (env-resolved constants only)."""

from __future__ import annotations

import os

ENV_TRANSCODER_BIN = "TRANSCODER_BIN"
ENV_TRANSCODE_TIMEOUT_S = "TRANSCODE_TIMEOUT_S"
ENV_CAPTURE_FRAMERATE = "CAPTURE_FRAMERATE"
ENV_OUTPUT_FRAMERATE = "OUTPUT_FRAMERATE"
ENV_OUTPUT_PIX_FMT = "OUTPUT_PIX_FMT"
ENV_VIDEO_CODEC = "VIDEO_CODEC"
ENV_AUDIO_CODEC = "AUDIO_CODEC"

DEFAULT_TRANSCODER_BIN = "ffmpeg"
DEFAULT_TRANSCODE_TIMEOUT_S = 300.0
DEFAULT_CAPTURE_FRAMERATE = 10
DEFAULT_OUTPUT_FRAMERATE = 30
DEFAULT_OUTPUT_PIX_FMT = "yuv420p"
DEFAULT_VIDEO_CODEC = "libx264"
DEFAULT_AUDIO_CODEC = "aac"


def _get_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def _get_positive_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        value = int(raw) if raw else int(default)
    except Exception:
        value = int(default)
    return value if value > 0 else int(default)


def _get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        return float(raw)
    except Exception:
        return float(default)


# 0 disables the timeout
TRANSCODE_TIMEOUT_S = max(0.0, _get_float(ENV_TRANSCODE_TIMEOUT_S, DEFAULT_TRANSCODE_TIMEOUT_S))

TRANSCODER_BIN = _get_str(ENV_TRANSCODER_BIN, DEFAULT_TRANSCODER_BIN)
CAPTURE_FRAMERATE = _get_positive_int(ENV_CAPTURE_FRAMERATE, DEFAULT_CAPTURE_FRAMERATE)
OUTPUT_FRAMERATE = _get_positive_int(ENV_OUTPUT_FRAMERATE, DEFAULT_OUTPUT_FRAMERATE)
OUTPUT_PIX_FMT = _get_str(ENV_OUTPUT_PIX_FMT, DEFAULT_OUTPUT_PIX_FMT)
VIDEO_CODEC = _get_str(ENV_VIDEO_CODEC, DEFAULT_VIDEO_CODEC)
AUDIO_CODEC = _get_str(ENV_AUDIO_CODEC, DEFAULT_AUDIO_CODEC)

__all__ = [
    "ENV_TRANSCODER_BIN",
    "ENV_TRANSCODE_TIMEOUT_S",
    "ENV_CAPTURE_FRAMERATE",
    "ENV_OUTPUT_FRAMERATE",
    "ENV_OUTPUT_PIX_FMT",
    "ENV_VIDEO_CODEC",
    "ENV_AUDIO_CODEC",
    "TRANSCODER_BIN",
    "TRANSCODE_TIMEOUT_S",
    "CAPTURE_FRAMERATE",
    "OUTPUT_FRAMERATE",
    "OUTPUT_PIX_FMT",
    "VIDEO_CODEC",
    "AUDIO_CODEC",
]
