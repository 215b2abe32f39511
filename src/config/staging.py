"""Staging area layout (env-resolved constants only)."""

from __future__ import annotations

import os
import re
from pathlib import Path

ENV_MEDIA_STAGING_DIR = "MEDIA_STAGING_DIR"
ENV_STAGING_PURGE_CONCURRENCY = "STAGING_PURGE_CONCURRENCY"

DEFAULT_MEDIA_STAGING_DIR = "staging"
DEFAULT_STAGING_PURGE_CONCURRENCY = 8

STAGING_DIR_PREFIX = "client_"
STAGING_DIR_ID_DIGITS = 7
STAGING_DIR_PATTERN = re.compile(rf"^{STAGING_DIR_PREFIX}\d{{{STAGING_DIR_ID_DIGITS}}}$")

FRAME_PREFIX = "f_"
FRAME_INDEX_DIGITS = 6
FRAME_EXTENSIONS = ("png", "jpg")
DEFAULT_FRAME_EXTENSION = "png"

AUDIO_PREFIX = "a_"
AUDIO_INDEX_DIGITS = 3
AUDIO_EXTENSION = "wav"
STAGED_AUDIO_NAME = f"{AUDIO_PREFIX}{1:0{AUDIO_INDEX_DIGITS}d}.{AUDIO_EXTENSION}"

VIDEO_OUTPUT_NAME = "out.mp4"
MUXED_OUTPUT_NAME = "avout.mp4"

MEDIA_STAGING_DIR = Path((os.getenv(ENV_MEDIA_STAGING_DIR) or "").strip() or DEFAULT_MEDIA_STAGING_DIR)

_STAGING_PURGE_CONCURRENCY_RAW = (os.getenv(ENV_STAGING_PURGE_CONCURRENCY) or "").strip()
try:
    STAGING_PURGE_CONCURRENCY: int = (
        int(_STAGING_PURGE_CONCURRENCY_RAW) if _STAGING_PURGE_CONCURRENCY_RAW else DEFAULT_STAGING_PURGE_CONCURRENCY
    )
except Exception:
    STAGING_PURGE_CONCURRENCY = DEFAULT_STAGING_PURGE_CONCURRENCY
STAGING_PURGE_CONCURRENCY = max(1, int(STAGING_PURGE_CONCURRENCY))

__all__ = [
    "ENV_MEDIA_STAGING_DIR",
    "ENV_STAGING_PURGE_CONCURRENCY",
    "DEFAULT_MEDIA_STAGING_DIR",
    "DEFAULT_STAGING_PURGE_CONCURRENCY",
    "STAGING_DIR_PREFIX",
    "STAGING_DIR_ID_DIGITS",
    "STAGING_DIR_PATTERN",
    "FRAME_PREFIX",
    "FRAME_INDEX_DIGITS",
    "FRAME_EXTENSIONS",
    "DEFAULT_FRAME_EXTENSION",
    "AUDIO_PREFIX",
    "AUDIO_INDEX_DIGITS",
    "AUDIO_EXTENSION",
    "STAGED_AUDIO_NAME",
    "VIDEO_OUTPUT_NAME",
    "MUXED_OUTPUT_NAME",
    "MEDIA_STAGING_DIR",
    "STAGING_PURGE_CONCURRENCY",
]
