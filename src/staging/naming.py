"""File and directory names inside the staging area."""

from __future__ import annotations

from src.config.staging import (
    AUDIO_PREFIX,
    FRAME_PREFIX,
    AUDIO_INDEX_DIGITS,
    FRAME_INDEX_DIGITS,
    STAGING_DIR_PREFIX,
    STAGING_DIR_ID_DIGITS,
)


def directory_name(connection_id: int) -> str:
    return f"{STAGING_DIR_PREFIX}{connection_id:0{STAGING_DIR_ID_DIGITS}d}"


def frame_name(index: int, ext: str) -> str:
    return f"{FRAME_PREFIX}{index:0{FRAME_INDEX_DIGITS}d}.{ext}"


def audio_name(index: int, ext: str) -> str:
    return f"{AUDIO_PREFIX}{index:0{AUDIO_INDEX_DIGITS}d}.{ext}"


def frame_pattern(ext: str) -> str:
    """printf-style input pattern understood by the transcoder for a frame sequence."""
    return f"{FRAME_PREFIX}%0{FRAME_INDEX_DIGITS}d.{ext}"


__all__ = ["audio_name", "directory_name", "frame_name", "frame_pattern"]
