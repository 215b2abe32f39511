"""Shared error types for the media capture gateway."""

from __future__ import annotations

from src.state.errors import CommandError, StorageError, TranscodeError

__all__ = ["CommandError", "StorageError", "TranscodeError"]
