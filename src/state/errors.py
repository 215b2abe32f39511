"""Error types (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StorageError(Exception):
    """Raised when a staging-area filesystem operation fails."""

    operation: str
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.operation} failed for {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class TranscodeError(Exception):
    """Raised when the external transcoder fails or produces no output."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class CommandError(Exception):
    """Raised for unrecognized or malformed text commands."""

    reason: str

    def __str__(self) -> str:
        return self.reason


__all__ = ["CommandError", "StorageError", "TranscodeError"]
