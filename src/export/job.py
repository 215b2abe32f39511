"""Export job record (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(slots=True)
class ExportJob:
    connection_id: int
    frame_ext: str | None = None
    has_audio: bool = False
    output: Path | None = None
    delivered: bool = False
    error: str | None = None


__all__ = ["ExportJob"]
