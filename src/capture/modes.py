"""Capture modes, their configuration records and the mode-stack frame."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING
from dataclasses import dataclass

from src.config.staging import AUDIO_EXTENSION, DEFAULT_FRAME_EXTENSION

if TYPE_CHECKING:
    from .sinks import Sink


class Mode(str, Enum):
    COMMAND = "command"
    AUDIO_UPLOAD = "audioupload"
    CAPTURE_IMAGE_FRAMES = "captureimageframes"
    CAPTURE_AUDIO_SAMPLES = "captureaudiosamples"


@dataclass(frozen=True, slots=True)
class CommandConfig:
    pass


@dataclass(frozen=True, slots=True)
class FrameCaptureConfig:
    ext: str = DEFAULT_FRAME_EXTENSION


@dataclass(frozen=True, slots=True)
class AudioUploadConfig:
    ext: str = AUDIO_EXTENSION


@dataclass(frozen=True, slots=True)
class SampleCaptureConfig:
    """Raw PCM stream parameters. Parsed and kept, not yet persisted."""

    fmt: str = "pcm"
    rate: int = 16000
    bits: int = 16
    mono: bool = False
    little_endian: bool = True


ModeConfig = CommandConfig | FrameCaptureConfig | AudioUploadConfig | SampleCaptureConfig


@dataclass(frozen=True, slots=True)
class ModeFrame:
    """One entry of a connection's mode stack: the mode, its config and its sink."""

    mode: Mode
    config: ModeConfig
    sink: Sink


__all__ = [
    "AudioUploadConfig",
    "CommandConfig",
    "FrameCaptureConfig",
    "Mode",
    "ModeConfig",
    "ModeFrame",
    "SampleCaptureConfig",
]
