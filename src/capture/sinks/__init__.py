"""Per-mode binary sinks and the factory that selects one for a mode."""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.staging.naming import audio_name, frame_name
from src.capture.modes import (
    Mode,
    ModeConfig,
    AudioUploadConfig,
    FrameCaptureConfig,
    SampleCaptureConfig,
)

from .base import Sink
from .discard import NullSink
from .samples import SampleSink
from .sequence import SequenceSink

if TYPE_CHECKING:
    from src.staging.area import StagingArea


def build_sink(connection_id: int, mode: Mode, config: ModeConfig, staging: StagingArea) -> Sink:
    if mode is Mode.CAPTURE_IMAGE_FRAMES and isinstance(config, FrameCaptureConfig):
        return SequenceSink(connection_id, staging=staging, ext=config.ext, name_fn=frame_name)
    if mode is Mode.AUDIO_UPLOAD and isinstance(config, AudioUploadConfig):
        return SequenceSink(connection_id, staging=staging, ext=config.ext, name_fn=audio_name)
    if mode is Mode.CAPTURE_AUDIO_SAMPLES and isinstance(config, SampleCaptureConfig):
        return SampleSink(connection_id, config=config)
    return NullSink(connection_id)


__all__ = ["NullSink", "SampleSink", "SequenceSink", "Sink", "build_sink"]
