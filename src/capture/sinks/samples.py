"""Raw PCM sample sink. Accepts data without persisting it."""

from __future__ import annotations

import logging

from src.capture.modes import SampleCaptureConfig

from .base import Sink

logger = logging.getLogger(__name__)


class SampleSink(Sink):
    def __init__(self, connection_id: int, *, config: SampleCaptureConfig) -> None:
        super().__init__(connection_id)
        self.config = config
        self.bytes_received = 0

    async def write(self, data: bytes) -> bool:
        # TODO: append samples to a .pcm file and wrap it in a wav header on end.
        self.bytes_received += len(data)
        logger.debug("%s: received %s bytes of %s samples", self.connection_id, len(data), self.config.fmt)
        return False


__all__ = ["SampleSink"]
