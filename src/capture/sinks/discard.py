"""Sink used while no capture mode is active."""

from __future__ import annotations

import logging

from .base import Sink

logger = logging.getLogger(__name__)


class NullSink(Sink):
    async def write(self, data: bytes) -> bool:
        logger.info("%s: discarded binary data (%s bytes), no capture mode active", self.connection_id, len(data))
        return False


__all__ = ["NullSink"]
