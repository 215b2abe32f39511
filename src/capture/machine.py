"""Per-connection mode stack.

The stack always holds at least the base ``command`` frame. Each frame carries
its own config and sink, so the active sink is by construction the one of the
top frame.
"""

from __future__ import annotations

import logging

from src.staging.area import StagingArea

from .sinks import Sink, NullSink, build_sink
from .parser import Command, CommandKind
from .modes import Mode, ModeFrame, ModeConfig, CommandConfig

logger = logging.getLogger(__name__)


class ConnectionStateMachine:
    def __init__(self, connection_id: int, staging: StagingArea) -> None:
        self.connection_id = connection_id
        self._staging = staging
        self._frames: list[ModeFrame] = [
            ModeFrame(mode=Mode.COMMAND, config=CommandConfig(), sink=NullSink(connection_id)),
        ]

    @property
    def mode(self) -> Mode:
        return self._frames[-1].mode

    @property
    def config(self) -> ModeConfig:
        return self._frames[-1].config

    @property
    def sink(self) -> Sink:
        return self._frames[-1].sink

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def modes(self) -> list[Mode]:
        return [frame.mode for frame in self._frames]

    def begin(self, mode: Mode, config: ModeConfig) -> ModeFrame:
        if mode is Mode.COMMAND:
            raise ValueError("command mode is the base frame and cannot be pushed")
        frame = ModeFrame(mode=mode, config=config, sink=build_sink(self.connection_id, mode, config, self._staging))
        self._frames.append(frame)
        logger.info("%s: mode: %s", self.connection_id, self.mode.value)
        return frame

    def end(self) -> bool:
        if len(self._frames) == 1:
            logger.info("%s: ignored end, already in %s mode", self.connection_id, self.mode.value)
            return False
        self._frames.pop()
        logger.info("%s: mode: %s", self.connection_id, self.mode.value)
        return True

    def apply(self, command: Command) -> bool:
        """Apply a ``begin``/``end`` command. Returns True when the stack changed."""
        if command.kind is CommandKind.BEGIN:
            if command.mode is None or command.config is None:
                return False
            self.begin(command.mode, command.config)
            return True
        if command.kind is CommandKind.END:
            return self.end()
        return False

    async def feed(self, data: bytes) -> bool:
        return await self.sink.write(data)


__all__ = ["ConnectionStateMachine"]
