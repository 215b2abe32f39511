"""Sinks that persist each binary message as the next numbered staging file."""

from __future__ import annotations

from collections.abc import Callable

from src.staging.area import StagingArea

from .base import Sink

NameFn = Callable[[int, str], str]


class SequenceSink(Sink):
    """Write every message to ``name_fn(index, ext)`` with index counting from 1.

    The index only advances after a successful write, so a failed write does
    not leave a gap in the sequence.
    """

    def __init__(self, connection_id: int, *, staging: StagingArea, ext: str, name_fn: NameFn) -> None:
        super().__init__(connection_id)
        self._staging = staging
        self._ext = ext
        self._name_fn = name_fn
        self._next_index = 1

    @property
    def ext(self) -> str:
        return self._ext

    @property
    def next_index(self) -> int:
        return self._next_index

    @property
    def written(self) -> int:
        return self._next_index - 1

    async def write(self, data: bytes) -> bool:
        name = self._name_fn(self._next_index, self._ext)
        await self._staging.write_artifact(self.connection_id, name, data)
        self._next_index += 1
        return True


__all__ = ["SequenceSink"]
