"""Binary sink interface: one sink is active per connection at a time."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Sink(ABC):
    def __init__(self, connection_id: int) -> None:
        self.connection_id = connection_id

    @abstractmethod
    async def write(self, data: bytes) -> bool:
        """Consume one binary message. Returns True when it was persisted."""


__all__ = ["Sink"]
