"""Consent state for one (giver, acceptor) pair."""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass


class HandoffOutcome(str, Enum):
    PENDING = "pending"
    TRANSFERRED = "transferred"
    MISSING_AUDIO = "missing_audio"
    FAILED = "failed"


@dataclass(slots=True)
class PairConsent:
    giver_id: int
    acceptor_id: int
    gives: bool = False
    accepts: bool = False
    updated_at: float = 0.0

    @property
    def matched(self) -> bool:
        return self.gives and self.accepts

    def as_dict(self, now: float) -> dict[str, object]:
        return {
            "giver": self.giver_id,
            "acceptor": self.acceptor_id,
            "gives": self.gives,
            "accepts": self.accepts,
            "age_s": round(max(0.0, now - self.updated_at), 3),
        }


__all__ = ["HandoffOutcome", "PairConsent"]
