"""Two-party audio handoff between connections.

A giver sends ``give audio to <acceptor>`` and the acceptor sends
``accept audio from <giver>``, in either order. The moment both consents exist
for a pair the giver's staged audio is moved into the acceptor's staging area.
Recording a consent, checking the counterpart and moving the file happen under
one lock per pair, so racing commands produce exactly one transfer.
"""

from __future__ import annotations

import time
import weakref
import asyncio
import logging
from collections.abc import Callable

from src.staging.area import StagingArea
from src.state.errors import StorageError
from src.config.staging import STAGED_AUDIO_NAME
from src.handlers.registry import ConnectionRegistry

from .consent import PairConsent, HandoffOutcome

logger = logging.getLogger(__name__)

Pair = tuple[int, int]


class HandoffCoordinator:
    def __init__(
        self,
        *,
        registry: ConnectionRegistry,
        staging: StagingArea,
        pending_ttl_s: float = 0.0,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._registry = registry
        self._staging = staging
        self._pending_ttl_s = max(0.0, float(pending_ttl_s))
        self._now = now_fn or time.monotonic
        # A pair lock lives as long as a holder or waiter references it.
        self._locks: weakref.WeakValueDictionary[Pair, asyncio.Lock] = weakref.WeakValueDictionary()
        self._consents: dict[Pair, PairConsent] = {}

    async def give(self, giver_id: int, acceptor_id: int) -> HandoffOutcome:
        return await self._consent((giver_id, acceptor_id), gives=True)

    async def accept(self, acceptor_id: int, giver_id: int) -> HandoffOutcome:
        return await self._consent((giver_id, acceptor_id), accepts=True)

    def pending(self, connection_id: int | None = None) -> list[dict[str, object]]:
        self._expire()
        now = self._now()
        return [
            consent.as_dict(now)
            for pair, consent in sorted(self._consents.items())
            if connection_id is None or connection_id in pair
        ]

    def drop_connection(self, connection_id: int) -> int:
        """Forget every consent that involves ``connection_id``."""
        pairs = [pair for pair in self._consents if connection_id in pair]
        for pair in pairs:
            del self._consents[pair]
        if pairs:
            logger.info("%s: dropped %s pending handoffs", connection_id, len(pairs))
        return len(pairs)

    def _lock_for(self, pair: Pair) -> asyncio.Lock:
        lock = self._locks.get(pair)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[pair] = lock
        return lock

    def _expire(self) -> None:
        if self._pending_ttl_s <= 0:
            return
        cutoff = self._now() - self._pending_ttl_s
        for pair in [pair for pair, consent in self._consents.items() if consent.updated_at <= cutoff]:
            logger.info("handoff %s -> %s expired", pair[0], pair[1])
            del self._consents[pair]

    async def _consent(self, pair: Pair, *, gives: bool = False, accepts: bool = False) -> HandoffOutcome:
        giver_id, acceptor_id = pair
        failure: StorageError | None = None
        async with self._lock_for(pair):
            self._expire()
            consent = self._consents.get(pair)
            if consent is None:
                consent = PairConsent(giver_id=giver_id, acceptor_id=acceptor_id)
                self._consents[pair] = consent
            consent.gives = consent.gives or gives
            consent.accepts = consent.accepts or accepts
            consent.updated_at = self._now()
            if not consent.matched:
                logger.info(
                    "handoff %s -> %s pending (gives=%s accepts=%s)",
                    giver_id,
                    acceptor_id,
                    consent.gives,
                    consent.accepts,
                )
                return HandoffOutcome.PENDING

            del self._consents[pair]
            try:
                moved = await self._staging.move_artifact(giver_id, acceptor_id, STAGED_AUDIO_NAME)
            except StorageError as exc:
                failure = exc
                moved = False

        if failure is not None:
            logger.error("handoff %s -> %s failed: %s", giver_id, acceptor_id, failure)
            text = f"handoff error: {failure.operation} failed"
            await self._notify(giver_id, text)
            await self._notify(acceptor_id, text)
            return HandoffOutcome.FAILED

        if not moved:
            logger.info("handoff %s -> %s matched but no staged audio", giver_id, acceptor_id)
            await self._notify(giver_id, "handoff error: no staged audio")
            await self._notify(acceptor_id, "handoff error: no staged audio")
            return HandoffOutcome.MISSING_AUDIO

        logger.info("handoff %s -> %s transferred %s", giver_id, acceptor_id, STAGED_AUDIO_NAME)
        await self._notify(giver_id, f"{giver_id}: {acceptor_id} accepted audio")
        await self._notify(acceptor_id, f"{acceptor_id}: {giver_id} gave audio")
        return HandoffOutcome.TRANSFERRED

    async def _notify(self, connection_id: int, text: str) -> None:
        entry = self._registry.get(connection_id)
        if entry is None:
            return
        await entry.channel.send_text(text)


__all__ = ["HandoffCoordinator"]
