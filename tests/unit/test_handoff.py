from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from src.errors import StorageError
from src.staging.area import StagingArea
from src.handoff import HandoffOutcome, HandoffCoordinator
from src.capture.machine import ConnectionStateMachine
from src.handlers.websocket.channel import ClientChannel
from src.handlers.registry import ConnectionRegistry, RegisteredConnection


async def _setup(staging_root: Path, fake_ws_factory, *, ttl: float = 0.0, now_fn=None):
    staging = StagingArea(staging_root)
    registry = ConnectionRegistry(max_connections=4)
    sockets = {}
    for _ in range(2):
        cid = await registry.admit()
        await staging.create(cid)
        ws = fake_ws_factory()
        sockets[cid] = ws
        registry.publish(
            RegisteredConnection(
                connection_id=cid,
                channel=ClientChannel(ws, cid),
                machine=ConnectionStateMachine(cid, staging),
            )
        )
    coordinator = HandoffCoordinator(registry=registry, staging=staging, pending_ttl_s=ttl, now_fn=now_fn)
    return staging, coordinator, sockets


@pytest.mark.asyncio
@pytest.mark.parametrize("give_first", [True, False])
async def test_transfer_happens_once_in_either_order(staging_root: Path, fake_ws_factory, give_first: bool) -> None:
    staging, coordinator, sockets = await _setup(staging_root, fake_ws_factory)
    await staging.write_artifact(0, "a_001.wav", b"audio-from-0")

    if give_first:
        assert await coordinator.give(0, 1) is HandoffOutcome.PENDING
        assert await coordinator.accept(1, 0) is HandoffOutcome.TRANSFERRED
    else:
        assert await coordinator.accept(1, 0) is HandoffOutcome.PENDING
        assert await coordinator.give(0, 1) is HandoffOutcome.TRANSFERRED

    assert not await staging.exists(0, "a_001.wav")
    assert await staging.read_artifact(1, "a_001.wav") == b"audio-from-0"
    assert sockets[0].texts == ["0: 1 accepted audio"]
    assert sockets[1].texts == ["1: 0 gave audio"]
    assert coordinator.pending() == []


@pytest.mark.asyncio
async def test_repeated_pair_without_new_audio_does_not_duplicate(staging_root: Path, fake_ws_factory) -> None:
    staging, coordinator, sockets = await _setup(staging_root, fake_ws_factory)
    await staging.write_artifact(0, "a_001.wav", b"only-once")
    await coordinator.give(0, 1)
    await coordinator.accept(1, 0)

    await coordinator.give(0, 1)
    assert await coordinator.accept(1, 0) is HandoffOutcome.MISSING_AUDIO

    assert await staging.read_artifact(1, "a_001.wav") == b"only-once"
    assert sockets[1].texts == ["1: 0 gave audio", "handoff error: no staged audio"]


@pytest.mark.asyncio
async def test_concurrent_consents_transfer_exactly_once(staging_root: Path, fake_ws_factory) -> None:
    staging, coordinator, _sockets = await _setup(staging_root, fake_ws_factory)
    await staging.write_artifact(0, "a_001.wav", b"raced")

    outcomes = await asyncio.gather(
        coordinator.give(0, 1),
        coordinator.accept(1, 0),
        coordinator.give(0, 1),
        coordinator.accept(1, 0),
    )
    assert outcomes.count(HandoffOutcome.TRANSFERRED) == 1
    assert await staging.read_artifact(1, "a_001.wav") == b"raced"


@pytest.mark.asyncio
async def test_consent_for_absent_peer_stays_pending(staging_root: Path, fake_ws_factory) -> None:
    staging, coordinator, sockets = await _setup(staging_root, fake_ws_factory)
    await staging.write_artifact(0, "a_001.wav", b"audio")

    assert await coordinator.give(0, 99) is HandoffOutcome.PENDING
    pending = coordinator.pending(0)
    assert len(pending) == 1
    assert pending[0]["giver"] == 0
    assert pending[0]["acceptor"] == 99
    assert pending[0]["gives"] is True
    assert pending[0]["accepts"] is False
    assert await staging.exists(0, "a_001.wav")
    assert sockets[0].texts == []


@pytest.mark.asyncio
async def test_drop_connection_forgets_consents(staging_root: Path, fake_ws_factory) -> None:
    staging, coordinator, _sockets = await _setup(staging_root, fake_ws_factory)
    await staging.write_artifact(0, "a_001.wav", b"audio")
    await coordinator.give(0, 1)
    assert coordinator.drop_connection(1) == 1
    assert coordinator.pending() == []

    assert await coordinator.accept(1, 0) is HandoffOutcome.PENDING
    assert await staging.exists(0, "a_001.wav")


@pytest.mark.asyncio
async def test_pending_consents_expire(staging_root: Path, fake_ws_factory) -> None:
    clock = {"t": 100.0}
    staging, coordinator, _sockets = await _setup(
        staging_root, fake_ws_factory, ttl=30.0, now_fn=lambda: clock["t"]
    )
    await staging.write_artifact(0, "a_001.wav", b"audio")

    await coordinator.give(0, 1)
    clock["t"] += 31.0
    assert coordinator.pending() == []
    assert await coordinator.accept(1, 0) is HandoffOutcome.PENDING
    assert await staging.exists(0, "a_001.wav")


@pytest.mark.asyncio
async def test_failed_move_notifies_both_peers(
    staging_root: Path, fake_ws_factory, monkeypatch: pytest.MonkeyPatch
) -> None:
    staging, coordinator, sockets = await _setup(staging_root, fake_ws_factory)
    await staging.write_artifact(0, "a_001.wav", b"audio")

    async def _broken_move(source_id: int, target_id: int, name: str) -> bool:
        raise StorageError("rename", str(staging.artifact_path(source_id, name)), "Permission denied")

    monkeypatch.setattr(staging, "move_artifact", _broken_move)

    assert await coordinator.give(0, 1) is HandoffOutcome.PENDING
    assert await coordinator.accept(1, 0) is HandoffOutcome.FAILED
    assert sockets[0].texts == ["handoff error: rename failed"]
    assert sockets[1].texts == ["handoff error: rename failed"]
    assert coordinator.pending() == []


@pytest.mark.asyncio
async def test_pair_lock_survives_drop_while_waiter_wakes(staging_root: Path, fake_ws_factory) -> None:
    _staging, coordinator, _sockets = await _setup(staging_root, fake_ws_factory)
    lock = coordinator._lock_for((0, 1))
    await lock.acquire()
    waiter = asyncio.create_task(coordinator.give(0, 1))
    await asyncio.sleep(0)

    # The woken waiter has not resumed yet, so the lock reads as unlocked.
    lock.release()
    coordinator.drop_connection(0)

    assert coordinator._lock_for((0, 1)) is lock
    assert await waiter is HandoffOutcome.PENDING
