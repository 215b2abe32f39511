"""Runtime dependency construction (staging, registry, handoffs, export)."""

from __future__ import annotations

import logging

from src.state import RuntimeDeps
from src.staging.area import StagingArea
from src.state.settings import AppSettings
from src.export.transcoder import Transcoder
from src.handlers.registry import ConnectionRegistry
from src.export.orchestrator import ExportOrchestrator
from src.handoff.coordinator import HandoffCoordinator

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    transcoder: Transcoder | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()

    staging = StagingArea(settings.staging.root, purge_concurrency=settings.staging.purge_concurrency)
    await staging.ensure_root()
    # Leftovers from a previous process must be gone before the first id is handed out.
    removed = await staging.purge_residual()
    logger.info("staging: %s ready (%s residual directories removed)", staging.root, removed)

    registry = ConnectionRegistry(max_connections=settings.limits.max_concurrent_connections)
    handoffs = HandoffCoordinator(
        registry=registry,
        staging=staging,
        pending_ttl_s=settings.handoff.pending_ttl_s,
    )
    exporter = ExportOrchestrator(
        staging=staging,
        transcoder=transcoder or Transcoder(settings.transcoder),
    )

    return RuntimeDeps(
        registry=registry,
        staging=staging,
        handoffs=handoffs,
        exporter=exporter,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
