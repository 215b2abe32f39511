"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from src.state.settings import AppSettings
    from src.staging.area import StagingArea
    from src.export.orchestrator import ExportOrchestrator
    from src.handlers.registry import ConnectionRegistry
    from src.handoff.coordinator import HandoffCoordinator


@dataclass(slots=True)
class RuntimeDeps:
    registry: ConnectionRegistry
    staging: StagingArea
    handoffs: HandoffCoordinator
    exporter: ExportOrchestrator
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            removed = await self.staging.purge_residual()
        except Exception:
            logger.exception("runtime shutdown failed")
            return
        if removed:
            logger.info("runtime: removed %s leftover staging directories", removed)


__all__ = ["RuntimeDeps"]
