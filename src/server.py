"""Main FastAPI server for the media capture gateway."""

from __future__ import annotations

import logging
from typing import Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from src.state import AppSettings, RuntimeDeps
from src.export.transcoder import Transcoder
from src.runtime.settings import load_settings
from src.runtime.logging import configure_logging
from src.runtime.dependencies import build_runtime_deps
from src.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(settings: AppSettings | None = None, *, transcoder: Transcoder | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = await build_runtime_deps(settings, transcoder=transcoder)
        logger.info("runtime: ready, websocket endpoint %s", settings.websocket.endpoint_path)
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/status")
    async def status() -> dict[str, Any]:
        registry = _runtime_deps(app).registry
        return {
            "status": "ok",
            "connections": registry.get_connection_count(),
            "connection_ids": registry.connection_ids(),
            "sessions": registry.snapshot(),
        }

    @app.get("/handoffs")
    async def handoffs() -> dict[str, Any]:
        return {"pending": _runtime_deps(app).handoffs.pending()}

    @app.websocket(settings.websocket.endpoint_path)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    return app


configure_logging()

app = create_app()

__all__ = ["app", "create_app"]
