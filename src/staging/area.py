"""Per-connection staging namespaces on the local filesystem.

Every connection owns one directory under the staging root, named after its
connection id. All filesystem work runs in worker threads so the event loop
never blocks, and every ``OSError`` surfaces as a :class:`StorageError` that
the caller reports to the affected client only.
"""

from __future__ import annotations

import os
import shutil
import asyncio
import logging
from pathlib import Path

from src.state.errors import StorageError

from .naming import directory_name
from .cleanup import purge_residual_directories

logger = logging.getLogger(__name__)


def _reason(exc: OSError) -> str:
    return exc.strerror or exc.__class__.__name__


def _write_bytes(path: Path, data: bytes) -> None:
    path.write_bytes(data)


def _purge_files(directory: Path) -> int:
    removed = 0
    for entry in directory.iterdir():
        if entry.is_file() or entry.is_symlink():
            entry.unlink()
            removed += 1
    return removed


def _move(source: Path, target: Path) -> bool:
    if not source.is_file():
        return False
    os.replace(source, target)
    return True


class StagingArea:
    def __init__(self, root: Path, *, purge_concurrency: int = 8) -> None:
        self._root = Path(root)
        self._purge_concurrency = max(1, int(purge_concurrency))

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, connection_id: int) -> Path:
        return self._root / directory_name(connection_id)

    def artifact_path(self, connection_id: int, name: str) -> Path:
        return self.path_for(connection_id) / name

    async def create(self, connection_id: int) -> Path:
        directory = self.path_for(connection_id)
        try:
            await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("mkdir", str(directory), _reason(exc)) from exc
        return directory

    async def remove(self, connection_id: int) -> bool:
        directory = self.path_for(connection_id)
        try:
            await asyncio.to_thread(shutil.rmtree, directory)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError("rmdir", str(directory), _reason(exc)) from exc
        return True

    async def write_artifact(self, connection_id: int, name: str, data: bytes) -> Path:
        path = self.artifact_path(connection_id, name)
        try:
            await asyncio.to_thread(_write_bytes, path, data)
        except OSError as exc:
            raise StorageError("write", str(path), _reason(exc)) from exc
        return path

    async def read_artifact(self, connection_id: int, name: str) -> bytes:
        path = self.artifact_path(connection_id, name)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StorageError("read", str(path), _reason(exc)) from exc

    async def exists(self, connection_id: int, name: str) -> bool:
        path = self.artifact_path(connection_id, name)
        try:
            return await asyncio.to_thread(path.is_file)
        except OSError as exc:
            raise StorageError("stat", str(path), _reason(exc)) from exc

    async def delete_artifact(self, connection_id: int, name: str) -> bool:
        path = self.artifact_path(connection_id, name)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError("unlink", str(path), _reason(exc)) from exc
        return True

    async def purge(self, connection_id: int) -> int:
        """Delete every file in the connection's directory, keeping the directory."""
        directory = self.path_for(connection_id)
        try:
            return await asyncio.to_thread(_purge_files, directory)
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise StorageError("unlink", str(directory), _reason(exc)) from exc

    async def move_artifact(self, source_id: int, target_id: int, name: str) -> bool:
        """Relocate ``name`` from one connection's directory to another's.

        Returns False when the source artifact does not exist. An existing
        artifact of the same name in the target directory is replaced.
        """
        source = self.artifact_path(source_id, name)
        target = self.artifact_path(target_id, name)
        try:
            return await asyncio.to_thread(_move, source, target)
        except OSError as exc:
            raise StorageError("rename", str(source), _reason(exc)) from exc

    async def purge_residual(self) -> int:
        removed = await purge_residual_directories(self._root, concurrency=self._purge_concurrency)
        if removed:
            logger.info("staging: purged %s residual directories under %s", removed, self._root)
        return removed

    async def ensure_root(self) -> None:
        try:
            await asyncio.to_thread(self._root.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("mkdir", str(self._root), _reason(exc)) from exc


__all__ = ["StagingArea"]
