"""Startup and shutdown removal of leftover per-connection staging directories."""

from __future__ import annotations

import shutil
import asyncio
import logging
from pathlib import Path

from src.state.errors import StorageError
from src.config.staging import STAGING_DIR_PATTERN

logger = logging.getLogger(__name__)


def _scan(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    return sorted(p for p in root.iterdir() if p.is_dir() and STAGING_DIR_PATTERN.match(p.name))


async def purge_residual_directories(root: Path, *, concurrency: int) -> int:
    """Remove every ``client_<id>`` directory under ``root``.

    Directories are found with a single scan and removed with at most
    ``concurrency`` deletions in flight. Returns once all removals finished,
    with the number of directories removed.
    """
    try:
        targets = await asyncio.to_thread(_scan, root)
    except OSError as exc:
        raise StorageError("scan", str(root), exc.strerror or str(exc)) from exc
    if not targets:
        return 0

    semaphore = asyncio.Semaphore(max(1, int(concurrency)))

    async def _remove(target: Path) -> bool:
        async with semaphore:
            try:
                await asyncio.to_thread(shutil.rmtree, target)
            except FileNotFoundError:
                return False
            except OSError as exc:
                logger.warning("staging: could not delete %s: %s", target, exc)
                return False
            logger.debug("staging: deleted %s/", target)
            return True

    results = await asyncio.gather(*(_remove(target) for target in targets))
    return sum(1 for removed in results if removed)


__all__ = ["purge_residual_directories"]
