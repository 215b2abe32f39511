"""Invocation of the external transcoder tool (ffmpeg-compatible CLI).

Commands are built as argument vectors and run without a shell. A run that
exceeds the configured timeout is killed and reported as a failure.
"""

from __future__ import annotations

import shlex
import asyncio
import logging
import contextlib
from pathlib import Path

from src.state.errors import TranscodeError
from src.staging.naming import frame_pattern
from src.state.settings import TranscoderSettings

logger = logging.getLogger(__name__)

_STDERR_TAIL_CHARS = 2000


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        proc.kill()
    await proc.wait()


class Transcoder:
    def __init__(self, settings: TranscoderSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> TranscoderSettings:
        return self._settings

    def encode_frames_argv(self, directory: Path, ext: str, output: Path) -> list[str]:
        s = self._settings
        return [
            s.binary,
            "-y",
            "-framerate",
            str(s.capture_framerate),
            "-i",
            str(directory / frame_pattern(ext)),
            "-c:v",
            s.video_codec,
            "-r",
            str(s.output_framerate),
            "-pix_fmt",
            s.pix_fmt,
            str(output),
        ]

    def mux_audio_argv(self, video: Path, audio: Path, output: Path) -> list[str]:
        s = self._settings
        return [
            s.binary,
            "-y",
            "-i",
            str(video),
            "-i",
            str(audio),
            "-c:v",
            "copy",
            "-c:a",
            s.audio_codec,
            str(output),
        ]

    async def encode_frames(self, directory: Path, ext: str, output: Path, *, label: str = "") -> None:
        await self.run(self.encode_frames_argv(directory, ext, output), label=label)

    async def mux_audio(self, video: Path, audio: Path, output: Path, *, label: str = "") -> None:
        await self.run(self.mux_audio_argv(video, audio, output), label=label)

    async def run(self, argv: list[str], *, label: str = "") -> None:
        logger.info("%s: exec: %s", label, shlex.join(argv))
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("%s: could not launch %s: %s", label, argv[0], exc)
            raise TranscodeError(f"could not launch {argv[0]}") from exc

        timeout = self._settings.timeout_s if self._settings.timeout_s > 0 else None
        try:
            _stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.CancelledError:
            logger.warning("%s: %s cancelled, killing pid %s", label, argv[0], proc.pid)
            await _kill(proc)
            raise
        except TimeoutError as exc:
            await _kill(proc)
            logger.error("%s: %s timed out after %ss", label, argv[0], self._settings.timeout_s)
            raise TranscodeError("timed out") from exc

        if proc.returncode != 0:
            tail = (stderr or b"").decode("utf-8", errors="replace")[-_STDERR_TAIL_CHARS:]
            logger.error("%s: exec error: exit code %s\n%s", label, proc.returncode, tail)
            raise TranscodeError(f"exit code {proc.returncode}")


__all__ = ["Transcoder"]
