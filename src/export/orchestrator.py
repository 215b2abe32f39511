"""Assemble a connection's staged frames (and audio) into one video artifact.

Flow for ``export``:

1. Pick the input strategy: ``f_000001.png`` first, then ``f_000001.jpg``.
2. Encode the frame sequence into ``out.mp4``.
3. If ``a_001.wav`` is staged, mux it with the video into ``avout.mp4``.
4. Send the final file as one binary message, then empty the staging area.

Progress and errors go to the requesting client as text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from src.state.errors import TranscodeError
from src.staging.area import StagingArea
from src.staging.naming import frame_name
from src.config.staging import (
    FRAME_EXTENSIONS,
    MUXED_OUTPUT_NAME,
    STAGED_AUDIO_NAME,
    VIDEO_OUTPUT_NAME,
)
from src.handlers.websocket.channel import ClientChannel

from .job import ExportJob
from .transcoder import Transcoder

logger = logging.getLogger(__name__)

MSG_BEGIN = "begining transcode"
MSG_PROGRESS = "..."
MSG_FINISHED = "finished transcode"
MSG_FINISHED_NO_AUDIO = "finished transcode without audio"
MSG_NO_FRAMES = "transcode error: no image frames found"
MSG_ERROR_PREFIX = "transcode error: "


class ExportOrchestrator:
    def __init__(self, *, staging: StagingArea, transcoder: Transcoder) -> None:
        self._staging = staging
        self._transcoder = transcoder

    async def detect_frames(self, connection_id: int) -> str | None:
        for ext in FRAME_EXTENSIONS:
            if await self._staging.exists(connection_id, frame_name(1, ext)):
                return ext
        return None

    async def run(self, connection_id: int, channel: ClientChannel) -> ExportJob:
        job = ExportJob(connection_id=connection_id)
        await channel.send_text(MSG_BEGIN)

        job.frame_ext = await self.detect_frames(connection_id)
        if job.frame_ext is None:
            logger.info("%s: transcode error, did not find png or jpg images", connection_id)
            job.error = "no image frames found"
            await channel.send_text(MSG_NO_FRAMES)
            return job
        await channel.send_text(f"transcoder detected {job.frame_ext} list")

        try:
            job.output = await self._transcode(job, channel)
        except TranscodeError as exc:
            job.error = str(exc)
            await channel.send_text(f"{MSG_ERROR_PREFIX}{exc}")
            return job

        payload = await self._staging.read_artifact(connection_id, job.output.name)
        job.delivered = await channel.send_bytes(payload)
        if not job.delivered:
            logger.warning("%s: could not deliver %s", connection_id, job.output.name)
            return job

        removed = await self._staging.purge(connection_id)
        logger.info(
            "%s: delivered %s (%s bytes), purged %s files", connection_id, job.output.name, len(payload), removed
        )
        return job

    async def _transcode(self, job: ExportJob, channel: ClientChannel) -> Path:
        cid = job.connection_id
        directory = self._staging.path_for(cid)
        label = str(cid)
        video = directory / VIDEO_OUTPUT_NAME

        # Outputs left by an earlier failed export must not pass for fresh ones.
        for name in (VIDEO_OUTPUT_NAME, MUXED_OUTPUT_NAME):
            await self._staging.delete_artifact(cid, name)
        await self._transcoder.encode_frames(directory, job.frame_ext or FRAME_EXTENSIONS[0], video, label=label)
        if not await self._staging.exists(cid, VIDEO_OUTPUT_NAME):
            raise TranscodeError("no output")
        await channel.send_text(MSG_PROGRESS)

        job.has_audio = await self._staging.exists(cid, STAGED_AUDIO_NAME)
        if not job.has_audio:
            await channel.send_text(MSG_FINISHED_NO_AUDIO)
            return video

        await channel.send_text(MSG_FINISHED)
        muxed = directory / MUXED_OUTPUT_NAME
        await self._transcoder.mux_audio(video, directory / STAGED_AUDIO_NAME, muxed, label=label)
        if not await self._staging.exists(cid, MUXED_OUTPUT_NAME):
            raise TranscodeError("no output")
        return muxed


__all__ = ["ExportOrchestrator", "MSG_BEGIN", "MSG_FINISHED", "MSG_FINISHED_NO_AUDIO", "MSG_NO_FRAMES"]
