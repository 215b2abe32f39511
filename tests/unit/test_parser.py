from __future__ import annotations

import pytest

from src.errors import CommandError
from src.capture.parser import CommandKind, parse_command
from src.capture.modes import (
    Mode,
    AudioUploadConfig,
    FrameCaptureConfig,
    SampleCaptureConfig,
)


def test_begin_captureimageframes_defaults_to_png() -> None:
    cmd = parse_command("begin captureimageframes")
    assert cmd.kind is CommandKind.BEGIN
    assert cmd.mode is Mode.CAPTURE_IMAGE_FRAMES
    assert cmd.config == FrameCaptureConfig(ext="png")


def test_begin_captureimageframes_mime_jpg() -> None:
    cmd = parse_command("begin captureimageframes -mime jpg")
    assert cmd.config == FrameCaptureConfig(ext="jpg")


def test_begin_captureimageframes_ignores_unknown_mime() -> None:
    cmd = parse_command("begin captureimageframes -mime gif")
    assert cmd.config == FrameCaptureConfig(ext="png")


def test_begin_audioupload_uses_wav() -> None:
    cmd = parse_command("begin audioupload")
    assert cmd.mode is Mode.AUDIO_UPLOAD
    assert cmd.config == AudioUploadConfig(ext="wav")


def test_begin_captureaudiosamples_parses_options() -> None:
    cmd = parse_command("begin captureaudiosamples -f pcm -r 44100 -b 24 -mono -be")
    assert cmd.mode is Mode.CAPTURE_AUDIO_SAMPLES
    assert cmd.config == SampleCaptureConfig(fmt="pcm", rate=44100, bits=24, mono=True, little_endian=False)


def test_begin_captureaudiosamples_defaults() -> None:
    cmd = parse_command("begin captureaudiosamples -r nope")
    assert cmd.config == SampleCaptureConfig()


@pytest.mark.parametrize(
    ("raw", "kind", "peer"),
    [
        ("give audio to 3", CommandKind.GIVE_AUDIO, 3),
        ("accept audio from 12", CommandKind.ACCEPT_AUDIO, 12),
        ("accept audio from   7  ", CommandKind.ACCEPT_AUDIO, 7),
    ],
)
def test_handoff_commands(raw: str, kind: CommandKind, peer: int) -> None:
    cmd = parse_command(raw)
    assert cmd.kind is kind
    assert cmd.peer_id == peer


def test_end_and_export() -> None:
    assert parse_command("end").kind is CommandKind.END
    assert parse_command("export").kind is CommandKind.EXPORT
    assert parse_command("export -format mp4").kind is CommandKind.EXPORT


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "hello",
        "begin",
        "begin command",
        "begin somethingelse",
        "give audio to",
        "give audio to abc",
        "accept audio from -1",
        "End",
        "end now",
    ],
)
def test_invalid_commands_raise(raw: str) -> None:
    with pytest.raises(CommandError):
        parse_command(raw)
