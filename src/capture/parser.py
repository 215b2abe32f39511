"""Text command parsing for the capture protocol.

Commands are space-delimited and case-sensitive:

    begin audioupload
    begin captureimageframes [-mime png|jpg]
    begin captureaudiosamples [-f pcm] [-r <rate>] [-b <bits>] [-stereo|-mono] [-le|-be]
    end
    export
    give audio to <id>
    accept audio from <id>
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass

from src.state.errors import CommandError
from src.config.staging import FRAME_EXTENSIONS

from .modes import (
    Mode,
    ModeConfig,
    AudioUploadConfig,
    FrameCaptureConfig,
    SampleCaptureConfig,
)


class CommandKind(str, Enum):
    BEGIN = "begin"
    END = "end"
    EXPORT = "export"
    GIVE_AUDIO = "give audio to"
    ACCEPT_AUDIO = "accept audio from"


@dataclass(frozen=True, slots=True)
class Command:
    kind: CommandKind
    mode: Mode | None = None
    config: ModeConfig | None = None
    peer_id: int | None = None


def _parse_options(tokens: list[str]) -> dict[str, str | None]:
    """Collect ``-name [value]`` pairs; a flag without a value maps to None."""
    options: dict[str, str | None] = {}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if not token.startswith("-") or len(token) < 2:
            continue
        value: str | None = None
        if i < len(tokens) and not tokens[i].startswith("-"):
            value = tokens[i]
            i += 1
        options[token[1:]] = value
    return options


def _to_int(raw: str | None, default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


def _frame_config(options: dict[str, str | None]) -> FrameCaptureConfig:
    mime = options.get("mime")
    if mime in FRAME_EXTENSIONS:
        return FrameCaptureConfig(ext=mime)
    return FrameCaptureConfig()


def _sample_config(options: dict[str, str | None]) -> SampleCaptureConfig:
    defaults = SampleCaptureConfig()
    mono = defaults.mono
    if "mono" in options:
        mono = True
    elif "stereo" in options:
        mono = False
    little_endian = defaults.little_endian
    if "be" in options:
        little_endian = False
    elif "le" in options:
        little_endian = True
    return SampleCaptureConfig(
        fmt=options.get("f") or defaults.fmt,
        rate=_to_int(options.get("r"), defaults.rate),
        bits=_to_int(options.get("b"), defaults.bits),
        mono=mono,
        little_endian=little_endian,
    )


def _parse_begin(tokens: list[str]) -> Command:
    if len(tokens) < 2:
        raise CommandError("begin requires a mode")
    try:
        mode = Mode(tokens[1])
    except ValueError as exc:
        raise CommandError(f"unknown mode '{tokens[1]}'") from exc
    if mode is Mode.COMMAND:
        raise CommandError("cannot begin command mode")

    options = _parse_options(tokens[2:])
    config: ModeConfig
    if mode is Mode.CAPTURE_IMAGE_FRAMES:
        config = _frame_config(options)
    elif mode is Mode.AUDIO_UPLOAD:
        config = AudioUploadConfig()
    else:
        config = _sample_config(options)
    return Command(kind=CommandKind.BEGIN, mode=mode, config=config)


def _parse_peer(kind: CommandKind, tokens: list[str]) -> Command:
    if len(tokens) < 4:
        raise CommandError(f"'{kind.value}' requires a connection id")
    try:
        peer_id = int(tokens[3])
    except ValueError as exc:
        raise CommandError(f"invalid connection id '{tokens[3]}'") from exc
    if peer_id < 0:
        raise CommandError(f"invalid connection id '{tokens[3]}'")
    return Command(kind=kind, peer_id=peer_id)


def parse_command(raw: str) -> Command:
    tokens = raw.split()
    if not tokens:
        raise CommandError("empty command")

    head = tokens[0]
    if head == "begin":
        return _parse_begin(tokens)
    if head == "end" and len(tokens) == 1:
        return Command(kind=CommandKind.END)
    if head == "export":
        return Command(kind=CommandKind.EXPORT)
    if tokens[:3] == ["give", "audio", "to"]:
        return _parse_peer(CommandKind.GIVE_AUDIO, tokens)
    if tokens[:3] == ["accept", "audio", "from"]:
        return _parse_peer(CommandKind.ACCEPT_AUDIO, tokens)
    raise CommandError(f"unrecognized command '{head}'")


__all__ = ["Command", "CommandKind", "parse_command"]
