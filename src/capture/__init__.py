from .modes import Mode, ModeFrame, ModeConfig
from .parser import Command, CommandKind, parse_command
from .machine import ConnectionStateMachine

__all__ = [
    "Command",
    "CommandKind",
    "ConnectionStateMachine",
    "Mode",
    "ModeConfig",
    "ModeFrame",
    "parse_command",
]
