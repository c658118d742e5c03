"""Serial side of the simulator: guest tags, bridge, pseudo-shell, console."""

from piforge.serial.bridge import INJECTION_COMMANDS, SerialBridge
from piforge.serial.console import Console, ConsoleMode
from piforge.serial.guest import (
    GuestEvent,
    GuestEventEmitter,
    GuestFactory,
    GuestMachine,
    TerminalSink,
)
from piforge.serial.shell import PseudoShell
from piforge.serial.tags import GpioModeTag, GpioOutTag, SerialTagDecoder

__all__ = [
    "Console",
    "ConsoleMode",
    "GuestEvent",
    "GuestEventEmitter",
    "GuestFactory",
    "GuestMachine",
    "TerminalSink",
    "SerialBridge",
    "INJECTION_COMMANDS",
    "PseudoShell",
    "SerialTagDecoder",
    "GpioOutTag",
    "GpioModeTag",
]
