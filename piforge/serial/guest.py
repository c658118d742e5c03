"""Interfaces between the console and a guest virtual machine.

A guest is anything that produces a serial character stream and accepts
keystrokes: the QEMU process in the GUI, or a fake in tests.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol


class GuestEvent(Enum):
    OUTPUT_CHAR = "output_char"
    """One character from the guest serial port. Callback gets the char."""

    READY = "ready"
    """The guest process is running. Callback takes no arguments."""

    FAILED = "failed"
    """The guest could not start or died. Callback gets a reason string."""


GuestCallback = Callable[..., None]


class GuestMachine(Protocol):
    """Virtual machine reachable only through its serial port."""

    def add_listener(self, event: GuestEvent, callback: GuestCallback) -> None:
        ...

    def start(self) -> None:
        ...

    def serial_send(self, data: str) -> None:
        ...

    def stop(self) -> None:
        ...


GuestFactory = Callable[[], GuestMachine]
"""Builds a guest. May raise GuestStartError."""


class TerminalSink(Protocol):
    """Text surface the console writes to."""

    def write(self, text: str) -> None:
        ...

    def writeln(self, text: str = "") -> None:
        ...

    def clear(self) -> None:
        ...


class GuestEventEmitter:
    """Listener bookkeeping shared by guest implementations."""

    def __init__(self):
        self._listeners: dict[GuestEvent, list[GuestCallback]] = {
            event: [] for event in GuestEvent
        }

    def add_listener(self, event: GuestEvent, callback: GuestCallback) -> None:
        if callback not in self._listeners[event]:
            self._listeners[event].append(callback)

    def emit(self, event: GuestEvent, *args) -> None:
        for callback in tuple(self._listeners[event]):
            callback(*args)
