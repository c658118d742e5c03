"""Serial bridge between a booted guest and the register bank."""

from __future__ import annotations

import logging
from typing import Optional

from piforge.core.register_bank import RegisterBank
from piforge.core.scheduler import Scheduler, TimerHandle
from piforge.serial.guest import GuestEvent, GuestMachine, TerminalSink
from piforge.serial.tags import (
    DEFAULT_WINDOW,
    GpioModeTag,
    GpioOutTag,
    SerialTag,
    SerialTagDecoder,
)

logger = logging.getLogger(__name__)

INJECT_DELAY_MS = 5000
"""Settling time between the guest reporting ready and the first keystroke."""

READY_LINE = "EMULATOR: [OK] READY"

# Shell lines typed into the guest once it has settled. They install tiny
# scripts that print GPIO tags, which the decoder turns back into bank writes.
INJECTION_COMMANDS: tuple[str, ...] = (
    r'echo "#!/bin/sh" > /usr/bin/gpio-mode',
    r'echo "echo \"[GPIO_MODE: \$1 \$2]\"" >> /usr/bin/gpio-mode',
    r"chmod +x /usr/bin/gpio-mode",
    r'echo "#!/bin/sh" > /usr/bin/gpio-write',
    r'echo "echo \"[GPIO_OUT: \$1 \$2]\"" >> /usr/bin/gpio-write',
    r"chmod +x /usr/bin/gpio-write",
    r'echo "#!/bin/sh" > /usr/bin/gpio-blink',
    r'echo "while [ \$2 -gt 0 ]; do gpio-write \$1 1; sleep 0.5; '
    r"gpio-write \$1 0; sleep 0.5; num=\$(( \$2 - 1 )); set -- \$1 \$num; "
    r'done" >> /usr/bin/gpio-blink',
    r"chmod +x /usr/bin/gpio-blink",
    "clear",
)


class SerialBridge:
    """Connects one guest to the bank and the terminal.

    Guest output is echoed to the terminal and scanned for GPIO tags. When the
    guest reports ready, the helper scripts are typed in once, after
    ``inject_delay_ms``.
    """

    def __init__(
        self,
        bank: RegisterBank,
        guest: GuestMachine,
        terminal: TerminalSink,
        scheduler: Scheduler,
        inject_delay_ms: int = INJECT_DELAY_MS,
        buffer_size: int = DEFAULT_WINDOW,
    ):
        self._bank = bank
        self._guest = guest
        self._terminal = terminal
        self._scheduler = scheduler
        self._inject_delay_ms = inject_delay_ms
        self._decoder = SerialTagDecoder(buffer_size)
        self._inject_timer: Optional[TimerHandle] = None
        self._injected = False
        self._closed = False

        guest.add_listener(GuestEvent.OUTPUT_CHAR, self.on_output_char)
        guest.add_listener(GuestEvent.READY, self.on_ready)

    @property
    def injected(self) -> bool:
        return self._injected

    @property
    def decoder(self) -> SerialTagDecoder:
        return self._decoder

    def on_output_char(self, char: str) -> None:
        if self._closed:
            return
        self._terminal.write(char)
        tag = self._decoder.feed(char)
        if tag is not None:
            self.apply(tag)

    def apply(self, tag: SerialTag) -> None:
        """Turn a decoded tag into a bank operation."""
        if isinstance(tag, GpioOutTag):
            self._bank.digital_write(tag.pin, tag.value)
        elif isinstance(tag, GpioModeTag):
            self._bank.set_mode(tag.pin, tag.mode)

    def on_ready(self) -> None:
        if self._closed:
            return
        self._terminal.writeln(READY_LINE)
        if self._injected or self._inject_timer is not None:
            return
        logger.info("Guest ready, injecting GPIO helpers in %d ms", self._inject_delay_ms)
        self._inject_timer = self._scheduler.call_later(self._inject_delay_ms, self.inject)

    def inject(self) -> None:
        """Type every helper command into the guest, one character at a time."""
        self._inject_timer = None
        if self._closed or self._injected:
            return
        self._injected = True
        for command in INJECTION_COMMANDS:
            for char in command:
                self._guest.serial_send(char)
            self._guest.serial_send("\n")
        logger.debug("Injected %d commands", len(INJECTION_COMMANDS))

    def close(self) -> None:
        """Cancel a pending injection and stop reacting to the guest."""
        self._closed = True
        if self._inject_timer is not None:
            self._inject_timer.cancel()
            self._inject_timer = None
