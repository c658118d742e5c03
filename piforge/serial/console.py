"""Terminal-side orchestration of the pseudo-shell and the guest."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from piforge.core.register_bank import RegisterBank
from piforge.core.scheduler import Scheduler, TimerHandle
from piforge.serial.bridge import SerialBridge
from piforge.serial.guest import GuestEvent, GuestFactory, GuestMachine, TerminalSink
from piforge.serial.shell import PseudoShell
from piforge.utils.config_loader import SerialConfig

logger = logging.getLogger(__name__)

BANNER = (
    "SYSINIT: [OK] PIFORGE CORE",
    "SYSINIT: [OK] GUEST SUBSYSTEM",
    "╔════════════════════════════════════════════════════════╗",
    "║ PIFORGE TERMINAL                                       ║",
    '║ TYPE "gpio-help" FOR HARDWARE COMMANDS                 ║',
    "╚════════════════════════════════════════════════════════╝",
    "",
)

BOOT_LINE = ">>> BOOTING PIFORGE OS <<<"


class ConsoleMode(Enum):
    MOCK = "mock"
    GUEST = "guest"


class Console:
    """Routes keystrokes to the pseudo-shell or to a running guest.

    The console starts in MOCK mode. ``start_guest()`` (scheduled by
    ``open()`` when auto-boot is on) builds a guest through the factory and
    switches to GUEST mode. Any failure to build or run the guest is written
    to the terminal and the console drops back to MOCK mode.
    """

    def __init__(
        self,
        bank: RegisterBank,
        terminal: TerminalSink,
        scheduler: Scheduler,
        serial_config: SerialConfig | None = None,
        guest_factory: Optional[GuestFactory] = None,
    ):
        self._bank = bank
        self._terminal = terminal
        self._scheduler = scheduler
        self._config = serial_config or SerialConfig()
        self._guest_factory = guest_factory
        self._shell = PseudoShell(bank, terminal)

        self._mode = ConsoleMode.MOCK
        self._booting = False
        self._opened = False
        self._guest: Optional[GuestMachine] = None
        self._bridge: Optional[SerialBridge] = None
        self._boot_timer: Optional[TimerHandle] = None

    @property
    def mode(self) -> ConsoleMode:
        return self._mode

    @property
    def booting(self) -> bool:
        return self._booting

    @property
    def guest(self) -> Optional[GuestMachine]:
        return self._guest

    @property
    def bridge(self) -> Optional[SerialBridge]:
        return self._bridge

    @property
    def shell(self) -> PseudoShell:
        return self._shell

    def open(self) -> None:
        """Print the banner and prompt; schedule the first boot attempt once."""
        if self._opened:
            return
        self._opened = True
        for line in BANNER:
            self._terminal.writeln(line)
        self._shell.prompt()

        if self._config.auto_boot and self._guest_factory is not None:
            self._boot_timer = self._scheduler.call_later(
                self._config.boot_delay_ms, self._auto_boot
            )

    def handle_input(self, data: str) -> None:
        if self._mode is ConsoleMode.GUEST and self._guest is not None:
            self._guest.serial_send(data)
        else:
            self._shell.feed(data)

    def start_guest(self) -> bool:
        """Build and start a guest. Returns False if one could not be started."""
        if self._booting or self._mode is ConsoleMode.GUEST:
            return False
        if self._guest_factory is None:
            self._terminal.writeln("ERR: NO GUEST CONFIGURED")
            return False

        self._mode = ConsoleMode.GUEST
        self._booting = True
        self._shell.end_line()
        self._terminal.writeln(BOOT_LINE)

        try:
            guest = self._guest_factory()
            self._bridge = SerialBridge(
                self._bank,
                guest,
                self._terminal,
                self._scheduler,
                inject_delay_ms=self._config.inject_delay_ms,
                buffer_size=self._config.buffer_size,
            )
            guest.add_listener(GuestEvent.READY, self._on_guest_ready)
            guest.add_listener(GuestEvent.FAILED, self._on_guest_failed)
            self._guest = guest
            guest.start()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Guest init failed: %s", exc)
            self._terminal.writeln(f"ERR: GUEST INIT FAILED: {exc}")
            self._fall_back()
            return False

        if self._guest is None:
            # FAILED was emitted from inside start().
            return False
        logger.info("Guest started")
        return True

    def close(self) -> None:
        """Cancel timers and stop the guest. The console stays usable in MOCK mode."""
        if self._boot_timer is not None:
            self._boot_timer.cancel()
            self._boot_timer = None
        self._teardown_guest()
        self._mode = ConsoleMode.MOCK
        self._booting = False

    # Private helpers -------------------------------------------------------

    def _auto_boot(self) -> None:
        self._boot_timer = None
        self.start_guest()

    def _on_guest_ready(self) -> None:
        self._booting = False

    def _on_guest_failed(self, reason: str) -> None:
        if self._mode is not ConsoleMode.GUEST:
            return
        logger.warning("Guest failed: %s", reason)
        self._terminal.writeln(f"ERR: GUEST FAILED: {reason}")
        self._fall_back()

    def _fall_back(self) -> None:
        self._teardown_guest()
        self._mode = ConsoleMode.MOCK
        self._booting = False
        self._shell.prompt()

    def _teardown_guest(self) -> None:
        if self._bridge is not None:
            self._bridge.close()
            self._bridge = None
        guest, self._guest = self._guest, None
        if guest is not None:
            guest.stop()
