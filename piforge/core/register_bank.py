"""GPIO register bank.

The bank is the single source of truth for the simulated pin header. The
pseudo-shell, the serial bridge and the connectivity resolver all operate on
one explicitly constructed instance.

Operations on an out-of-range pin, or writes that do not match the pin's
mode, are silent no-ops. Guest scripts are noisy and partial, and hardware
drivers behave the same way.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from piforge.core.gpio_enums import PinMode

logger = logging.getLogger(__name__)

NUM_PINS = 28
"""BCM GPIO 0-27."""

MAX_PIN = NUM_PINS - 1

PinListener = Callable[[int], None]
"""Receives the written value (0/1) or, for PWM writes, the duty cycle."""

DeferHook = Callable[[Callable[[], None]], None]


@dataclass
class PinRegister:
    """Mutable storage for one pin."""

    mode: PinMode = PinMode.IN
    value: int = 0
    pwm_duty_cycle: Optional[int] = None


@dataclass(frozen=True)
class PinState:
    """Read-only snapshot of a pin register.

    pwm_duty_cycle is only reported while the pin is in PWM mode.
    """

    pin: int
    mode: PinMode
    value: int
    pwm_duty_cycle: Optional[int] = None


class RegisterBank:
    """Fixed-size bank of GPIO registers with change notification.

    Listener dispatch snapshots the listener list and is not reentrant: any
    mutation requested from inside a listener is queued and replayed once
    the dispatch has finished. When a ``defer`` hook is supplied (normally
    the event loop's call-soon), the queue is flushed on the next loop turn;
    otherwise it is flushed right after the outermost dispatch returns.
    Listeners that keep writing to each other's pins are not detected.
    """

    def __init__(self, num_pins: int = NUM_PINS, defer: DeferHook | None = None):
        self._registers = [PinRegister() for _ in range(num_pins)]
        self._listeners: dict[int, list[PinListener]] = {
            pin: [] for pin in range(num_pins)
        }
        self._defer = defer
        self._pending: deque[Callable[[], None]] = deque()
        self._dispatching = False
        self._flushing = False
        self._flush_scheduled = False

    @property
    def num_pins(self) -> int:
        return len(self._registers)

    # ==========================================================
    # Pin operations
    # ==========================================================

    def set_mode(self, pin: int, mode: PinMode | str) -> None:
        """Configure a pin. Unknown pins or mode words are ignored."""
        if self._queue_if_dispatching(self.set_mode, pin, mode):
            return
        reg = self._register(pin)
        parsed = PinMode.parse(mode)
        if reg is None or parsed is None:
            return
        reg.mode = parsed
        logger.debug("GPIO%d set to %s mode", pin, parsed.value)

    def digital_write(self, pin: int, value: int) -> None:
        """Drive an output pin. No-op unless the pin is in OUT mode."""
        if self._queue_if_dispatching(self.digital_write, pin, value):
            return
        reg = self._register(pin)
        if reg is None or reg.mode is not PinMode.OUT:
            return
        reg.value = 1 if value else 0
        logger.debug("GPIO%d set to %d", pin, reg.value)
        self._dispatch(pin, reg.value)

    def digital_read(self, pin: int) -> int:
        """Return the pin level regardless of mode (0 for unknown pins)."""
        reg = self._register(pin)
        return reg.value if reg is not None else 0

    def set_pwm(self, pin: int, duty_cycle: int) -> None:
        """Set the duty cycle (0-100) of a PWM pin.

        The digital value follows the duty cycle (non-zero -> 1) for readers
        that only look at ``value``. Listeners receive the duty cycle.
        """
        if self._queue_if_dispatching(self.set_pwm, pin, duty_cycle):
            return
        reg = self._register(pin)
        if reg is None or reg.mode is not PinMode.PWM:
            return
        duty = max(0, min(100, int(duty_cycle)))
        reg.pwm_duty_cycle = duty
        reg.value = 1 if duty > 0 else 0
        logger.debug("GPIO%d PWM set to %d%%", pin, duty)
        self._dispatch(pin, duty)

    def drive_input(self, pin: int, value: int) -> None:
        """Apply an external level to an input pin (e.g. a pressed button).

        No-op unless the pin is in IN mode.
        """
        if self._queue_if_dispatching(self.drive_input, pin, value):
            return
        reg = self._register(pin)
        if reg is None or reg.mode is not PinMode.IN:
            return
        reg.value = 1 if value else 0
        logger.debug("GPIO%d driven to %d", pin, reg.value)
        self._dispatch(pin, reg.value)

    def on_pin_change(self, pin: int, listener: PinListener) -> None:
        """Register a listener for accepted writes on ``pin``.

        Listeners run synchronously, in registration order. Registering the
        same callable twice keeps a single registration.
        """
        listeners = self._listeners.get(pin)
        if listeners is not None and listener not in listeners:
            listeners.append(listener)

    def get_pin_state(self, pin: int) -> PinState | None:
        reg = self._register(pin)
        if reg is None:
            return None
        return self._snapshot(pin, reg)

    def get_all_pins(self) -> list[PinState]:
        """Snapshot of every register, ordered by pin index."""
        return [self._snapshot(pin, reg) for pin, reg in enumerate(self._registers)]

    # ==========================================================
    # Pending-action queue
    # ==========================================================

    def flush_pending(self) -> None:
        """Replay mutations that listeners requested during a dispatch."""
        self._flush_scheduled = False
        if self._flushing:
            return
        self._flushing = True
        try:
            while self._pending:
                batch = list(self._pending)
                self._pending.clear()
                for action in batch:
                    action()
                if self._defer is not None:
                    # Anything queued by this batch belongs to the next turn.
                    break
        finally:
            self._flushing = False
        if self._pending:
            self._schedule_flush()

    # Private helpers -------------------------------------------------------

    def _register(self, pin: int) -> PinRegister | None:
        if isinstance(pin, bool) or not isinstance(pin, int):
            return None
        if not 0 <= pin < len(self._registers):
            return None
        return self._registers[pin]

    @staticmethod
    def _snapshot(pin: int, reg: PinRegister) -> PinState:
        duty = reg.pwm_duty_cycle if reg.mode is PinMode.PWM else None
        return PinState(pin=pin, mode=reg.mode, value=reg.value, pwm_duty_cycle=duty)

    def _queue_if_dispatching(self, method: Callable[..., None], *args) -> bool:
        if not self._dispatching:
            return False
        self._pending.append(partial(method, *args))
        return True

    def _dispatch(self, pin: int, value: int) -> None:
        listeners = tuple(self._listeners[pin])
        self._dispatching = True
        try:
            for listener in listeners:
                listener(value)
        finally:
            self._dispatching = False
        if self._pending:
            self._schedule_flush()

    def _schedule_flush(self) -> None:
        if self._defer is None:
            self.flush_pending()
            return
        if not self._flush_scheduled:
            self._flush_scheduled = True
            self._defer(self.flush_pending)
