"""Simulation session: one bank, one circuit, one console per workbench."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from piforge.circuit.catalog import ComponentCatalog
from piforge.circuit.interaction import InteractionController
from piforge.circuit.model import DEFAULT_WIRE_COLORS, Circuit, Point
from piforge.circuit.resolver import ComponentState, ConnectivityResolver
from piforge.core.register_bank import RegisterBank
from piforge.core.scheduler import Scheduler, defer_with
from piforge.serial.console import Console
from piforge.serial.guest import GuestFactory, TerminalSink
from piforge.utils.config_loader import BoardModelConfig, PiforgeConfig, get_config

logger = logging.getLogger(__name__)

PinWatcher = Callable[[int, int], None]
"""Receives (pin, value) for every accepted write on any pin."""


class SimulationSession:
    """Explicit context object wiring the simulator parts together.

    The bank's deferred-write hook is bound to ``scheduler`` when one is
    given, so writes requested from inside a listener land on the next
    event-loop turn.
    """

    def __init__(
        self,
        config: PiforgeConfig | None = None,
        scheduler: Scheduler | None = None,
        catalog: ComponentCatalog | None = None,
    ):
        self.config = config or get_config()
        self.scheduler = scheduler
        self.bank = RegisterBank(defer=defer_with(scheduler) if scheduler else None)
        self.circuit = Circuit(
            catalog=catalog,
            wire_colors=self.config.wire_colors or DEFAULT_WIRE_COLORS,
            board_position=Point(self.config.canvas.board_x, self.config.canvas.board_y),
        )
        self.resolver = ConnectivityResolver(self.bank)
        self.interaction = InteractionController(self.circuit, self.resolver)
        self._board_name = self.config.default_board

    @property
    def board_model(self) -> BoardModelConfig:
        return self.config.board(self._board_name)

    def set_board_model(self, name: str) -> BoardModelConfig:
        """Switch the drawn board. Wires and pin state are kept."""
        model = self.config.board(name)
        self._board_name = name
        logger.info("Board model set to %s", model.label)
        return model

    def component_states(self) -> dict[str, ComponentState]:
        return self.resolver.resolve_all(self.circuit)

    def watch_pins(self, callback: PinWatcher) -> None:
        """Subscribe ``callback`` to every pin of the bank."""
        for pin in range(self.bank.num_pins):
            self.bank.on_pin_change(pin, _PinForwarder(pin, callback))

    def create_console(
        self, terminal: TerminalSink, guest_factory: Optional[GuestFactory] = None
    ) -> Console:
        if self.scheduler is None:
            raise ValueError("A scheduler is required to drive the console timers")
        return Console(
            self.bank,
            terminal,
            self.scheduler,
            serial_config=self.config.serial,
            guest_factory=guest_factory,
        )


class _PinForwarder:
    """Binds a pin index to a (pin, value) watcher.

    Equality makes repeated watch_pins() calls with the same callback
    collapse to one registration per pin.
    """

    def __init__(self, pin: int, callback: PinWatcher):
        self.pin = pin
        self.callback = callback

    def __call__(self, value: int) -> None:
        self.callback(self.pin, value)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, _PinForwarder)
            and other.pin == self.pin
            and other.callback == self.callback
        )

    def __hash__(self) -> int:
        return hash((self.pin, self.callback))
