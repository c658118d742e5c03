"""Connectivity resolver.

Derives what a component observes (LED brightness, button level) by
following its wires to the host header and reading the register bank. The
result is recomputed on every call; nothing is cached between render passes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from piforge.circuit.model import Circuit, Wire, is_host, parse_host_pin
from piforge.core.gpio_enums import PinMode
from piforge.core.register_bank import RegisterBank


@dataclass(frozen=True)
class ComponentState:
    """Derived state of one component.

    Attributes:
        component_id: Component the state belongs to.
        level: 0/1 for digital pins, duty/100 for PWM pins, 0 when unconnected.
        host_pin: GPIO index that produced ``level``, or None.
    """

    component_id: str
    level: float
    host_pin: Optional[int] = None


class ConnectivityResolver:
    def __init__(self, bank: RegisterBank):
        self._bank = bank

    def host_pins(self, component_id: str, wires: Iterable[Wire]) -> Iterator[int]:
        """GPIO indices directly wired to ``component_id``, in wire order."""
        for wire in wires:
            if not wire.touches(component_id):
                continue
            other_id, other_pin = wire.other_end(component_id)
            if not is_host(other_id):
                continue
            pin = parse_host_pin(other_pin, self._bank.num_pins)
            if pin is not None:
                yield pin

    def resolve_state(self, component_id: str, wires: Iterable[Wire]) -> ComponentState:
        """Output-side state: first host wire on an OUT or PWM pin wins."""
        for pin in self.host_pins(component_id, wires):
            state = self._bank.get_pin_state(pin)
            if state is None:
                continue
            if state.mode is PinMode.OUT:
                return ComponentState(component_id, float(state.value), pin)
            if state.mode is PinMode.PWM and state.pwm_duty_cycle is not None:
                return ComponentState(component_id, state.pwm_duty_cycle / 100, pin)
        return ComponentState(component_id, 0.0)

    def resolve(self, component_id: str, wires: Iterable[Wire]) -> float:
        """Brightness/level fraction in [0, 1] for an indicator or actuator."""
        return self.resolve_state(component_id, wires).level

    def input_state(self, component_id: str, wires: Iterable[Wire]) -> ComponentState:
        """Level of the first host pin wired to an input component."""
        for pin in self.host_pins(component_id, wires):
            return ComponentState(component_id, float(self._bank.digital_read(pin)), pin)
        return ComponentState(component_id, 0.0)

    def press(self, component_id: str, wires: Iterable[Wire], pressed: bool) -> list[int]:
        """Drive every wired host pin that is in IN mode; return the pins driven."""
        driven = []
        for pin in self.host_pins(component_id, wires):
            state = self._bank.get_pin_state(pin)
            if state is not None and state.mode is PinMode.IN:
                self._bank.drive_input(pin, 1 if pressed else 0)
                driven.append(pin)
        return driven

    def resolve_all(self, circuit: Circuit) -> dict[str, ComponentState]:
        """Evaluate every component of ``circuit`` independently."""
        wires = circuit.wires
        states = {}
        for component in circuit.components:
            role = circuit.catalog.get(component.type).role
            if role == "input":
                states[component.id] = self.input_state(component.id, wires)
            else:
                states[component.id] = self.resolve_state(component.id, wires)
        return states
