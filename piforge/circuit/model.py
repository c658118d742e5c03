"""Wiring graph: placed components, wires and the host board."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from piforge.circuit.catalog import (
    ComponentCatalog,
    ComponentProps,
    ComponentType,
    default_catalog,
)
from piforge.core.exceptions import CircuitError
from piforge.core.ids import IdAllocator
from piforge.core.register_bank import NUM_PINS

logger = logging.getLogger(__name__)

HOST_ID = "host"
"""Pseudo-component id addressing the register bank."""

HOST_ALIASES = frozenset({HOST_ID, "rpi"})

DEFAULT_WIRE_COLORS = ("#ef4444", "#3b82f6", "#10b981", "#f59e0b", "#8b5cf6")


def is_host(component_id: str) -> bool:
    return component_id in HOST_ALIASES


def parse_host_pin(pin_id: str, num_pins: int = NUM_PINS) -> int | None:
    """Return the GPIO index named by a host pin id, or None if it is not one."""
    text = str(pin_id).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    pin = int(text)
    return pin if 0 <= pin < num_pins else None


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def translated(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)


@dataclass
class Component:
    id: str
    type: ComponentType
    position: Point
    props: ComponentProps


@dataclass(frozen=True)
class Wire:
    """Undirected edge; from/to only record the order the user clicked."""

    id: str
    from_id: str
    from_pin: str
    to_id: str
    to_pin: str
    color: str

    def touches(self, component_id: str) -> bool:
        return self.from_id == component_id or self.to_id == component_id

    def other_end(self, component_id: str) -> tuple[str, str]:
        """Endpoint opposite ``component_id``."""
        if self.from_id == component_id:
            return self.to_id, self.to_pin
        return self.from_id, self.from_pin


class Circuit:
    """Components and wires of one canvas session.

    Wire endpoints are validated on creation. Removing a component removes
    every wire that touches it so no wire references a missing pin.
    """

    def __init__(
        self,
        catalog: ComponentCatalog | None = None,
        wire_colors: Iterable[str] = DEFAULT_WIRE_COLORS,
        board_position: Point = Point(100, 100),
    ):
        self.catalog = catalog or default_catalog()
        self._colors = tuple(wire_colors) or DEFAULT_WIRE_COLORS
        self._color_cycle = itertools.cycle(self._colors)
        self._component_ids = IdAllocator("comp")
        self._wire_ids = IdAllocator("wire")
        self._components: dict[str, Component] = {}
        self._wires: list[Wire] = []
        self.board_position = board_position

    @property
    def components(self) -> list[Component]:
        return list(self._components.values())

    @property
    def wires(self) -> list[Wire]:
        return list(self._wires)

    # ==========================================================
    # Components
    # ==========================================================

    def add_component(
        self,
        component_type: ComponentType,
        position: Point,
        props: Optional[ComponentProps] = None,
    ) -> Component:
        if props is None:
            props = self.catalog.default_props(component_type)
        else:
            self.catalog.check_props(component_type, props)

        component = Component(
            id=self._component_ids.next_id(),
            type=component_type,
            position=position,
            props=props,
        )
        self._components[component.id] = component
        logger.debug("Placed %s as %s", component_type.value, component.id)
        return component

    def get_component(self, component_id: str) -> Component | None:
        return self._components.get(component_id)

    def require_component(self, component_id: str) -> Component:
        component = self._components.get(component_id)
        if component is None:
            raise CircuitError(
                f"Unknown component '{component_id}'", component_id=component_id
            )
        return component

    def move_component(self, component_id: str, dx: float, dy: float) -> None:
        component = self.require_component(component_id)
        component.position = component.position.translated(dx, dy)

    def move_board(self, dx: float, dy: float) -> None:
        self.board_position = self.board_position.translated(dx, dy)

    def update_props(self, component_id: str, **changes) -> ComponentProps:
        """Replace fields of a component's props record (e.g. ``color=...``)."""
        component = self.require_component(component_id)
        try:
            props = replace(component.props, **changes)
        except TypeError as exc:
            raise CircuitError(str(exc), component_id=component_id) from exc
        component.props = props
        return props

    def remove_component(self, component_id: str) -> list[Wire]:
        """Delete a component and return the wires removed with it."""
        self.require_component(component_id)
        del self._components[component_id]

        removed = [w for w in self._wires if w.touches(component_id)]
        self._wires = [w for w in self._wires if not w.touches(component_id)]
        logger.debug(
            "Removed %s and %d incident wire(s)", component_id, len(removed)
        )
        return removed

    # ==========================================================
    # Wires
    # ==========================================================

    def has_pin(self, component_id: str, pin_id: str) -> bool:
        if is_host(component_id):
            return parse_host_pin(pin_id) is not None
        component = self._components.get(component_id)
        if component is None:
            return False
        return pin_id in self.catalog.get(component.type).pins

    def check_endpoint(self, component_id: str, pin_id: str) -> None:
        if is_host(component_id):
            if parse_host_pin(pin_id) is None:
                raise CircuitError(
                    f"Host pin '{pin_id}' is out of range [0-{NUM_PINS - 1}]",
                    component_id=component_id,
                    pin=pin_id,
                )
            return
        component = self.require_component(component_id)
        if pin_id not in self.catalog.get(component.type).pins:
            raise CircuitError(
                f"{component.type.value} {component_id} has no pin '{pin_id}'",
                component_id=component_id,
                pin=pin_id,
            )

    def add_wire(
        self,
        from_id: str,
        from_pin: str,
        to_id: str,
        to_pin: str,
        color: Optional[str] = None,
    ) -> Wire:
        self.check_endpoint(from_id, from_pin)
        self.check_endpoint(to_id, to_pin)

        wire = Wire(
            id=self._wire_ids.next_id(),
            from_id=from_id,
            from_pin=from_pin,
            to_id=to_id,
            to_pin=to_pin,
            color=color or next(self._color_cycle),
        )
        self._wires.append(wire)
        logger.debug(
            "Wired %s:%s -> %s:%s as %s", from_id, from_pin, to_id, to_pin, wire.id
        )
        return wire

    def get_wire(self, wire_id: str) -> Wire | None:
        return next((w for w in self._wires if w.id == wire_id), None)

    def remove_wire(self, wire_id: str) -> bool:
        wire = self.get_wire(wire_id)
        if wire is None:
            return False
        self._wires.remove(wire)
        return True

    def wires_for(self, component_id: str) -> list[Wire]:
        """Wires touching ``component_id``, in creation order."""
        return [w for w in self._wires if w.touches(component_id)]

    def clear(self) -> None:
        """Remove every component and wire. Ids keep counting up."""
        self._components.clear()
        self._wires.clear()
