"""Workbench geometry: pin positions, wire curves and hit testing.

Pure functions over the circuit model so they can be tested without Qt.
All coordinates are scene pixels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from piforge.circuit.catalog import ComponentType
from piforge.circuit.model import HOST_ID, Circuit, Component, Point, Wire
from piforge.core.register_bank import NUM_PINS
from piforge.utils.config_loader import BoardModelConfig

PIN_RADIUS = 6.0
WIRE_HIT_DISTANCE = 6.0
WIRE_BEND = 50.0
"""Vertical pull of the wire curve's control points."""

COMPONENT_SIZES: dict[ComponentType, tuple[float, float]] = {
    ComponentType.LED: (60, 64),
    ComponentType.RESISTOR: (72, 32),
    ComponentType.BUTTON: (60, 64),
    ComponentType.SERVO: (80, 64),
    ComponentType.BUZZER: (60, 64),
}

# Pin centres relative to the component origin.
PIN_OFFSETS: dict[ComponentType, dict[str, tuple[float, float]]] = {
    ComponentType.LED: {"p1": (18, 51), "p2": (42, 51)},
    ComponentType.RESISTOR: {"p1": (11, 21), "p2": (61, 21)},
    ComponentType.BUTTON: {"p1": (18, 51), "p2": (42, 51)},
    ComponentType.SERVO: {"sig": (22, 51), "vcc": (40, 51), "gnd": (58, 51)},
    ComponentType.BUZZER: {"p1": (18, 51), "p2": (42, 51)},
}


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains(self, point: Point) -> bool:
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )


def board_rect(board: BoardModelConfig, origin: Point) -> Rect:
    return Rect(origin.x, origin.y, board.width, board.height)


def host_pin_position(board: BoardModelConfig, origin: Point, pin: int) -> Point:
    """Centre of GPIO ``pin`` on the header (two rows, pin order along the row)."""
    header = board.header
    row, col = divmod(pin, 2)
    return Point(
        origin.x + header.x + row * header.pitch + header.offset,
        origin.y + header.y + col * header.pitch + header.offset,
    )


def component_rect(component: Component) -> Rect:
    width, height = COMPONENT_SIZES.get(component.type, (60, 60))
    return Rect(component.position.x, component.position.y, width, height)


def component_pin_position(component: Component, pin_id: str) -> Point:
    offset = PIN_OFFSETS.get(component.type, {}).get(pin_id, (30, 30))
    return component.position.translated(*offset)


def pin_position(
    circuit: Circuit, board: BoardModelConfig, component_id: str, pin_id: str
) -> Optional[Point]:
    """Scene position of a wire endpoint, or None if it does not exist."""
    if not circuit.has_pin(component_id, pin_id):
        return None
    if component_id == HOST_ID or circuit.get_component(component_id) is None:
        return host_pin_position(board, circuit.board_position, int(pin_id))
    return component_pin_position(circuit.require_component(component_id), pin_id)


def wire_controls(start: Point, end: Point) -> tuple[Point, Point, Point, Point]:
    """Cubic curve sagging below the start and rising into the end."""
    return (
        start,
        Point(start.x, start.y + WIRE_BEND),
        Point(end.x, end.y - WIRE_BEND),
        end,
    )


def bezier_point(controls: tuple[Point, Point, Point, Point], t: float) -> Point:
    p0, p1, p2, p3 = controls
    u = 1 - t
    a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
    return Point(
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def _distance(a: Point, b: Point) -> float:
    return ((a.x - b.x) ** 2 + (a.y - b.y) ** 2) ** 0.5


def wire_endpoints(
    circuit: Circuit, board: BoardModelConfig, wire: Wire
) -> Optional[tuple[Point, Point]]:
    start = pin_position(circuit, board, wire.from_id, wire.from_pin)
    end = pin_position(circuit, board, wire.to_id, wire.to_pin)
    if start is None or end is None:
        return None
    return start, end


# ==========================================================
# Hit testing
# ==========================================================


class HitKind(Enum):
    NONE = auto()
    PIN = auto()
    COMPONENT = auto()
    WIRE = auto()
    BOARD = auto()


@dataclass(frozen=True)
class Hit:
    kind: HitKind
    target_id: str = ""
    pin_id: str = ""


NO_HIT = Hit(HitKind.NONE)


def hit_test(circuit: Circuit, board: BoardModelConfig, point: Point) -> Hit:
    """Find what lies under ``point``. Pins win over bodies, bodies over wires.

    Components added later are drawn on top and are hit first.
    """
    components = list(reversed(circuit.components))

    for component in components:
        for pin_id in PIN_OFFSETS.get(component.type, {}):
            if _distance(component_pin_position(component, pin_id), point) <= PIN_RADIUS:
                return Hit(HitKind.PIN, component.id, pin_id)

    if board_rect(board, circuit.board_position).contains(point):
        for pin in range(NUM_PINS):
            if _distance(host_pin_position(board, circuit.board_position, pin), point) <= PIN_RADIUS:
                return Hit(HitKind.PIN, HOST_ID, str(pin))

    for component in components:
        if component_rect(component).contains(point):
            return Hit(HitKind.COMPONENT, component.id)

    for wire in reversed(circuit.wires):
        ends = wire_endpoints(circuit, board, wire)
        if ends is None:
            continue
        controls = wire_controls(*ends)
        for step in range(41):
            if _distance(bezier_point(controls, step / 40), point) <= WIRE_HIT_DISTANCE:
                return Hit(HitKind.WIRE, wire.id)

    if board_rect(board, circuit.board_position).contains(point):
        return Hit(HitKind.BOARD, HOST_ID)

    return NO_HIT
