"""Interaction mode controller.

Decides what a pointer gesture on the workbench means. The same click on a
pin starts a wire in WIRE mode and does nothing in DRAG mode; the same press
on a component body starts a move in DRAG mode and does nothing in WIRE mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from piforge.circuit.model import HOST_ID, Circuit, Point, Wire, is_host
from piforge.circuit.resolver import ConnectivityResolver

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    DRAG = "drag"
    WIRE = "wire"
    ERASE = "erase"


@dataclass(frozen=True)
class WireDraft:
    """Half-finished wire, pending its second endpoint."""

    from_id: str
    from_pin: str
    cursor: Point

    def starts_at(self, component_id: str, pin_id: str) -> bool:
        return self.from_id == component_id and self.from_pin == pin_id


@dataclass
class _DragState:
    target_id: str
    last: Point


class InteractionController:
    """Gesture gate for one workbench."""

    def __init__(self, circuit: Circuit, resolver: ConnectivityResolver):
        self._circuit = circuit
        self._resolver = resolver
        self._mode = InteractionMode.DRAG
        self._draft: WireDraft | None = None
        self._drag: _DragState | None = None

    @property
    def mode(self) -> InteractionMode:
        return self._mode

    @property
    def draft(self) -> WireDraft | None:
        return self._draft

    @property
    def dragging(self) -> str | None:
        """Id of the component (or HOST_ID for the board) being dragged."""
        return self._drag.target_id if self._drag else None

    def set_mode(self, mode: InteractionMode) -> None:
        if mode is self._mode:
            return
        if self._draft is not None:
            logger.debug("Discarding wire draft from %s:%s", self._draft.from_id, self._draft.from_pin)
        self._draft = None
        self._drag = None
        self._mode = mode

    # ==========================================================
    # WIRE mode
    # ==========================================================

    def pin_clicked(
        self, component_id: str, pin_id: str, cursor: Point | None = None
    ) -> Wire | None:
        """Two-phase wire protocol. Returns the committed wire, if any."""
        if self._mode is not InteractionMode.WIRE:
            return None

        if self._draft is None:
            self._circuit.check_endpoint(component_id, pin_id)
            self._draft = WireDraft(component_id, pin_id, cursor or Point(0, 0))
            return None

        draft = self._draft
        self._draft = None
        if draft.starts_at(component_id, pin_id):
            return None
        return self._circuit.add_wire(draft.from_id, draft.from_pin, component_id, pin_id)

    def canvas_clicked(self) -> None:
        """Click on empty canvas: abandon a pending draft."""
        self._draft = None

    # ==========================================================
    # DRAG mode
    # ==========================================================

    def pointer_down(self, target_id: str, position: Point) -> bool:
        """Start moving a component or, with HOST_ID, the board."""
        if self._mode is not InteractionMode.DRAG:
            return False
        if not is_host(target_id) and self._circuit.get_component(target_id) is None:
            return False
        self._drag = _DragState(HOST_ID if is_host(target_id) else target_id, position)
        return True

    def pointer_moved(self, position: Point) -> None:
        if self._draft is not None:
            self._draft = WireDraft(self._draft.from_id, self._draft.from_pin, position)

        if self._drag is None:
            return
        dx = position.x - self._drag.last.x
        dy = position.y - self._drag.last.y
        self._drag.last = position
        if self._drag.target_id == HOST_ID:
            self._circuit.move_board(dx, dy)
        elif self._circuit.get_component(self._drag.target_id) is not None:
            self._circuit.move_component(self._drag.target_id, dx, dy)

    def pointer_up(self) -> None:
        self._drag = None

    # ==========================================================
    # ERASE mode
    # ==========================================================

    def delete_component(self, component_id: str) -> bool:
        if self._mode is not InteractionMode.ERASE:
            return False
        if self._circuit.get_component(component_id) is None:
            return False
        self._circuit.remove_component(component_id)
        return True

    def delete_wire(self, wire_id: str) -> bool:
        if self._mode is not InteractionMode.ERASE:
            return False
        return self._circuit.remove_wire(wire_id)

    # ==========================================================
    # Input components
    # ==========================================================

    def button_pressed(self, component_id: str) -> list[int]:
        return self._press(component_id, True)

    def button_released(self, component_id: str) -> list[int]:
        return self._press(component_id, False)

    def _press(self, component_id: str, pressed: bool) -> list[int]:
        if self._mode is InteractionMode.ERASE:
            return []
        return self._resolver.press(
            component_id, self._circuit.wires_for(component_id), pressed
        )
