"""Workbench canvas: board, components and wires over one scene."""

from __future__ import annotations

import logging

from PySide6 import QtCore, QtGui, QtWidgets

from piforge.circuit.catalog import ComponentType
from piforge.circuit.interaction import InteractionMode
from piforge.circuit.model import HOST_ID, Point, is_host
from piforge.core.exceptions import CircuitError
from piforge.session import SimulationSession
from piforge.utils.config_loader import BoardModelConfig
from piforge_gui import layout
from piforge_gui.components.base import ComponentGraphicsItem
from piforge_gui.components.board import BoardItem
from piforge_gui.components.registry import ComponentItemRegistry, default_registry

logger = logging.getLogger(__name__)

DRAFT_COLOR = "#fbbf24"


def wire_path(start: Point, end: Point) -> QtGui.QPainterPath:
    p0, c1, c2, p3 = layout.wire_controls(start, end)
    path = QtGui.QPainterPath(QtCore.QPointF(p0.x, p0.y))
    path.cubicTo(
        QtCore.QPointF(c1.x, c1.y), QtCore.QPointF(c2.x, c2.y), QtCore.QPointF(p3.x, p3.y)
    )
    return path


class WorkbenchCanvas(QtWidgets.QGraphicsView):
    """Renders the session's circuit and turns pointer events into gestures.

    ``refresh()`` re-reads the model. The main window calls it from a pin
    watcher on every accepted write and from its status timer.
    """

    changed = QtCore.Signal()
    message = QtCore.Signal(str)

    def __init__(
        self,
        session: SimulationSession,
        registry: ComponentItemRegistry | None = None,
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        self._session = session
        self._registry = registry or default_registry()
        canvas = session.config.canvas

        self._scene = QtWidgets.QGraphicsScene(self)
        self._scene.setSceneRect(QtCore.QRectF(0, 0, canvas.width, canvas.height))
        self._scene.setBackgroundBrush(QtGui.QColor("#0f0f12"))
        self.setScene(self._scene)
        self.setRenderHints(
            QtGui.QPainter.RenderHint.Antialiasing
            | QtGui.QPainter.RenderHint.SmoothPixmapTransform
        )
        self.setMouseTracking(True)

        self._board_item = BoardItem(session.board_model)
        self._scene.addItem(self._board_item)
        self._items: dict[str, ComponentGraphicsItem] = {}
        self._wire_items: list[QtWidgets.QGraphicsPathItem] = []

        self._draft_item = QtWidgets.QGraphicsPathItem()
        pen = QtGui.QPen(QtGui.QColor(DRAFT_COLOR), 2, QtCore.Qt.PenStyle.DashLine)
        self._draft_item.setPen(pen)
        self._draft_item.setZValue(20)
        self._scene.addItem(self._draft_item)

        self._held_button: str | None = None
        self.refresh()

    @property
    def board(self) -> BoardModelConfig:
        return self._session.board_model

    def set_board_model(self, model: BoardModelConfig) -> None:
        self._board_item.set_model(model)
        self.refresh()

    def add_component(self, component_type: ComponentType) -> str:
        """Place a new component near the middle of the visible area."""
        center = self.mapToScene(self.viewport().rect().center())
        count = len(self._session.circuit.components)
        stagger = 20 * (count % 6)
        component = self._session.circuit.add_component(
            component_type, Point(center.x() - 30 + stagger, center.y() - 30 + stagger)
        )
        self.refresh()
        self.changed.emit()
        return component.id

    def refresh(self) -> None:
        session = self._session
        circuit = session.circuit
        states = session.component_states()

        self._board_item.sync(circuit.board_position, session.bank.get_all_pins())

        live = {c.id: c for c in circuit.components}
        for component_id in list(self._items):
            if component_id not in live:
                self._scene.removeItem(self._items.pop(component_id))
        for z, component in enumerate(live.values()):
            item = self._items.get(component.id)
            if item is None:
                item = self._registry.create(component)
                self._items[component.id] = item
                self._scene.addItem(item)
            item.setZValue(z)
            state = states.get(component.id)
            item.sync(component, state.level if state else 0.0)

        for wire_item in self._wire_items:
            self._scene.removeItem(wire_item)
        self._wire_items = []
        for wire in circuit.wires:
            ends = layout.wire_endpoints(circuit, self.board, wire)
            if ends is None:
                continue
            item = self._scene.addPath(wire_path(*ends), QtGui.QPen(QtGui.QColor(wire.color), 3))
            item.setZValue(10)
            self._wire_items.append(item)

        draft = session.interaction.draft
        if draft is None:
            self._draft_item.setPath(QtGui.QPainterPath())
        else:
            start = layout.pin_position(circuit, self.board, draft.from_id, draft.from_pin)
            if start is not None:
                self._draft_item.setPath(wire_path(start, draft.cursor))

    # Pointer handling ------------------------------------------------------

    def _scene_point(self, event: QtGui.QMouseEvent) -> Point:
        pos = self.mapToScene(event.position().toPoint())
        return Point(pos.x(), pos.y())

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != QtCore.Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        point = self._scene_point(event)
        controller = self._session.interaction
        hit = layout.hit_test(self._session.circuit, self.board, point)

        # Outside WIRE mode a pin is just part of the body it sits on.
        if hit.kind is layout.HitKind.PIN and controller.mode is InteractionMode.DRAG:
            if is_host(hit.target_id):
                hit = layout.Hit(layout.HitKind.BOARD, HOST_ID)
            else:
                hit = layout.Hit(layout.HitKind.COMPONENT, hit.target_id)

        if hit.kind is layout.HitKind.PIN:
            self._on_pin(hit, point)
        elif hit.kind is layout.HitKind.COMPONENT:
            self._on_component(hit.target_id, point)
        elif hit.kind is layout.HitKind.WIRE:
            if controller.delete_wire(hit.target_id):
                self.message.emit(f"Removed {hit.target_id}")
        elif hit.kind is layout.HitKind.BOARD:
            controller.pointer_down(HOST_ID, point)
        else:
            controller.canvas_clicked()

        self.refresh()
        self.changed.emit()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        controller = self._session.interaction
        controller.pointer_moved(self._scene_point(event))
        if controller.draft is not None or controller.dragging is not None:
            self.refresh()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        controller = self._session.interaction
        controller.pointer_up()
        if self._held_button is not None:
            controller.button_released(self._held_button)
            self._held_button = None
        self.refresh()
        self.changed.emit()

    def _on_pin(self, hit: layout.Hit, point: Point) -> None:
        try:
            wire = self._session.interaction.pin_clicked(hit.target_id, hit.pin_id, point)
        except CircuitError as exc:
            logger.debug("Rejected wire endpoint: %s", exc)
            self.message.emit(str(exc))
            return
        if wire is not None:
            self.message.emit(
                f"Wired {wire.from_id}:{wire.from_pin} to {wire.to_id}:{wire.to_pin}"
            )

    def _on_component(self, component_id: str, point: Point) -> None:
        controller = self._session.interaction
        if controller.mode is InteractionMode.ERASE:
            if controller.delete_component(component_id):
                self.message.emit(f"Removed {component_id}")
            return

        component = self._session.circuit.get_component(component_id)
        if component is not None and component.type is ComponentType.BUTTON:
            controller.button_pressed(component_id)
            self._held_button = component_id
        controller.pointer_down(component_id, point)
