"""Base classes for workbench component items."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from piforge.circuit.model import Component
from piforge_gui import layout

PIN_COLOR = "#d4d4d8"
PIN_BORDER = "#27272a"


class ComponentGraphicsItem(QtWidgets.QGraphicsObject):
    """Shared base for all placed components.

    Items only draw. Pointer handling is done by the canvas, which routes
    gestures through the interaction controller.
    """

    def __init__(self, component: Component):
        super().__init__()
        self._component = component
        self._level = 0.0
        width, height = layout.COMPONENT_SIZES.get(component.type, (60, 60))
        self._rect = QtCore.QRectF(0, 0, float(width), float(height))
        self.setAcceptedMouseButtons(QtCore.Qt.MouseButton.NoButton)
        self.sync(component, 0.0)

    @property
    def component(self) -> Component:
        return self._component

    @property
    def level(self) -> float:
        return self._level

    def sync(self, component: Component, level: float) -> None:
        """Pull position, props and derived level from the model."""
        self._component = component
        self.setPos(component.position.x, component.position.y)
        if level != self._level:
            self._level = level
            self.update()

    def boundingRect(self) -> QtCore.QRectF:  # type: ignore[override]
        return self._rect

    def paint(self, painter: QtGui.QPainter, _option, _widget=None) -> None:  # type: ignore[override]
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        self.paint_body(painter)
        self.paint_pins(painter)
        self.paint_caption(painter)

    def paint_body(self, painter: QtGui.QPainter) -> None:
        painter.setBrush(QtGui.QColor("#3f3f46"))
        painter.setPen(QtGui.QPen(QtGui.QColor(PIN_BORDER), 1))
        painter.drawRoundedRect(self._rect.adjusted(1, 1, -1, -16), 4, 4)

    def paint_pins(self, painter: QtGui.QPainter) -> None:
        painter.setBrush(QtGui.QColor(PIN_COLOR))
        painter.setPen(QtGui.QPen(QtGui.QColor(PIN_BORDER), 1))
        r = layout.PIN_RADIUS
        for x, y in layout.PIN_OFFSETS.get(self._component.type, {}).values():
            painter.drawEllipse(QtCore.QPointF(x, y), r - 1, r - 1)

    def paint_caption(self, painter: QtGui.QPainter) -> None:
        painter.setPen(QtGui.QColor("#a1a1aa"))
        font = painter.font()
        font.setPointSizeF(7)
        painter.setFont(font)
        caption = QtCore.QRectF(0, self._rect.height() - 8, self._rect.width(), 10)
        painter.drawText(caption, QtCore.Qt.AlignmentFlag.AlignCenter, self.caption())

    def caption(self) -> str:
        return self._component.type.value
