"""LED item: brightness follows the resolved level."""

from __future__ import annotations

from PySide6 import QtCore, QtGui

from piforge.circuit.catalog import LedProps
from piforge_gui.components.base import ComponentGraphicsItem


class LedItem(ComponentGraphicsItem):
    def _color(self) -> QtGui.QColor:
        props = self._component.props
        return QtGui.QColor(props.color if isinstance(props, LedProps) else "#ff4444")

    def paint_body(self, painter: QtGui.QPainter) -> None:
        color = self._color()
        lens = QtCore.QRectF(14, 4, 32, 32)

        if self._level > 0:
            glow = QtGui.QRadialGradient(lens.center(), 30)
            halo = QtGui.QColor(color)
            halo.setAlphaF(0.6 * self._level)
            glow.setColorAt(0.0, halo)
            glow.setColorAt(1.0, QtGui.QColor(0, 0, 0, 0))
            painter.setPen(QtCore.Qt.PenStyle.NoPen)
            painter.setBrush(QtGui.QBrush(glow))
            painter.drawEllipse(lens.center(), 30, 30)

        # Unlit LEDs keep a dim tint of their colour.
        body = QtGui.QColor(color)
        body.setAlphaF(0.25 + 0.75 * self._level)
        gradient = QtGui.QRadialGradient(lens.center(), lens.width() / 2)
        gradient.setColorAt(0.0, body.lighter(150))
        gradient.setColorAt(1.0, body.darker(130))
        painter.setBrush(QtGui.QBrush(gradient))
        painter.setPen(QtGui.QPen(QtGui.QColor("#111111"), 1))
        painter.drawEllipse(lens)

        # Legs
        painter.setPen(QtGui.QPen(QtGui.QColor("#9ca3af"), 2))
        painter.drawLine(QtCore.QPointF(22, 36), QtCore.QPointF(18, 45))
        painter.drawLine(QtCore.QPointF(38, 36), QtCore.QPointF(42, 45))

    def caption(self) -> str:
        return f"LED {int(round(self._level * 100))}%"
