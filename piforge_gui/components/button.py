"""Momentary push-button item."""

from __future__ import annotations

from PySide6 import QtCore, QtGui

from piforge_gui.components.base import ComponentGraphicsItem


class ButtonItem(ComponentGraphicsItem):
    """Cap lights up while the wired input pin reads high."""

    def __init__(self, component, on_color: str = "#f59e0b", off_color: str = "#2f2f2f"):
        self._on_color = QtGui.QColor(on_color)
        self._off_color = QtGui.QColor(off_color)
        super().__init__(component)

    def paint_body(self, painter: QtGui.QPainter) -> None:
        painter.setBrush(QtGui.QColor("#18181b"))
        painter.setPen(QtGui.QPen(QtGui.QColor("#111111"), 1))
        painter.drawRoundedRect(QtCore.QRectF(6, 2, 48, 40), 4, 4)

        color = self._on_color if self._level > 0 else self._off_color
        painter.setBrush(QtGui.QBrush(color))
        painter.drawEllipse(QtCore.QRectF(16, 8, 28, 28))

    def caption(self) -> str:
        return "BTN HIGH" if self._level > 0 else "BTN LOW"
