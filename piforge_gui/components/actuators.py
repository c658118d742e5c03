"""Resistor, servo and buzzer items."""

from __future__ import annotations

import math

from PySide6 import QtCore, QtGui

from piforge.circuit.catalog import BuzzerProps, ResistorProps, ServoProps
from piforge_gui.components.base import ComponentGraphicsItem

_BAND_COLORS = (
    "#000000", "#8b4513", "#ff0000", "#ffa500", "#ffff00",
    "#008000", "#0000ff", "#8a2be2", "#808080", "#ffffff",
)


def resistor_bands(ohms: int) -> tuple[int, int, int]:
    """First digit, second digit and multiplier exponent of a 3-band code."""
    if ohms < 10:
        return 0, max(0, ohms), 0
    digits = str(int(ohms))
    return int(digits[0]), int(digits[1]), len(digits) - 2


class ResistorItem(ComponentGraphicsItem):
    def paint_body(self, painter: QtGui.QPainter) -> None:
        painter.setPen(QtGui.QPen(QtGui.QColor("#9ca3af"), 2))
        painter.drawLine(QtCore.QPointF(11, 21), QtCore.QPointF(61, 21))

        body = QtCore.QRectF(20, 13, 32, 16)
        painter.setBrush(QtGui.QColor("#d6b88c"))
        painter.setPen(QtGui.QPen(QtGui.QColor("#5b4636"), 1))
        painter.drawRoundedRect(body, 5, 5)

        props = self._component.props
        ohms = props.ohms if isinstance(props, ResistorProps) else 220
        painter.setPen(QtCore.Qt.PenStyle.NoPen)
        for i, digit in enumerate(resistor_bands(ohms)):
            painter.setBrush(QtGui.QColor(_BAND_COLORS[min(digit, 9)]))
            painter.drawRect(QtCore.QRectF(25 + i * 7, 13, 3, 16))

    def paint_caption(self, painter: QtGui.QPainter) -> None:
        # Too small for a caption; the bands say it all.
        return


class ServoItem(ComponentGraphicsItem):
    """Horn angle follows the level between min_angle and max_angle."""

    def angle(self) -> float:
        props = self._component.props
        if not isinstance(props, ServoProps):
            props = ServoProps()
        return props.min_angle + self._level * (props.max_angle - props.min_angle)

    def paint_body(self, painter: QtGui.QPainter) -> None:
        painter.setBrush(QtGui.QColor("#1d4ed8"))
        painter.setPen(QtGui.QPen(QtGui.QColor("#111111"), 1))
        painter.drawRoundedRect(QtCore.QRectF(8, 10, 64, 30), 3, 3)

        hub = QtCore.QPointF(40, 25)
        rad = math.radians(180 - self.angle())
        tip = QtCore.QPointF(hub.x() + 22 * math.cos(rad), hub.y() - 22 * math.sin(rad))
        pen = QtGui.QPen(QtGui.QColor("#f4f4f5"), 4)
        pen.setCapStyle(QtCore.Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.drawLine(hub, tip)

    def caption(self) -> str:
        return f"SERVO {int(self.angle())}°"


class BuzzerItem(ComponentGraphicsItem):
    def paint_body(self, painter: QtGui.QPainter) -> None:
        center = QtCore.QPointF(30, 22)
        painter.setBrush(QtGui.QColor("#18181b"))
        painter.setPen(QtGui.QPen(QtGui.QColor("#111111"), 1))
        painter.drawEllipse(center, 18, 18)
        painter.setBrush(QtGui.QColor("#3f3f46"))
        painter.drawEllipse(center, 4, 4)

        if self._level > 0:
            painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
            pen = QtGui.QPen(QtGui.QColor("#fbbf24"), 1.5)
            painter.setPen(pen)
            for radius in (22, 26):
                painter.drawArc(
                    QtCore.QRectF(center.x() - radius, center.y() - radius, 2 * radius, 2 * radius),
                    -30 * 16,
                    60 * 16,
                )

    def caption(self) -> str:
        props = self._component.props
        freq = props.frequency_hz if isinstance(props, BuzzerProps) else 0
        return f"{freq} Hz" if self._level > 0 else "BUZZER"
