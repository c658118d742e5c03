"""Host board item: outline, label and GPIO header."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from piforge.circuit.model import Point
from piforge.core.gpio_enums import PinMode
from piforge.core.register_bank import NUM_PINS, PinState
from piforge.utils.config_loader import BoardModelConfig
from piforge_gui import layout

HEADER_SLOTS = 40


def pin_color(state: PinState | None) -> QtGui.QColor:
    if state is None:
        return QtGui.QColor("#b08d2a")
    if state.mode is PinMode.PWM and state.pwm_duty_cycle:
        color = QtGui.QColor("#f59e0b")
        color.setAlphaF(0.35 + 0.65 * state.pwm_duty_cycle / 100)
        return color
    if state.value:
        return QtGui.QColor("#22c55e" if state.mode is PinMode.OUT else "#38bdf8")
    return QtGui.QColor("#d4a017")


class BoardItem(QtWidgets.QGraphicsObject):
    def __init__(self, model: BoardModelConfig):
        super().__init__()
        self._model = model
        self._pins: list[PinState] = []
        self.setAcceptedMouseButtons(QtCore.Qt.MouseButton.NoButton)
        self.setZValue(-10)

    def set_model(self, model: BoardModelConfig) -> None:
        self.prepareGeometryChange()
        self._model = model
        self.update()

    def sync(self, position: Point, pins: list[PinState]) -> None:
        self.setPos(position.x, position.y)
        if pins != self._pins:
            self._pins = pins
            self.update()

    def boundingRect(self) -> QtCore.QRectF:  # type: ignore[override]
        return QtCore.QRectF(0, 0, self._model.width, self._model.height)

    def paint(self, painter: QtGui.QPainter, _option, _widget=None) -> None:  # type: ignore[override]
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        model = self._model

        painter.setBrush(QtGui.QColor(model.color))
        painter.setPen(QtGui.QPen(QtGui.QColor("#052e16"), 2))
        painter.drawRoundedRect(self.boundingRect().adjusted(1, 1, -1, -1), 12, 12)

        header = model.header
        painter.setBrush(QtGui.QColor("#111111"))
        painter.setPen(QtCore.Qt.PenStyle.NoPen)
        painter.drawRect(QtCore.QRectF(header.x, header.y, header.width, header.height))

        origin = Point(0, 0)
        radius = layout.PIN_RADIUS - 1
        for slot in range(HEADER_SLOTS):
            center = layout.host_pin_position(model, origin, slot)
            if slot < NUM_PINS:
                state = self._pins[slot] if slot < len(self._pins) else None
                painter.setBrush(pin_color(state))
            else:
                painter.setBrush(QtGui.QColor("#52525b"))
            painter.drawEllipse(QtCore.QPointF(center.x, center.y), radius, radius)

        painter.setPen(QtGui.QColor("#e4e4e7"))
        font = painter.font()
        font.setBold(True)
        font.setPointSize(14)
        painter.setFont(font)
        painter.drawText(
            QtCore.QRectF(0, model.height - 40, model.width - 16, 32),
            QtCore.Qt.AlignmentFlag.AlignRight | QtCore.Qt.AlignmentFlag.AlignVCenter,
            model.label,
        )
