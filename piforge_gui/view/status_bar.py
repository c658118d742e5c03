"""Bottom status bar with interaction mode, board and console state."""

from __future__ import annotations

from PySide6 import QtWidgets

from piforge.circuit.interaction import InteractionMode
from piforge.serial.console import ConsoleMode


class StatusBar(QtWidgets.QFrame):
    def __init__(self, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.setFrameShape(QtWidgets.QFrame.Shape.NoFrame)

        self._mode_label = QtWidgets.QLabel("Mode: --")
        self._board_label = QtWidgets.QLabel("Board: --")
        self._console_label = QtWidgets.QLabel("Console: --")
        self._message_label = QtWidgets.QLabel("")

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(12, 6, 12, 6)
        layout.addWidget(self._mode_label)
        layout.addWidget(self._board_label)
        layout.addWidget(self._console_label)
        layout.addStretch(1)
        layout.addWidget(self._message_label)

    def update_status(
        self, mode: InteractionMode, board_label: str, console: ConsoleMode, booting: bool
    ) -> None:
        self._mode_label.setText(f"Mode: {mode.name}")
        self._board_label.setText(f"Board: {board_label}")
        state = "BOOTING" if booting else console.name
        self._console_label.setText(f"Console: {state}")

    def show_message(self, text: str) -> None:
        self._message_label.setText(text)
