"""Main GUI window."""

from __future__ import annotations

from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from piforge.circuit.catalog import ComponentType
from piforge.circuit.interaction import InteractionMode
from piforge.serial.console import Console
from piforge.serial.guest import GuestFactory
from piforge.session import SimulationSession
from piforge_gui.view.status_bar import StatusBar
from piforge_gui.view.terminal_widget import TerminalWidget
from piforge_gui.view.workbench_canvas import WorkbenchCanvas

_MODE_SHORTCUTS = {
    InteractionMode.DRAG: "Ctrl+1",
    InteractionMode.WIRE: "Ctrl+2",
    InteractionMode.ERASE: "Ctrl+3",
}


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        session: SimulationSession,
        guest_factory: Optional[GuestFactory] = None,
        status_ms: int = 200,
    ):
        super().__init__()
        self._session = session

        self.setWindowTitle("PiForge Workbench")

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)

        self._canvas = WorkbenchCanvas(session)
        self._status_bar = StatusBar()
        self._canvas.message.connect(self._status_bar.show_message)

        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._canvas, 1)
        layout.addWidget(self._status_bar)

        self._terminal = TerminalWidget()
        self._terminal_dock = QtWidgets.QDockWidget("Terminal", self)
        self._terminal_dock.setObjectName("terminal")
        self._terminal_dock.setWidget(self._terminal)
        self.addDockWidget(QtCore.Qt.DockWidgetArea.BottomDockWidgetArea, self._terminal_dock)

        self._console: Console = session.create_console(self._terminal, guest_factory)
        self._terminal.data_entered.connect(self._console.handle_input)

        self._build_toolbar()

        session.watch_pins(lambda _pin, _value: self._canvas.refresh())

        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self._update_status)
        self._timer.start(status_ms)

        self._console.open()
        self._canvas.refresh()
        self._update_status()

    @property
    def console(self) -> Console:
        return self._console

    @property
    def canvas(self) -> WorkbenchCanvas:
        return self._canvas

    def _build_toolbar(self) -> None:
        toolbar = self.addToolBar("Workbench")
        toolbar.setObjectName("workbench")
        toolbar.setMovable(False)

        self._mode_group = QtGui.QActionGroup(self)
        self._mode_group.setExclusive(True)
        for mode, shortcut in _MODE_SHORTCUTS.items():
            action = QtGui.QAction(mode.name.title(), self)
            action.setCheckable(True)
            action.setShortcut(QtGui.QKeySequence(shortcut))
            action.setChecked(mode is self._session.interaction.mode)
            action.triggered.connect(lambda _checked=False, m=mode: self._set_mode(m))
            self._mode_group.addAction(action)
            toolbar.addAction(action)

        toolbar.addSeparator()
        for component_type in self._session.circuit.catalog.types():
            action = QtGui.QAction(f"+ {component_type.value}", self)
            action.triggered.connect(
                lambda _checked=False, t=component_type: self._add_component(t)
            )
            toolbar.addAction(action)

        toolbar.addSeparator()
        self._board_combo = QtWidgets.QComboBox()
        for name, model in self._session.config.boards.items():
            self._board_combo.addItem(model.label, name)
        current = self._board_combo.findData(self._session.board_model.name)
        self._board_combo.setCurrentIndex(max(0, current))
        self._board_combo.currentIndexChanged.connect(self._on_board_changed)
        toolbar.addWidget(self._board_combo)

        reset = QtGui.QAction("Reset", self)
        reset.triggered.connect(lambda _checked=False: self._reset())
        toolbar.addAction(reset)

        boot = QtGui.QAction("Boot kernel", self)
        boot.triggered.connect(lambda _checked=False: self._console.start_guest())
        toolbar.addAction(boot)

        toolbar.addAction(self._terminal_dock.toggleViewAction())

    def _set_mode(self, mode: InteractionMode) -> None:
        self._session.interaction.set_mode(mode)
        self._canvas.refresh()

    def _add_component(self, component_type: ComponentType) -> None:
        component_id = self._canvas.add_component(component_type)
        self._status_bar.show_message(f"Placed {component_type.value} {component_id}")

    def _on_board_changed(self, index: int) -> None:
        name = self._board_combo.itemData(index)
        model = self._session.set_board_model(name)
        self._canvas.set_board_model(model)

    def _reset(self) -> None:
        self._session.circuit.clear()
        self._session.interaction.canvas_clicked()
        self._canvas.refresh()
        self._status_bar.show_message("Workbench cleared")

    def _update_status(self) -> None:
        # Mode changes do not notify pin watchers; pick them up here.
        self._canvas.refresh()
        self._status_bar.update_status(
            self._session.interaction.mode,
            self._session.board_model.label,
            self._console.mode,
            self._console.booting,
        )

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self._timer.stop()
        self._console.close()
        super().closeEvent(event)
