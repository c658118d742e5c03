from piforge_gui.view.main_window import MainWindow
from piforge_gui.view.status_bar import StatusBar
from piforge_gui.view.terminal_widget import TerminalWidget
from piforge_gui.view.workbench_canvas import WorkbenchCanvas

__all__ = [
    "MainWindow",
    "StatusBar",
    "TerminalWidget",
    "WorkbenchCanvas",
]
