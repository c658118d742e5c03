"""Terminal surface for the console: a minimal line-oriented emulator."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from piforge_gui.ansi import AnsiFilter

_KEY_TEXT = {
    QtCore.Qt.Key.Key_Return: "\r",
    QtCore.Qt.Key.Key_Enter: "\r",
    QtCore.Qt.Key.Key_Backspace: "\x7f",
    QtCore.Qt.Key.Key_Tab: "\t",
    QtCore.Qt.Key.Key_Escape: "\x1b",
    QtCore.Qt.Key.Key_Up: "\x1b[A",
    QtCore.Qt.Key.Key_Down: "\x1b[B",
    QtCore.Qt.Key.Key_Right: "\x1b[C",
    QtCore.Qt.Key.Key_Left: "\x1b[D",
}


class TerminalWidget(QtWidgets.QPlainTextEdit):
    """Implements TerminalSink. Keystrokes are emitted, never inserted."""

    data_entered = QtCore.Signal(str)

    def __init__(self, parent: QtWidgets.QWidget | None = None, max_lines: int = 2000):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setUndoRedoEnabled(False)
        self.setMaximumBlockCount(max_lines)
        self.setLineWrapMode(QtWidgets.QPlainTextEdit.LineWrapMode.WidgetWidth)
        self.setFocusPolicy(QtCore.Qt.FocusPolicy.StrongFocus)
        font = QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont)
        font.setPointSize(10)
        self.setFont(font)
        self.setStyleSheet("QPlainTextEdit { background: #000000; color: #ffffff; }")

        self._ansi = AnsiFilter()
        self._cursor = QtGui.QTextCursor(self.document())

    # TerminalSink ----------------------------------------------------------

    def write(self, text: str) -> None:
        cursor = self._cursor
        for char in self._ansi.feed(text):
            if char == "\n":
                cursor.movePosition(QtGui.QTextCursor.MoveOperation.End)
                cursor.insertText("\n")
            elif char == "\r":
                cursor.movePosition(QtGui.QTextCursor.MoveOperation.StartOfBlock)
            elif char == "\b":
                if not cursor.atBlockStart():
                    cursor.movePosition(QtGui.QTextCursor.MoveOperation.Left)
            elif char.isprintable():
                # Overwrite, like a real terminal.
                if not cursor.atBlockEnd():
                    cursor.movePosition(
                        QtGui.QTextCursor.MoveOperation.Right,
                        QtGui.QTextCursor.MoveMode.KeepAnchor,
                    )
                cursor.insertText(char)
        bar = self.verticalScrollBar()
        bar.setValue(bar.maximum())

    def writeln(self, text: str = "") -> None:
        self.write(text + "\n")

    def clear(self) -> None:  # type: ignore[override]
        super().clear()
        self._cursor = QtGui.QTextCursor(self.document())

    # Input -----------------------------------------------------------------

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:  # type: ignore[override]
        if event.matches(QtGui.QKeySequence.StandardKey.Copy):
            self.copy()
            return
        if event.matches(QtGui.QKeySequence.StandardKey.Paste):
            text = QtWidgets.QApplication.clipboard().text()
            if text:
                self.data_entered.emit(text.replace("\r\n", "\r").replace("\n", "\r"))
            return

        data = _KEY_TEXT.get(event.key())
        if data is None:
            data = event.text()
        if data:
            self.data_entered.emit(data)
