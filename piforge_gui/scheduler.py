"""QTimer-backed implementation of the piforge Scheduler protocol."""

from __future__ import annotations

from typing import Callable

from PySide6 import QtCore


class QtTimerHandle:
    def __init__(self, timer: QtCore.QTimer):
        self._timer: QtCore.QTimer | None = timer

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._release()

    def _release(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.deleteLater()


class QtScheduler:
    """One-shot timers on the Qt event loop."""

    def __init__(self, parent: QtCore.QObject | None = None):
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QtCore.QTimer(self._parent)
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)

        def _fire() -> None:
            handle._release()  # pylint: disable=protected-access
            callback()

        timer.timeout.connect(_fire)
        timer.start(max(0, int(delay_ms)))
        return handle
