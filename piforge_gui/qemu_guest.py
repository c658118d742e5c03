"""Guest virtual machine backed by a QEMU process.

QEMU runs headless with its first serial port on stdio, so the guest's
console is a plain byte stream over the process pipes.
"""

from __future__ import annotations

import codecs
import logging
import shutil
from pathlib import Path

from PySide6 import QtCore

from piforge.core.exceptions import GuestStartError
from piforge.serial.guest import GuestEvent, GuestEventEmitter, GuestFactory
from piforge.utils.config_loader import GuestConfig

logger = logging.getLogger(__name__)


def build_arguments(config: GuestConfig) -> list[str]:
    args = [
        "-m",
        str(config.memory_mb),
        "-display",
        "none",
        "-serial",
        "stdio",
        "-monitor",
        "none",
    ]
    if config.cdrom:
        args += ["-cdrom", config.cdrom, "-boot", "d"]
    args += list(config.extra_args)
    return args


class QemuGuest(GuestEventEmitter):
    """GuestMachine running ``qemu-system-*`` through QProcess."""

    def __init__(self, config: GuestConfig, parent: QtCore.QObject | None = None):
        super().__init__()
        program = shutil.which(config.program)
        if program is None:
            raise GuestStartError(
                f"{config.program} not found on PATH", details={"program": config.program}
            )
        if not config.cdrom:
            raise GuestStartError("No guest image configured (guest.cdrom)")
        if not Path(config.cdrom).is_file():
            raise GuestStartError(
                f"Guest image not found: {config.cdrom}", details={"cdrom": config.cdrom}
            )

        self._program = program
        self._args = build_arguments(config)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._stopping = False

        self._process = QtCore.QProcess(parent)
        self._process.setProcessChannelMode(QtCore.QProcess.ProcessChannelMode.MergedChannels)
        self._process.started.connect(self._on_started)
        self._process.readyReadStandardOutput.connect(self._on_output)
        self._process.errorOccurred.connect(self._on_error)
        self._process.finished.connect(self._on_finished)

    @property
    def running(self) -> bool:
        return self._process.state() != QtCore.QProcess.ProcessState.NotRunning

    def start(self) -> None:
        logger.info("Starting guest: %s %s", self._program, " ".join(self._args))
        self._stopping = False
        self._process.start(self._program, self._args)

    def serial_send(self, data: str) -> None:
        if self.running:
            self._process.write(data.encode("utf-8"))

    def stop(self) -> None:
        self._stopping = True
        if not self.running:
            return
        self._process.terminate()
        if not self._process.waitForFinished(1000):
            self._process.kill()
            self._process.waitForFinished(1000)

    # Private helpers -------------------------------------------------------

    def _on_started(self) -> None:
        self.emit(GuestEvent.READY)

    def _on_output(self) -> None:
        data = bytes(self._process.readAllStandardOutput().data())
        for char in self._decoder.decode(data):
            self.emit(GuestEvent.OUTPUT_CHAR, char)

    def _on_error(self, error: QtCore.QProcess.ProcessError) -> None:
        if self._stopping:
            return
        logger.warning("Guest process error %s: %s", error, self._process.errorString())
        self.emit(GuestEvent.FAILED, self._process.errorString())

    def _on_finished(self, exit_code: int, _status: QtCore.QProcess.ExitStatus) -> None:
        if self._stopping:
            return
        logger.warning("Guest exited with code %d", exit_code)
        self.emit(GuestEvent.FAILED, f"guest exited with code {exit_code}")


def qemu_guest_factory(config: GuestConfig, parent: QtCore.QObject | None = None) -> GuestFactory:
    def _factory() -> QemuGuest:
        return QemuGuest(config, parent)

    return _factory
