"""GUI application entry point."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from PySide6 import QtWidgets

from piforge.core.exceptions import ConfigurationError
from piforge.serial.guest import GuestFactory
from piforge.session import SimulationSession
from piforge.utils.config_loader import PiforgeConfig, get_config
from piforge_gui.qemu_guest import qemu_guest_factory
from piforge_gui.scheduler import QtScheduler
from piforge_gui.view.main_window import MainWindow

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PiForge virtual breadboard")
    parser.add_argument("--board", default=None, help="Board model, e.g. RPi4B or RPiZeroW")
    parser.add_argument("--config", default=None, help="Path to piforge config YAML")
    parser.add_argument(
        "--no-boot", action="store_true", help="Do not boot the guest automatically"
    )
    parser.add_argument(
        "--status-ms", type=int, default=200, help="status bar refresh interval (ms)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def run_gui(
    argv: list[str] | None = None,
    *,
    config: PiforgeConfig | None = None,
    guest_factory: GuestFactory | None = None,
) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        if config is None:
            config = get_config(args.config)
        if args.no_boot:
            config = dataclasses.replace(
                config, serial=dataclasses.replace(config.serial, auto_boot=False)
            )
        if args.board:
            config.board(args.board)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    scheduler = QtScheduler(app)
    session = SimulationSession(config, scheduler)
    if args.board:
        session.set_board_model(args.board)

    if guest_factory is None:
        guest_factory = qemu_guest_factory(config.guest, app)

    window = MainWindow(session, guest_factory, status_ms=args.status_ms)
    window.resize(config.canvas.width, config.canvas.height + 240)
    window.show()
    return app.exec()


def main() -> None:
    raise SystemExit(run_gui())


if __name__ == "__main__":
    main()
