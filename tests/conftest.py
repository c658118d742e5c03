"""
Pytest configuration and shared fixtures for the piforge test suite.
"""

import copy
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Ensure project root is on PYTHONPATH so 'piforge' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from piforge.circuit.model import Circuit  # noqa: E402
from piforge.circuit.resolver import ConnectivityResolver  # noqa: E402
from piforge.core.register_bank import RegisterBank  # noqa: E402
from piforge.serial.guest import GuestEvent, GuestEventEmitter  # noqa: E402
from piforge.utils.config_loader import _parse_config_from_dict  # noqa: E402


# ----------------- Test doubles -----------------


class ManualTimer:
    def __init__(self, due: int, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when the test says so."""

    def __init__(self):
        self.now = 0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay_ms, callback):
        timer = ManualTimer(self.now + delay_ms, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due timers in order."""
        target = self.now + ms
        while True:
            due = [t for t in self.pending if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = max(self.now, timer.due)
            timer.fired = True
            timer.callback()
        self.now = target

    def run_pending(self) -> None:
        """Fire zero-delay timers (the next loop turn)."""
        self.advance(0)


class RecordingTerminal:
    def __init__(self):
        self.chunks: list[str] = []
        self.clears = 0

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def writeln(self, text: str = "") -> None:
        self.chunks.append(text + "\r\n")

    def clear(self) -> None:
        self.clears += 1
        self.chunks.clear()

    @property
    def output(self) -> str:
        return "".join(self.chunks)

    @property
    def lines(self) -> list[str]:
        return self.output.split("\r\n")


class FakeGuest(GuestEventEmitter):
    def __init__(self, fail_on_start: str | None = None):
        super().__init__()
        self.sent: list[str] = []
        self.started = False
        self.stopped = False
        self._fail_on_start = fail_on_start

    def start(self) -> None:
        if self._fail_on_start:
            raise RuntimeError(self._fail_on_start)
        self.started = True

    def serial_send(self, data: str) -> None:
        self.sent.append(data)

    def stop(self) -> None:
        self.stopped = True

    def print(self, text: str) -> None:
        """Simulate the guest writing ``text`` to its serial port."""
        for char in text:
            self.emit(GuestEvent.OUTPUT_CHAR, char)

    @property
    def typed(self) -> str:
        return "".join(self.sent)


# ----------------- Fixtures -----------------


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


BOARDS_CFG = {
    "RPi4B": {
        "label": "RPi 4B",
        "width": 440,
        "height": 310,
        "color": "#0a4d29",
        "header": {"x": 25, "y": 30, "width": 365, "height": 40},
    },
    "RPiZeroW": {
        "label": "Pi Zero W",
        "width": 380,
        "height": 180,
        "color": "#1a422a",
        "header": {"x": 20, "y": 15, "width": 340, "height": 30, "pitch": 16.5, "offset": 5},
    },
}


@pytest.fixture
def valid_config_dict():
    """
    Fixture providing a complete valid piforge configuration dictionary.
    """
    return {
        "default_board": "RPi4B",
        "boards": copy.deepcopy(BOARDS_CFG),
        "serial": {
            "buffer_size": 100,
            "boot_delay_ms": 1000,
            "inject_delay_ms": 5000,
            "auto_boot": True,
        },
        "guest": {"program": "qemu-system-i386", "memory_mb": 128, "cdrom": None},
        "canvas": {"size": [1200, 800], "board_position": [100, 100]},
        "wire_colors": ["#ef4444", "#3b82f6"],
    }


@pytest.fixture
def temp_config_yaml_file(temp_yaml_file, valid_config_dict):
    """
    Fixture that creates a temporary YAML file with valid configuration.
    """
    with open(temp_yaml_file, "w", encoding="utf-8") as f:
        yaml.dump(valid_config_dict, f)

    yield temp_yaml_file


@pytest.fixture
def piforge_config(valid_config_dict):
    return _parse_config_from_dict(valid_config_dict)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def terminal():
    return RecordingTerminal()


@pytest.fixture
def guest():
    return FakeGuest()


@pytest.fixture
def bank():
    return RegisterBank()


@pytest.fixture
def circuit():
    return Circuit()


@pytest.fixture
def resolver(bank):
    return ConnectivityResolver(bank)


def pytest_configure(config):
    """
    Hook for initial pytest configuration.

    Used to add custom markers and configuration.
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
