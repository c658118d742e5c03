"""piforge - virtual Raspberry Pi breadboard.

Qt-free simulation core: GPIO register bank, wiring graph and connectivity
resolver, gesture controller, and the serial bridge to a guest OS. The
PySide6 front-end lives in ``piforge_gui``.
"""

from piforge.circuit import Circuit, ComponentType, ConnectivityResolver, InteractionMode, Point
from piforge.core import PinMode, RegisterBank
from piforge.serial import Console, SerialBridge
from piforge.session import SimulationSession
from piforge.utils import PiforgeConfig, get_config, load_config

__version__ = "0.2.0"

__all__ = [
    "Circuit",
    "ComponentType",
    "ConnectivityResolver",
    "Console",
    "InteractionMode",
    "PinMode",
    "PiforgeConfig",
    "Point",
    "RegisterBank",
    "SerialBridge",
    "SimulationSession",
    "get_config",
    "load_config",
]
