"""Core modules for piforge.

Board-agnostic infrastructure:
- register_bank: GPIO registers and change notification
- gpio_enums: pin mode enumeration
- ids: component/wire id allocation
- scheduler: one-shot timer protocol
- exceptions: exception hierarchy
"""

from piforge.core.exceptions import (
    CircuitError,
    ConfigurationError,
    GuestStartError,
    PiforgeError,
)
from piforge.core.gpio_enums import PinMode
from piforge.core.ids import IdAllocator
from piforge.core.register_bank import (
    MAX_PIN,
    NUM_PINS,
    PinRegister,
    PinState,
    RegisterBank,
)
from piforge.core.scheduler import Scheduler, TimerHandle, defer_with

__all__ = [
    # Registers
    "RegisterBank",
    "PinRegister",
    "PinState",
    "PinMode",
    "NUM_PINS",
    "MAX_PIN",
    # Glue
    "IdAllocator",
    "Scheduler",
    "TimerHandle",
    "defer_with",
    # Errors
    "PiforgeError",
    "ConfigurationError",
    "CircuitError",
    "GuestStartError",
]
