"""GPIO enumeration types."""

from __future__ import annotations

from enum import Enum


class PinMode(str, Enum):
    """Direction/function of a simulated GPIO pin."""

    IN = "IN"
    """Digital input. Reads return the last externally driven level."""

    OUT = "OUT"
    """Digital output. Accepts digital_write()."""

    PWM = "PWM"
    """Pulse-width modulated output. Accepts set_pwm()."""

    @classmethod
    def parse(cls, word: str | PinMode) -> PinMode | None:
        """Map a mode word from a shell or guest tag onto a PinMode.

        Matching is case-insensitive. Returns None for unknown words.
        """
        if isinstance(word, PinMode):
            return word
        try:
            return cls(str(word).strip().upper())
        except ValueError:
            return None
