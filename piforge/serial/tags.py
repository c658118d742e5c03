"""GPIO tags embedded in the guest's serial output.

The guest cannot touch the register bank directly. Its helper scripts print
bracketed tags on the serial console instead::

    [GPIO_OUT: 17 1]
    [GPIO_MODE: 17 out]

The decoder watches the character stream one character at a time. It keeps
only the text since the last ``[`` and gives up on a tag once it could no
longer fit in a window of ``capacity`` characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

DEFAULT_WINDOW = 100

_OUT_RE = re.compile(r"GPIO_OUT: ([0-9]+) ([0-9]+)")
_MODE_RE = re.compile(r"GPIO_MODE: ([0-9]+) ([A-Za-z0-9_]+)")


@dataclass(frozen=True)
class GpioOutTag:
    pin: int
    value: int


@dataclass(frozen=True)
class GpioModeTag:
    pin: int
    mode: str
    """Mode word as printed by the guest, upper-cased. Not validated here."""


SerialTag = Union[GpioOutTag, GpioModeTag]


def parse_tag(body: str) -> SerialTag | None:
    """Parse the text between the brackets of one tag."""
    match = _OUT_RE.fullmatch(body)
    if match:
        return GpioOutTag(pin=int(match.group(1)), value=int(match.group(2)))
    match = _MODE_RE.fullmatch(body)
    if match:
        return GpioModeTag(pin=int(match.group(1)), mode=match.group(2).upper())
    return None


class SerialTagDecoder:
    """Incremental tag scanner over a character stream."""

    def __init__(self, capacity: int = DEFAULT_WINDOW):
        if capacity < 2:
            raise ValueError("capacity must hold at least '[' and ']'")
        self._capacity = capacity
        self._body: list[str] = []
        self._open = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def pending(self) -> str:
        """Text of the tag currently being collected, including ``[``."""
        return "[" + "".join(self._body) if self._open else ""

    def reset(self) -> None:
        self._body.clear()
        self._open = False

    def feed(self, char: str) -> SerialTag | None:
        """Consume one character; return a tag when one completes."""
        if char == "[":
            # A nested bracket restarts the tag; the guest never nests them.
            self._body.clear()
            self._open = True
            return None

        if not self._open:
            return None

        if char == "]":
            tag = parse_tag("".join(self._body))
            self.reset()
            return tag

        self._body.append(char)
        # '[' + body + ']' must fit in the window.
        if len(self._body) + 2 > self._capacity:
            self.reset()
        return None

    def feed_text(self, text: str) -> list[SerialTag]:
        tags = []
        for char in text:
            tag = self.feed(char)
            if tag is not None:
                tags.append(tag)
        return tags
