"""Strip ANSI escape sequences from a character stream.

Guest consoles emit colour and cursor codes that a plain text widget cannot
render. Sequences may arrive split across writes, so the filter keeps state.
"""

from __future__ import annotations

from enum import Enum, auto

ESC = "\x1b"


class _State(Enum):
    TEXT = auto()
    ESCAPE = auto()
    CSI = auto()
    OSC = auto()


class AnsiFilter:
    def __init__(self):
        self._state = _State.TEXT

    def feed(self, text: str) -> str:
        out = []
        for char in text:
            if self._state is _State.TEXT:
                if char == ESC:
                    self._state = _State.ESCAPE
                else:
                    out.append(char)
            elif self._state is _State.ESCAPE:
                if char == "[":
                    self._state = _State.CSI
                elif char == "]":
                    self._state = _State.OSC
                else:
                    # Two-character sequence such as ESC c or ESC =
                    self._state = _State.TEXT
            elif self._state is _State.CSI:
                if "\x40" <= char <= "\x7e":
                    self._state = _State.TEXT
            elif char in ("\x07", ESC):
                # OSC (window title) ends with BEL or ESC \
                self._state = _State.TEXT if char == "\x07" else _State.ESCAPE
        return "".join(out)
