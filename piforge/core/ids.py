"""Sequential id allocation for components and wires."""

from __future__ import annotations

import itertools


class IdAllocator:
    """Hands out ``<prefix>-<n>`` ids that are never reused within a session."""

    def __init__(self, prefix: str, start: int = 1):
        if not prefix:
            raise ValueError("prefix must be a non-empty string")
        self._prefix = prefix
        self._counter = itertools.count(start)

    @property
    def prefix(self) -> str:
        return self._prefix

    def next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"
