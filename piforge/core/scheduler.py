"""One-shot timer abstraction.

The simulation is single-threaded. The only asynchronous work is a handful
of one-shot delays (guest boot, command injection, deferred listener writes),
which go through this protocol so the core never depends on a GUI event loop.
"""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Handle returned by Scheduler.call_later()."""

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...


class Scheduler(Protocol):
    """Minimal event-loop facade (structural subtyping)."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms`` milliseconds."""
        ...


def defer_with(scheduler: Scheduler) -> Callable[[Callable[[], None]], None]:
    """Adapt a scheduler into a RegisterBank ``defer`` hook (next loop turn)."""

    def _defer(callback: Callable[[], None]) -> None:
        scheduler.call_later(0, callback)

    return _defer
