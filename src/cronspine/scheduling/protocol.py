"""Clock and timer protocol.

┌──────────────────────────────────────────────────────────────────────────────┐
│  CLOCK PROTOCOL                                                               │
│                                                                               │
│  The engine never reads the wall clock or arms a timer directly. It asks     │
│  its Clock, so the catch-up algorithm can be driven deterministically:       │
│                                                                               │
│   ┌─────────────────┐   now() / call_later() / call_every()   ┌──────────┐   │
│   │  ThreadClock    │ ◄────────────────────────────────────── │  Cron    │   │
│   │  (default)      │                                         │  Engine  │   │
│   └─────────────────┘                                         └──────────┘   │
│   ┌─────────────────┐                                              │         │
│   │  ManualClock    │ ◄────────────────────────────────────────────┘         │
│   │  (tests)        │                                                        │
│   └─────────────────┘                                                        │
│                                                                               │
│  Responsibility Split:                                                        │
│  - Clock: WHEN (current instant, one-shot and periodic wake-ups)             │
│  - Engine: WHAT (boundary catch-up, schedule evaluation, dispatch)           │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol, runtime_checkable

TimerCallback = Callable[[], None]


@runtime_checkable
class TimerHandle(Protocol):
    """A pending one-shot or periodic timer."""

    @property
    def active(self) -> bool:
        """True until the timer is cancelled (or a one-shot timer has fired)."""
        ...

    def cancel(self) -> None:
        """Stop the timer. Cancelling twice is a no-op."""
        ...


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant and of wake-ups.

    Implementations:
        - ThreadClock: wall clock plus daemon-thread timers (default)

    Example (custom clock):
        >>> class LoopClock:
        ...     name = "asyncio"
        ...
        ...     def now(self):
        ...         return datetime.now(UTC)
        ...
        ...     def call_later(self, delay_seconds, fn):
        ...         return loop.call_later(delay_seconds, fn)
        ...
        ...     def call_every(self, interval_seconds, fn):
        ...         ...
    """

    name: str

    def now(self) -> datetime:
        """Return the current instant as an aware UTC datetime."""
        ...

    def call_later(self, delay_seconds: float, fn: TimerCallback) -> TimerHandle:
        """Invoke ``fn`` once after roughly ``delay_seconds``."""
        ...

    def call_every(self, interval_seconds: float, fn: TimerCallback) -> TimerHandle:
        """Invoke ``fn`` every ``interval_seconds`` until the handle is cancelled."""
        ...


__all__ = ["Clock", "TimerCallback", "TimerHandle"]
