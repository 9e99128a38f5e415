"""Zero-dependency threading-based clock backend.

This is the DEFAULT clock for ``CronEngine``. It uses Python's stdlib
threading module and has no external dependencies.

┌──────────────────────────────────────────────────────────────────────────────┐
│  THREAD CLOCK ARCHITECTURE                                                    │
│                                                                               │
│   call_later(delay, fn)           call_every(interval, fn)                    │
│      │                               │                                        │
│      ▼                               ▼                                        │
│   threading.Timer (daemon)        Daemon Thread (loop)                        │
│      fires fn once                   while not stop_event.wait(interval):     │
│                                          fire_count += 1                      │
│                                          last_fired = now()                   │
│                                          fn()                                 │
│                                                                               │
│   handle.cancel()  ──►  timer.cancel() / stop_event.set()                     │
│                                                                               │
│  Key Design Decisions:                                                        │
│  1. Daemon threads, so a forgotten engine doesn't block process exit         │
│  2. Event-based stop, so a periodic timer stops within one interval          │
│  3. One thread per periodic timer, one engine owns at most one of them       │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from concurrent.futures import Future
from datetime import datetime
from typing import Any

from cronspine.logging import get_logger
from cronspine.timestamps import utc_now

from .protocol import TimerCallback

logger = get_logger(__name__)


class OneShotTimer:
    """Handle for a ``call_later`` timer."""

    def __init__(self, delay_seconds: float, fn: TimerCallback) -> None:
        self._fn = fn
        self._fired = False
        self._timer = threading.Timer(delay_seconds, self._run)
        self._timer.daemon = True
        self._timer.name = "cronspine-align"

    def start(self) -> OneShotTimer:
        self._timer.start()
        return self

    def _run(self) -> None:
        self._fired = True
        try:
            self._fn()
        except Exception as e:
            logger.exception("timer_callback_failed", error=str(e))

    @property
    def active(self) -> bool:
        return not self._fired and not self._timer.finished.is_set()

    def cancel(self) -> None:
        self._timer.cancel()


class PeriodicTimer:
    """Handle for a ``call_every`` timer running on its own daemon thread."""

    def __init__(self, interval_seconds: float, fn: TimerCallback) -> None:
        self._interval = interval_seconds
        self._fn = fn
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._fire_count = 0
        self._last_fired: datetime | None = None
        self._thread = threading.Thread(target=self._loop, daemon=True, name="cronspine-tick")

    def start(self) -> PeriodicTimer:
        self._thread.start()
        return self

    def _loop(self) -> None:
        logger.debug("periodic_timer_started", interval_seconds=self._interval)
        while not self._stop_event.wait(self._interval):
            with self._lock:
                self._fire_count += 1
                self._last_fired = utc_now()

            try:
                self._fn()
            except Exception as e:
                logger.exception("timer_callback_failed", error=str(e))

        logger.debug("periodic_timer_stopped", fire_count=self._fire_count)

    @property
    def active(self) -> bool:
        return not self._stop_event.is_set()

    @property
    def fire_count(self) -> int:
        """Number of times the timer has fired."""
        return self._fire_count

    @property
    def last_fired(self) -> datetime | None:
        """Timestamp of the last firing."""
        return self._last_fired

    def cancel(self) -> None:
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the timer thread to exit after ``cancel()``."""
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)


class ThreadClock:
    """Wall clock with daemon-thread timers.

    Example:
        >>> clock = ThreadClock()
        >>> handle = clock.call_every(60.0, lambda: print("tick"))
        >>> # ... later ...
        >>> handle.cancel()
    """

    name = "thread"

    def now(self) -> datetime:
        return utc_now()

    def call_later(self, delay_seconds: float, fn: TimerCallback) -> OneShotTimer:
        return OneShotTimer(delay_seconds, fn).start()

    def call_every(self, interval_seconds: float, fn: TimerCallback) -> PeriodicTimer:
        return PeriodicTimer(interval_seconds, fn).start()


class BackgroundLoop:
    """Event loop on a daemon thread for coroutines submitted from timer threads.

    The loop thread is started on first ``submit()`` and lives for the rest
    of the process.
    """

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._run, args=(loop,), daemon=True, name="cronspine-async"
                )
                self._thread.start()
                self._loop = loop
            return self._loop

    @staticmethod
    def _run(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        logger.debug("background_loop_started")
        loop.run_forever()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        """Schedule ``coro`` on the loop without waiting for it."""
        return asyncio.run_coroutine_threadsafe(coro, self._ensure_loop())


_background_loop = BackgroundLoop()


def get_background_loop() -> BackgroundLoop:
    """Return the process-wide background loop."""
    return _background_loop


__all__ = ["BackgroundLoop", "OneShotTimer", "PeriodicTimer", "ThreadClock", "get_background_loop"]
