"""Cron tick engine - exactly-once dispatch of every matching minute.

Manifesto:
    Timers are unreliable. A process gets suspended, a host is throttled,
    a wake-up arrives three minutes late. The engine does not trust the
    timer to tell it which minute it is; it remembers the last minute
    boundary it processed and, on every wake-up, walks forward one minute
    at a time until it reaches the present. Every boundary is evaluated
    exactly once, in order, no matter how late the wake-up was.

┌──────────────────────────────────────────────────────────────────────────────┐
│  ENGINE LIFECYCLE                                                             │
│                                                                               │
│    IDLE ──start()──► RUNNING ──cancel()──► CANCELLED                          │
│      │                                         ▲                              │
│      └──────────────cancel()───────────────────┘                              │
│                                                                               │
│  start()                                                                      │
│    │  second < 2 ? ──yes──► _align()                                          │
│    │       └──no──► clock.call_later(60 - second, _align)                     │
│    ▼                                                                          │
│  _align()                                                                     │
│    last_boundary = floor(now) - 1 min                                         │
│    clock.call_every(60, _wake)                                                │
│    _catch_up()                                                                │
│                                                                               │
│  _catch_up()                                                                  │
│    while last_boundary <= now:                                                │
│        candidate = last_boundary + 1 min                                      │
│        if candidate > now: break                                              │
│        last_boundary = candidate          ◄── committed, never revisited      │
│        tick = CronTick(local fields of candidate)                             │
│        if matches(schedule, tick): callback(tick, candidate)                  │
└──────────────────────────────────────────────────────────────────────────────┘

Tags:
    cronspine, scheduling, engine, catch-up, exactly-once
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Any

from cronspine.errors import CronLifecycleError, categorize_error
from cronspine.logging import get_logger
from cronspine.settings import CronSettings, get_settings
from cronspine.timestamps import ONE_MINUTE, floor_to_minute, to_iso8601

from .calendar import resolve_zone, to_local_fields
from .fields import CronSchedule, parse_schedule
from .protocol import Clock, TimerHandle
from .thread_backend import ThreadClock, get_background_loop
from .tick import CronTick, matches

logger = get_logger(__name__)

CronCallback = Callable[[CronTick, datetime], Any]

# Wake-up period of the steady-state loop
WAKE_INTERVAL_SECONDS = 60.0
# Start within this many seconds of a boundary aligns immediately
ALIGN_GRACE_SECONDS = 2


class EngineState(str, Enum):
    """Lifecycle state of a ``CronEngine``."""

    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"


class CronEngine:
    """Minute-resolution cron engine.

    Example:
        >>> def job(tick, instant):
        ...     print("running at", instant)
        ...
        >>> engine = CronEngine("*/5 * * * *", job, timezone="Europe/London")
        >>> engine.start()
        >>> # ... later ...
        >>> engine.cancel()
    """

    def __init__(
        self,
        schedule: str,
        callback: CronCallback,
        timezone: str | None = None,
        *,
        clock: Clock | None = None,
        settings: CronSettings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            schedule: Five-field cron schedule string, parsed immediately.
            callback: Called as ``callback(tick, instant)`` for every matching minute.
            timezone: IANA zone the schedule is evaluated in; ``None`` means system local.
            clock: Clock/timer source (default: ``ThreadClock``).
            settings: Settings providing ``strict_bounds`` (default: ``get_settings()``).

        Raises:
            CronSyntaxError, CronParseError, CronRangeError: invalid schedule.
            CronConfigError: unknown timezone.
        """
        if settings is None:
            settings = get_settings()
        self._schedule_text = schedule
        self._schedule = parse_schedule(schedule, strict=settings.strict_bounds)
        self._callback = callback
        self._timezone = timezone
        if timezone:
            resolve_zone(timezone)
        self._clock: Clock = clock or ThreadClock()

        self._state = EngineState.IDLE
        self._last_boundary = self._clock.now()
        self._wake_handle: TimerHandle | None = None
        self._pending: set[Any] = set()

    # === Introspection ===

    @property
    def schedule(self) -> CronSchedule:
        return self._schedule

    @property
    def timezone(self) -> str | None:
        return self._timezone

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def last_boundary(self) -> datetime:
        """Last minute boundary committed by the catch-up loop."""
        return self._last_boundary

    # === Lifecycle ===

    def start(self) -> None:
        """Start the engine.

        Aligns to the next minute boundary with a single one-shot timer,
        then wakes every 60 seconds until cancelled.

        Raises:
            CronLifecycleError: The engine was already started or cancelled.
        """
        if self._state is EngineState.RUNNING:
            raise CronLifecycleError("Already started", schedule=self._schedule_text)
        if self._state is EngineState.CANCELLED:
            raise CronLifecycleError("Already cancelled", schedule=self._schedule_text)
        self._state = EngineState.RUNNING

        current_second = self._clock.now().second
        logger.info(
            "cron_engine_started",
            schedule=self._schedule_text,
            timezone=self._timezone,
            clock=self._clock.name,
        )
        if current_second < ALIGN_GRACE_SECONDS:
            self._align()
        else:
            self._clock.call_later(60 - current_second, self._align)

    def cancel(self) -> None:
        """Cancel the engine.

        Observed at the next wake-up; a catch-up pass already in progress
        runs to completion.

        Raises:
            CronLifecycleError: The engine was already cancelled.
        """
        if self._state is EngineState.CANCELLED:
            raise CronLifecycleError("Already cancelled", schedule=self._schedule_text)
        self._state = EngineState.CANCELLED
        logger.info("cron_engine_cancelled", schedule=self._schedule_text)

    # === Timer handlers ===

    def _align(self) -> None:
        if self._state is EngineState.CANCELLED:
            return

        # Step back one minute so the current minute fires right away
        self._last_boundary = floor_to_minute(self._clock.now()) - ONE_MINUTE
        self._wake_handle = self._clock.call_every(WAKE_INTERVAL_SECONDS, self._wake)
        self._catch_up()

    def _wake(self) -> None:
        if self._state is EngineState.CANCELLED:
            if self._wake_handle is not None:
                self._wake_handle.cancel()
                self._wake_handle = None
            return
        self._catch_up()

    def _catch_up(self) -> None:
        """Evaluate every boundary between the last committed one and now."""
        now = self._clock.now()
        while self._last_boundary <= now:
            candidate = self._last_boundary + ONE_MINUTE
            if candidate > now:
                break

            self._last_boundary = candidate
            tick = CronTick.from_local(to_local_fields(candidate, self._timezone))
            self._execute_tick(tick, candidate)

    def _execute_tick(self, tick: CronTick, instant: datetime) -> None:
        if not matches(self._schedule, tick):
            return

        logger.debug("cron_tick_matched", instant=to_iso8601(instant), tick=tick)
        try:
            result = self._callback(tick, instant)
            if inspect.isawaitable(result):
                self._dispatch_awaitable(result, instant)
        except Exception as e:
            self._log_callback_failure(e, instant, exc_info=True)

    def _dispatch_awaitable(self, result: Any, instant: datetime) -> None:
        """Hand an awaitable result off without waiting for it.

        Runs on the caller's event loop when there is one, otherwise on the
        shared background loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            pending = get_background_loop().submit(_await(result))
        else:
            pending = loop.create_task(_await(result))
        self._pending.add(pending)
        pending.add_done_callback(partial(self._on_awaitable_done, instant))

    def _on_awaitable_done(self, instant: datetime, pending: Any) -> None:
        self._pending.discard(pending)
        if pending.cancelled():
            return
        error = pending.exception()
        if error is not None:
            self._log_callback_failure(error, instant)

    def _log_callback_failure(self, error: BaseException, instant: datetime, **kwargs: Any) -> None:
        logger.warning(
            "cron_callback_failed",
            schedule=self._schedule_text,
            instant=to_iso8601(instant),
            category=categorize_error(error).value,
            error=str(error),
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"CronEngine({self._schedule_text!r}, state={self._state.value})"


async def _await(awaitable: Any) -> Any:
    return await awaitable


__all__ = ["ALIGN_GRACE_SECONDS", "WAKE_INTERVAL_SECONDS", "CronCallback", "CronEngine", "EngineState"]
