"""cronspine scheduling - field parser, ticks, clocks and the cron engine.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SCHEDULING MODULE                                                            │
│                                                                               │
│  Components:                                                                  │
│  - fields.py:          parse_field / parse_schedule → CronSchedule            │
│  - tick.py:            CronTick and the match predicate                       │
│  - calendar.py:        instant + zone id → LocalFields                        │
│  - protocol.py:        Clock / TimerHandle protocols                          │
│  - thread_backend.py:  ThreadClock, BackgroundLoop (stdlib)                    │
│  - engine.py:          CronEngine (alignment, catch-up, dispatch)             │
│                                                                               │
│  Quick Start:                                                                 │
│                                                                               │
│      from cronspine.scheduling import CronEngine                             │
│                                                                               │
│      engine = CronEngine("0 9 * * 1-5", send_report, timezone="Europe/London")│
│      engine.start()                                                          │
│      ...                                                                     │
│      engine.cancel()                                                         │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from .calendar import LocalFields, day_of_week, resolve_zone, to_local_fields
from .engine import (
    ALIGN_GRACE_SECONDS,
    WAKE_INTERVAL_SECONDS,
    CronCallback,
    CronEngine,
    EngineState,
)
from .fields import FIELD_BOUNDS, CronSchedule, parse_field, parse_schedule
from .protocol import Clock, TimerCallback, TimerHandle
from .thread_backend import BackgroundLoop, OneShotTimer, PeriodicTimer, ThreadClock, get_background_loop
from .tick import CronTick, matches

__all__ = [
    # Parser
    "FIELD_BOUNDS",
    "CronSchedule",
    "parse_field",
    "parse_schedule",
    # Ticks
    "CronTick",
    "matches",
    # Calendar
    "LocalFields",
    "day_of_week",
    "resolve_zone",
    "to_local_fields",
    # Clocks
    "Clock",
    "TimerCallback",
    "TimerHandle",
    "OneShotTimer",
    "PeriodicTimer",
    "ThreadClock",
    "BackgroundLoop",
    "get_background_loop",
    # Engine
    "ALIGN_GRACE_SECONDS",
    "WAKE_INTERVAL_SECONDS",
    "CronCallback",
    "CronEngine",
    "EngineState",
]
