"""cronspine - a minimal crontab-style job scheduler.

Parses five-field cron schedules and calls a function exactly once for
every matching minute, catching up on minutes missed while the process
was asleep or the timer fired late.

Usage:
    from cronspine import CronEngine

    def job(tick, instant):
        print("tick", tick, instant)

    engine = CronEngine("* * * * *", job, timezone="Europe/London")
    engine.start()
"""

from cronspine.errors import (
    CronConfigError,
    CronError,
    CronLifecycleError,
    CronParseError,
    CronRangeError,
    CronSyntaxError,
)
from cronspine.scheduling import (
    CronEngine,
    CronSchedule,
    CronTick,
    EngineState,
    parse_field,
    parse_schedule,
)

__version__ = "0.1.0"

__all__ = [
    "CronEngine",
    "CronSchedule",
    "CronTick",
    "EngineState",
    "parse_field",
    "parse_schedule",
    "CronError",
    "CronSyntaxError",
    "CronParseError",
    "CronRangeError",
    "CronLifecycleError",
    "CronConfigError",
]
