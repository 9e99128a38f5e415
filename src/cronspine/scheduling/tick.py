"""A single candidate minute and the schedule match predicate."""

from __future__ import annotations

from dataclasses import dataclass

from .calendar import LocalFields, day_of_week
from .fields import CronSchedule


@dataclass(frozen=True)
class CronTick:
    """Local calendar fields of one minute boundary (dow: 0 = Sunday)."""

    minute: int
    hour: int
    day: int
    month: int
    dow: int

    @classmethod
    def from_local(cls, fields: LocalFields) -> CronTick:
        return cls(
            minute=fields.minute,
            hour=fields.hour,
            day=fields.day,
            month=fields.month,
            dow=day_of_week(fields),
        )


def matches(schedule: CronSchedule, tick: CronTick) -> bool:
    """True when every field of ``tick`` is in the matching schedule set.

    Plain conjunction: day-of-month and day-of-week must both match.
    """
    return (
        tick.minute in schedule.minutes
        and tick.hour in schedule.hours
        and tick.day in schedule.days
        and tick.month in schedule.months
        and tick.dow in schedule.dows
    )


__all__ = ["CronTick", "matches"]
