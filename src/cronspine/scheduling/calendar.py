"""Calendar conversion: absolute instant to local calendar fields.

The conversion is a pure function of ``(instant, zone_id)``. It returns
plain calendar fields rather than a zone-aware datetime, and the tick
builder re-derives a naive local datetime from those fields when it needs
the day of week.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronspine.errors import CronConfigError


@dataclass(frozen=True)
class LocalFields:
    """Wall-clock fields of an instant in some zone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int

    def to_naive(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)


@lru_cache(maxsize=64)
def resolve_zone(zone_id: str) -> tzinfo:
    """Look up an IANA zone, raising ``CronConfigError`` for unknown ids."""
    try:
        return ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise CronConfigError(f"Unknown timezone: {zone_id}", cause=e, timezone=zone_id) from e


def to_local_fields(instant: datetime, zone_id: str | None = None) -> LocalFields:
    """Convert an aware instant to calendar fields.

    Args:
        instant: Timezone-aware datetime.
        zone_id: IANA zone name; ``None`` uses the system local zone.
    """
    local = instant.astimezone(resolve_zone(zone_id)) if zone_id else instant.astimezone()
    return LocalFields(local.year, local.month, local.day, local.hour, local.minute)


def day_of_week(fields: LocalFields) -> int:
    """Day of week of the fields' date, 0 = Sunday .. 6 = Saturday."""
    return fields.to_naive().isoweekday() % 7


__all__ = ["LocalFields", "resolve_zone", "to_local_fields", "day_of_week"]
