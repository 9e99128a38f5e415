"""
UTC timestamp utilities (stdlib-only).

All instants inside cronspine are timezone-aware UTC datetimes. Boundaries
are instants with zero seconds and zero microseconds.
"""

from datetime import UTC, datetime, timedelta

ONE_MINUTE = timedelta(minutes=1)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def floor_to_minute(dt: datetime) -> datetime:
    """Truncate ``dt`` to the start of its minute."""
    return dt.replace(second=0, microsecond=0)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()
