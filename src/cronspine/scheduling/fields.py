"""Cron field parser and the parsed ``CronSchedule`` value.

A schedule string is five space-separated fields. Each field is a
comma-separated list of items, and every item expands to a set of integers:

┌──────────────────────────────────────────────────────────────────────────────┐
│  ITEM GRAMMAR                                                                 │
│                                                                               │
│   *          every value in [min, max]                                        │
│   */N        every i in [0, max) with i % N == 0                              │
│   A-B        every value in [A, B] (nothing when A > B)                       │
│   A-B/N      every i in [A, B] with (i - A) % N == 0                          │
│   V          the single value V                                               │
│                                                                               │
│  Normalization (every produced value):                                        │
│   min == 0  →  value % (max + 1)     60→0 minutes, 24→0 hours, 7→0 dow        │
│   min  > 0  →  dropped unless min <= value <= max                             │
│                                                                               │
│  The first *, */N, A-B or A-B/N item ends the field; later comma items        │
│  are not read.                                                                │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from cronspine.errors import CronParseError, CronRangeError, CronSyntaxError

_RANGE = re.compile(r"([0-9]+)-([0-9]+)")
_RANGE_STEP = re.compile(r"([0-9]+)-([0-9]+)/([0-9]+)")
_WILDCARD_STEP = re.compile(r"\*/([0-9]+)")
_VALUE = re.compile(r"([0-9]+)")

# (name, min, max) in schedule order
FIELD_BOUNDS: tuple[tuple[str, int, int], ...] = (
    ("minutes", 0, 59),
    ("hours", 0, 23),
    ("days", 1, 31),
    ("months", 1, 12),
    ("dows", 0, 6),
)


@dataclass(frozen=True)
class CronSchedule:
    """The five parsed fields of a cron schedule.

    Each field is a sorted tuple of unique ints within its bounds.
    """

    minutes: tuple[int, ...]
    hours: tuple[int, ...]
    days: tuple[int, ...]
    months: tuple[int, ...]
    dows: tuple[int, ...]

    def to_dict(self) -> dict[str, list[int]]:
        """Convert to dictionary for serialization."""
        return {name: list(getattr(self, name)) for name, _, _ in FIELD_BOUNDS}


def _step(item: str, raw: str) -> int:
    step = int(raw)
    if step == 0:
        raise CronParseError(f"Step must be greater than zero: {item}", item=item)
    return step


def parse_field(
    text: str,
    min_value: int,
    max_value: int,
    *,
    strict: bool = False,
) -> tuple[int, ...]:
    """Expand one cron field into a sorted tuple of unique values.

    Args:
        text: Comma-separated field items, e.g. ``"0-20/5"`` or ``"1,15"``.
        min_value: Lowest legal value of the field.
        max_value: Highest legal value of the field.
        strict: Reject bare integers outside ``[min_value, max_value]``
            with ``CronRangeError`` instead of normalizing them.

    Raises:
        CronParseError: An item matches none of the item grammars.
        CronRangeError: ``strict`` is set and a bare integer is out of bounds.
    """
    mod_value = max_value + 1 if min_value == 0 else None
    values: set[int] = set()

    def push(i: int) -> None:
        if mod_value is not None:
            values.add(i % mod_value)
        elif min_value <= i <= max_value:
            values.add(i)

    for item in text.split(","):
        if item == "*":
            for i in range(min_value, max_value + 1):
                push(i)
            break

        match = _RANGE.fullmatch(item)
        if match:
            start, end = int(match[1]), int(match[2])
            if start <= end:
                for i in range(start, end + 1):
                    push(i)
            break

        match = _RANGE_STEP.fullmatch(item)
        if match:
            start, end = int(match[1]), int(match[2])
            step = _step(item, match[3])
            if start <= end:
                for i in range(start, end + 1):
                    if (i - start) % step == 0:
                        push(i)
            break

        match = _WILDCARD_STEP.fullmatch(item)
        if match:
            step = _step(item, match[1])
            for i in range(0, max_value):
                if i % step == 0:
                    push(i)
            break

        match = _VALUE.fullmatch(item)
        if not match:
            raise CronParseError(f"Could not parse cron value: {item}", item=item)

        value = int(match[1])
        if strict:
            in_bounds = min_value <= value <= max_value
        else:
            in_bounds = value >= min_value or value <= max_value
        if not in_bounds:
            raise CronRangeError(value, min_value, max_value)
        push(value)

    return tuple(sorted(values))


def parse_schedule(text: str, *, strict: bool = False) -> CronSchedule:
    """Parse a five-field cron schedule string.

    Raises:
        CronSyntaxError: ``text`` does not split into exactly five fields.
        CronParseError: A field item is not valid cron syntax.
        CronRangeError: ``strict`` is set and a value is out of bounds.
    """
    pieces = text.split(" ")
    if len(pieces) != len(FIELD_BOUNDS):
        raise CronSyntaxError(text)

    parsed = {}
    for piece, (name, low, high) in zip(pieces, FIELD_BOUNDS):
        try:
            parsed[name] = parse_field(piece, low, high, strict=strict)
        except (CronParseError, CronRangeError) as e:
            e.with_context(field=name, schedule=text)
            raise
    return CronSchedule(**parsed)


__all__ = ["FIELD_BOUNDS", "CronSchedule", "parse_field", "parse_schedule"]
