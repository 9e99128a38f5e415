"""
Shared pytest fixtures for cronspine tests.

This module provides:
- A manual clock starting at a fixed UTC instant
- A tick recorder usable as an engine callback
- Settings cache isolation between tests
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Ensure cronspine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cronspine.settings import CronSettings, reset_settings  # noqa: E402
from tests._support.manual_clock import ManualClock  # noqa: E402


class TickRecorder:
    """Engine callback that records every (tick, instant) it receives."""

    def __init__(self) -> None:
        self.calls = []

    def __call__(self, tick, instant) -> None:
        self.calls.append((tick, instant))

    @property
    def instants(self) -> list[datetime]:
        return [instant for _, instant in self.calls]

    @property
    def ticks(self):
        return [tick for tick, _ in self.calls]


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Keep CRONSPINE_* variables from the host out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("CRONSPINE_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Lenient settings with no .env lookup."""
    return CronSettings(_env_file=None)


@pytest.fixture
def start_instant():
    """Monday 2024-01-01 12:00:30 UTC."""
    return datetime(2024, 1, 1, 12, 0, 30, tzinfo=UTC)


@pytest.fixture
def clock(start_instant):
    return ManualClock(start_instant)


@pytest.fixture
def recorder():
    return TickRecorder()
