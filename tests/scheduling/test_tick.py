"""Tests for CronTick and schedule matching."""

from cronspine.scheduling import CronTick, LocalFields, matches, parse_schedule


def _tick(minute=0, hour=0, day=1, month=1, dow=1):
    return CronTick(minute=minute, hour=hour, day=day, month=month, dow=dow)


class TestMatches:
    def test_every_minute_matches_anything(self):
        schedule = parse_schedule("* * * * *")
        assert matches(schedule, _tick(minute=59, hour=23, day=31, month=12, dow=6))

    def test_minute_mismatch(self):
        schedule = parse_schedule("*/2 * * * *")
        assert matches(schedule, _tick(minute=4))
        assert not matches(schedule, _tick(minute=5))

    def test_day_and_dow_are_a_conjunction(self):
        # 13th of the month AND Friday, not either
        schedule = parse_schedule("0 0 13 * 5")
        assert matches(schedule, _tick(day=13, dow=5))
        assert not matches(schedule, _tick(day=13, dow=4))
        assert not matches(schedule, _tick(day=12, dow=5))

    def test_month_mismatch(self):
        schedule = parse_schedule("0 0 1 6 *")
        assert not matches(schedule, _tick(month=7))


class TestFromLocal:
    def test_builds_from_fields(self):
        # 2024-01-07 is a Sunday
        tick = CronTick.from_local(LocalFields(2024, 1, 7, 18, 45))
        assert tick == CronTick(minute=45, hour=18, day=7, month=1, dow=0)

    def test_saturday(self):
        tick = CronTick.from_local(LocalFields(2024, 1, 6, 0, 0))
        assert tick.dow == 6
