"""Tests for the cron field parser."""

from dataclasses import FrozenInstanceError

import pytest

from cronspine.errors import CronParseError, CronRangeError, CronSyntaxError
from cronspine.scheduling import FIELD_BOUNDS, CronSchedule, parse_field, parse_schedule


class TestParseFieldItems:
    """Each item grammar expands to the expected values."""

    def test_wildcard_minutes(self):
        assert parse_field("*", 0, 59) == tuple(range(60))

    def test_wildcard_days(self):
        assert parse_field("*", 1, 31) == tuple(range(1, 32))

    def test_list_is_deduplicated_and_sorted(self):
        assert parse_field("5,1,5", 0, 59) == (1, 5)

    def test_list_sorts_numerically(self):
        assert parse_field("10,9,2", 0, 59) == (2, 9, 10)

    def test_range(self):
        assert parse_field("10-12", 0, 23) == (10, 11, 12)

    def test_reversed_range_is_empty(self):
        assert parse_field("12-10", 0, 23) == ()

    def test_stepped_range(self):
        assert parse_field("0-20/5", 0, 59) == (0, 5, 10, 15, 20)

    def test_stepped_range_starts_at_range_start(self):
        assert parse_field("3-20/5", 0, 59) == (3, 8, 13, 18)

    def test_reversed_stepped_range_is_empty(self):
        assert parse_field("20-3/5", 0, 59) == ()

    def test_stepped_wildcard(self):
        assert parse_field("*/15", 0, 59) == (0, 15, 30, 45)

    def test_stepped_wildcard_every_other_minute(self):
        assert parse_field("*/2", 0, 59) == tuple(range(0, 60, 2))

    def test_single_value(self):
        assert parse_field("7", 0, 59) == (7,)


class TestNormalization:
    """Zero-based fields fold values, one-based fields drop them."""

    def test_sixty_folds_to_zero_for_minutes(self):
        assert parse_field("60", 0, 59) == (0,)

    def test_twenty_four_folds_to_zero_for_hours(self):
        assert parse_field("24", 0, 23) == (0,)

    def test_seven_is_sunday(self):
        assert parse_field("7", 0, 6) == (0,)

    def test_range_past_max_wraps(self):
        assert parse_field("10-30/10", 0, 23) == (6, 10, 20)

    def test_day_out_of_bounds_is_dropped(self):
        assert parse_field("32", 1, 31) == ()
        assert parse_field("0", 1, 31) == ()

    def test_month_range_is_clipped(self):
        assert parse_field("10-14", 1, 12) == (10, 11, 12)

    def test_stepped_wildcard_on_days_skips_zero(self):
        assert parse_field("*/2", 1, 31) == tuple(range(2, 31, 2))

    def test_stepped_wildcard_on_months(self):
        assert parse_field("*/5", 1, 12) == (5, 10)

    @pytest.mark.parametrize(
        "text",
        ["*", "*/7", "1-59/3", "3,61,75", "0-100", "59,58,57,0"],
    )
    @pytest.mark.parametrize("name,low,high", FIELD_BOUNDS)
    def test_output_sorted_unique_within_bounds(self, text, name, low, high):
        values = parse_field(text, low, high)
        assert list(values) == sorted(set(values))
        assert all(low <= v <= high for v in values)


class TestEarlyStop:
    """The first whole-field item ends the field."""

    def test_items_after_range_are_ignored(self):
        assert parse_field("1-3,7", 0, 59) == (1, 2, 3)

    def test_items_before_range_are_kept(self):
        assert parse_field("7,1-3", 0, 59) == (1, 2, 3, 7)

    def test_wildcard_after_value(self):
        assert parse_field("5,*", 0, 6) == tuple(range(7))

    def test_invalid_item_after_wildcard_not_read(self):
        assert parse_field("*,bogus", 0, 6) == tuple(range(7))


class TestParseFieldErrors:
    """Unparseable items raise CronParseError."""

    @pytest.mark.parametrize("item", ["x", "", "-1", "1-", "*/", "1/5", "**", " 5", "5\n", "1-3\n", "*/5\n"])
    def test_unparseable_item(self, item):
        with pytest.raises(CronParseError) as exc_info:
            parse_field(item, 0, 59)
        assert exc_info.value.item == item

    def test_empty_list_item(self):
        with pytest.raises(CronParseError, match="Could not parse cron value"):
            parse_field("1,,2", 0, 59)

    @pytest.mark.parametrize("item", ["*/0", "1-5/0"])
    def test_zero_step(self, item):
        with pytest.raises(CronParseError, match="Step must be greater than zero"):
            parse_field(item, 0, 59)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_field("nope", 0, 59)


class TestStrictBounds:
    """strict=True rejects bare integers outside the field's bounds."""

    def test_lenient_by_default(self):
        assert parse_field("99", 0, 59) == (39,)

    def test_strict_rejects_above_max(self):
        with pytest.raises(CronRangeError) as exc_info:
            parse_field("60", 0, 59, strict=True)
        err = exc_info.value
        assert (err.value, err.min_value, err.max_value) == (60, 0, 59)
        assert "should be min: 0 and max: 59" in str(err)

    def test_strict_rejects_below_min(self):
        with pytest.raises(CronRangeError):
            parse_field("0", 1, 31, strict=True)

    def test_strict_accepts_bounds(self):
        assert parse_field("0,59", 0, 59, strict=True) == (0, 59)


class TestParseSchedule:
    """parse_schedule splits into five fields with fixed bounds."""

    def test_every_minute(self):
        schedule = parse_schedule("* * * * *")
        assert schedule.minutes == tuple(range(60))
        assert schedule.hours == tuple(range(24))
        assert schedule.days == tuple(range(1, 32))
        assert schedule.months == tuple(range(1, 13))
        assert schedule.dows == tuple(range(7))

    def test_weekday_mornings(self):
        schedule = parse_schedule("30 9 * * 1-5")
        assert schedule.minutes == (30,)
        assert schedule.hours == (9,)
        assert schedule.dows == (1, 2, 3, 4, 5)

    @pytest.mark.parametrize("text", ["* * * *", "* * * * * *", "", "*****"])
    def test_wrong_field_count(self, text):
        with pytest.raises(CronSyntaxError):
            parse_schedule(text)

    def test_double_space_is_a_syntax_error(self):
        with pytest.raises(CronSyntaxError):
            parse_schedule("*  * * * *")

    def test_error_names_the_field(self):
        with pytest.raises(CronParseError) as exc_info:
            parse_schedule("* * x * *")
        assert exc_info.value.context["field"] == "days"
        assert exc_info.value.context["schedule"] == "* * x * *"

    def test_trailing_newline_is_rejected(self):
        with pytest.raises(CronParseError) as exc_info:
            parse_schedule("* * * * 5\n")
        assert exc_info.value.context["field"] == "dows"

    def test_strict_passed_through(self):
        with pytest.raises(CronRangeError) as exc_info:
            parse_schedule("0 24 * * *", strict=True)
        assert exc_info.value.context["field"] == "hours"

    def test_schedule_is_immutable(self):
        schedule = parse_schedule("* * * * *")
        with pytest.raises(FrozenInstanceError):
            schedule.minutes = (1,)

    def test_to_dict(self):
        schedule = parse_schedule("0 0 1 1 0")
        assert schedule.to_dict() == {
            "minutes": [0],
            "hours": [0],
            "days": [1],
            "months": [1],
            "dows": [0],
        }

    def test_equal_schedules_compare_equal(self):
        assert parse_schedule("0,30 * * * *") == CronSchedule(
            minutes=(0, 30),
            hours=tuple(range(24)),
            days=tuple(range(1, 32)),
            months=tuple(range(1, 13)),
            dows=tuple(range(7)),
        )
