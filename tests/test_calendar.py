"""Tests for date-only calendar utilities."""

from datetime import date, datetime

import pytest

from tuitioncalc.domain.calendar import (
    add_days,
    coerce_int,
    format_date_only,
    iter_days,
    normalize_course_days,
    parse_date_only,
    week_index,
    weekday_index,
)


class TestParseDateOnly:
    """Tests for parse_date_only."""

    @pytest.mark.parametrize(
        "value",
        [
            "2026-01-05",
            " 2026-01-05 ",
            "2026-01-05T10:30:00Z",
            "2026/01/05",
            "Jan 5, 2026",
            date(2026, 1, 5),
            datetime(2026, 1, 5, 23, 59),
        ],
    )
    def test_parses_supported_inputs(self, value):
        """Supported shapes should all land on the same calendar date."""
        assert parse_date_only(value) == date(2026, 1, 5)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", 20260105, ["2026-01-05"]])
    def test_unusable_inputs_return_none(self, value):
        """Unparseable input should give None instead of raising."""
        assert parse_date_only(value) is None


class TestFormatting:
    """Tests for formatting and arithmetic helpers."""

    def test_format_date_only_zero_pads(self):
        assert format_date_only(date(2026, 1, 5)) == "2026-01-05"

    def test_format_none_is_empty(self):
        assert format_date_only(None) == ""

    def test_add_days_crosses_month(self):
        assert add_days(date(2026, 1, 30), 3) == date(2026, 2, 2)

    def test_add_days_moves_back(self):
        assert add_days(date(2026, 3, 1), -1) == date(2026, 2, 28)

    def test_iter_days_is_inclusive(self):
        days = list(iter_days(date(2026, 1, 5), date(2026, 1, 7)))
        assert days == [date(2026, 1, 5), date(2026, 1, 6), date(2026, 1, 7)]


class TestWeekdays:
    """Tests for weekday numbering (0=Sunday..6=Saturday)."""

    def test_sunday_is_zero(self):
        assert weekday_index(date(2026, 1, 4)) == 0

    def test_monday_is_one(self):
        assert weekday_index(date(2026, 1, 5)) == 1

    def test_saturday_is_six(self):
        assert weekday_index(date(2026, 1, 10)) == 6

    def test_week_index_counts_seven_day_blocks(self):
        """Week numbers are 1-based and counted from the start date."""
        start = date(2026, 1, 7)  # Wednesday
        assert week_index(start, start) == 1
        assert week_index(start, date(2026, 1, 13)) == 1
        assert week_index(start, date(2026, 1, 14)) == 2

    def test_normalize_course_days(self):
        """Duplicates and out-of-range values are dropped, result sorted."""
        assert normalize_course_days([5, 1, "3", 1, 9, -1, "x"]) == [1, 3, 5]

    def test_normalize_course_days_rejects_non_lists(self):
        assert normalize_course_days(None) == []
        assert normalize_course_days("135") == []


class TestCoerceInt:
    """Tests for coerce_int."""

    @pytest.mark.parametrize(
        "value, expected",
        [(4, 4), ("4", 4), (4.0, 4), (" 12 ", 12), (4.5, None), ("x", None), (True, None), (None, None)],
    )
    def test_coerce_int(self, value, expected):
        assert coerce_int(value) == expected
