"""Tests for due-date normalisation."""

from datetime import date

import pytest

from taskbot.resolution.dates import DueDate, DueKind, parse_due

TODAY = date(2025, 10, 8)


class TestKeywords:
    """Tests for skip and relative keywords."""

    @pytest.mark.parametrize("text", ["skip", "SKIP", "  Skip  "])
    def test_skip_is_explicit(self, text):
        """Test 'skip' is recognised in any case and padding."""
        result = parse_due(text, TODAY)

        assert result.kind is DueKind.SKIPPED
        assert result.value is None
        assert result.is_resolved is True

    def test_today(self):
        """Test 'today' maps to the reference date."""
        assert parse_due("today", TODAY) == DueDate.parsed(TODAY)

    def test_tomorrow(self):
        """Test 'tomorrow' is one day after the reference date."""
        assert parse_due("Tomorrow", TODAY).value == date(2025, 10, 9)

    def test_in_n_days(self):
        """Test 'in N days' adds N days."""
        assert parse_due("in 3 days", TODAY).value == date(2025, 10, 11)
        assert parse_due("In 1 day", TODAY).value == date(2025, 10, 9)

    def test_relative_days_cross_month(self):
        """Test relative offsets roll over month boundaries."""
        assert parse_due("in 30 days", TODAY).value == date(2025, 11, 7)


class TestStrictFormats:
    """Tests for the numeric date formats."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2025-10-12", date(2025, 10, 12)),
            ("12-10-2025", date(2025, 10, 12)),
            ("1-2-2025", date(2025, 2, 1)),
            ("12/10/2025", date(2025, 10, 12)),
            ("3/4/2026", date(2026, 4, 3)),
        ],
    )
    def test_strict_formats_are_day_first(self, text, expected):
        """Test numeric formats parse with the day before the month."""
        result = parse_due(text, TODAY)

        assert result.kind is DueKind.PARSED
        assert result.value == expected

    @pytest.mark.parametrize("text", ["2025-13-50", "32/01/2025", "31-02-2025"])
    def test_impossible_dates_are_invalid(self, text):
        """Test impossible calendar dates are rejected, never coerced."""
        result = parse_due(text, TODAY)

        assert result.kind is DueKind.INVALID
        assert result.value is None
        assert result.is_resolved is False


class TestLenientParsing:
    """Tests for month-name parsing via dateutil."""

    def test_month_name(self):
        """Test a date written with a month name."""
        assert parse_due("12 October 2025", TODAY).value == date(2025, 10, 12)

    def test_abbreviated_month(self):
        """Test an abbreviated month name."""
        assert parse_due("Oct 20, 2025", TODAY).value == date(2025, 10, 20)


class TestInvalidInput:
    """Tests for input that is neither a date nor a skip."""

    @pytest.mark.parametrize("text", [None, "", "   ", "whenever", "soonish", "12345"])
    def test_garbage_is_invalid(self, text):
        """Test unparseable text yields INVALID."""
        assert parse_due(text, TODAY).kind is DueKind.INVALID

    @pytest.mark.parametrize("text", ["in 99999999999 days", "in 3000000 days"])
    def test_out_of_range_offset_is_invalid(self, text):
        """Test relative offsets beyond the calendar range yield INVALID instead of raising."""
        assert parse_due(text, TODAY).kind is DueKind.INVALID

    def test_tomorrow_at_calendar_end_is_invalid(self):
        """Test 'tomorrow' on the last representable date yields INVALID."""
        assert parse_due("tomorrow", date.max).kind is DueKind.INVALID
