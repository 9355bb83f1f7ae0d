"""Tests for timezone helpers."""

from datetime import date, datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfoNotFoundError

import pytest

from taskbot.core.timezone import format_due, local_now, local_today


class TestLocalNow:
    """Tests for local_now/local_today."""

    def test_is_timezone_aware(self):
        """Test the returned datetime carries the requested zone."""
        now = local_now("Asia/Dubai")

        assert now.tzinfo is not None
        assert str(now.tzinfo) == "Asia/Dubai"

    def test_invalid_zone_raises(self):
        """Test unknown identifiers surface ZoneInfoNotFoundError."""
        with pytest.raises(ZoneInfoNotFoundError):
            local_now("Not/AZone")

    def test_today_crosses_date_line(self):
        """Test the local date differs from UTC near midnight."""
        fixed = datetime(2025, 3, 1, 22, 30, tzinfo=timezone.utc)

        with patch("taskbot.core.timezone.datetime") as mock_datetime:
            mock_datetime.now.side_effect = lambda tz: fixed.astimezone(tz)
            assert local_today("Asia/Dubai") == date(2025, 3, 2)
            assert local_today("UTC") == date(2025, 3, 1)


class TestFormatDue:
    """Tests for format_due."""

    def test_none(self):
        """Test a missing date renders as 'No due date'."""
        assert format_due(None) == "No due date"

    def test_strips_leading_zero(self):
        """Test single-digit days are not zero padded."""
        assert format_due(date(2025, 3, 5)) == "Mar 5, 2025"

    def test_two_digit_day(self):
        """Test two-digit days render unchanged."""
        assert format_due(date(2025, 12, 25)) == "Dec 25, 2025"
