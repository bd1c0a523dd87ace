"""Tests for clock-time spans."""

from datetime import time
from decimal import Decimal

import pytest

from payroll_ledger.calculators.time_span import hours_between, parse_clock_time
from payroll_ledger.exceptions import ValidationError


class TestHoursBetween:
    """Test hours between two clock times."""

    def test_same_day_span(self):
        assert hours_between("09:00", "17:30") == Decimal("8.50")

    def test_overnight_span_wraps(self):
        assert hours_between("22:00", "02:00") == Decimal("4.00")

    def test_equal_times_yield_none(self):
        assert hours_between("09:00", "09:00") is None

    def test_rounds_to_two_places(self):
        # 20 minutes = 0.333... hours
        assert hours_between("09:00", "09:20") == Decimal("0.33")
        # 50 minutes = 0.8333... hours
        assert hours_between("09:00", "09:50") == Decimal("0.83")

    def test_accepts_time_objects(self):
        assert hours_between(time(8, 15), time(12, 45)) == Decimal("4.50")

    def test_one_minute_before_start_is_almost_a_day(self):
        assert hours_between("10:00", "09:59") == Decimal("23.98")


class TestParseClockTime:
    """Test HH:MM parsing."""

    def test_parses_padded_and_unpadded(self):
        assert parse_clock_time("07:05") == time(7, 5)
        assert parse_clock_time("7:05") == time(7, 5)

    @pytest.mark.parametrize("value", ["", "25:00", "noon", "12-30", None])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_clock_time(value)
