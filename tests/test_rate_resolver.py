"""Tests for pay rate resolution."""

from decimal import Decimal
from uuid import uuid4

from payroll_ledger.calculators import RateResolver
from payroll_ledger.calculators.types import Employee, RateSettings


class TestRateResolver:
    """Test hourly rate overrides and default unit price."""

    def test_employee_without_override_uses_default(self, settings):
        employee = Employee(id=uuid4(), name="Ana")

        rates = RateResolver.resolve(employee, settings)

        assert rates.hourly_rate == Decimal("20")
        assert rates.unit_price == Decimal("0.25")

    def test_override_wins_over_default(self, settings):
        employee = Employee(id=uuid4(), name="Ben", hourly_rate=Decimal("25"))

        rates = RateResolver.resolve(employee, settings)

        assert rates.hourly_rate == Decimal("25")

    def test_zero_override_is_respected(self, settings):
        """An override of zero is still an override."""
        employee = Employee(id=uuid4(), name="Volunteer", hourly_rate=Decimal("0"))

        rates = RateResolver.resolve(employee, settings)

        assert rates.hourly_rate == Decimal("0")

    def test_unit_price_is_never_overridden(self):
        settings = RateSettings(default_hourly_rate=Decimal("18"), default_unit_price=Decimal("0.40"))
        employee = Employee(id=uuid4(), name="Ben", hourly_rate=Decimal("25"))

        rates = RateResolver.resolve(employee, settings)

        assert rates.unit_price == Decimal("0.40")

    def test_unknown_employee_gets_defaults(self, settings):
        rates = RateResolver.resolve(None, settings)

        assert rates.hourly_rate == settings.default_hourly_rate
        assert rates.unit_price == settings.default_unit_price
