"""Tests for salary computation."""

from decimal import Decimal

from payroll_ledger.calculators import compute_salary, compute_salary_for, round_to_cents
from payroll_ledger.calculators.types import ResolvedRates


class TestComputeSalary:
    """Test the hours and piece formula."""

    def test_hourly_only(self):
        assert compute_salary(Decimal("8"), Decimal("0"), Decimal("20"), Decimal("0.25")) == Decimal("160")

    def test_piece_only(self):
        assert compute_salary(Decimal("0"), Decimal("400"), Decimal("20"), Decimal("0.25")) == Decimal("100")

    def test_mixed(self):
        result = compute_salary(Decimal("4"), Decimal("100"), Decimal("20"), Decimal("0.25"))
        assert result == Decimal("105")

    def test_exact_without_rounding(self):
        result = compute_salary(Decimal("0.33"), Decimal("0"), Decimal("20.5"), Decimal("0.25"))
        assert result == Decimal("6.765")

    def test_zero_inputs(self):
        assert compute_salary(Decimal("0"), Decimal("0"), Decimal("20"), Decimal("0.25")) == Decimal("0")


class TestStoredSalary:
    """Test the rounded amount a record stores."""

    def test_rounds_half_up_to_cents(self):
        rates = ResolvedRates(hourly_rate=Decimal("20.5"), unit_price=Decimal("0.25"))

        assert compute_salary_for(Decimal("0.33"), Decimal("0"), rates) == Decimal("6.77")

    def test_round_to_cents(self):
        assert round_to_cents(Decimal("1.005")) == Decimal("1.01")
        assert round_to_cents(Decimal("1.004")) == Decimal("1.00")
        assert str(round_to_cents(Decimal("160"))) == "160.00"
