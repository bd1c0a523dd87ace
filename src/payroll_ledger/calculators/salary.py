"""Salary computation for hourly and piece work."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from payroll_ledger.calculators.types import ResolvedRates

OUTPUT_PRECISION = Decimal("0.01")  # 2 decimal places for persistence
QUANTITY_PRECISION = Decimal("0.01")  # hours and strings, as stored
RATE_PLACES = 4  # hourly rates and unit prices, as stored


def compute_salary(
    hours: Decimal,
    strings: Decimal,
    hourly_rate: Decimal,
    unit_price: Decimal,
) -> Decimal:
    """Earned amount: ``hours * hourly_rate + strings * unit_price``.

    Exact; rounding happens at persistence via ``round_to_cents``.
    """
    return hours * hourly_rate + strings * unit_price


def compute_salary_for(hours: Decimal, strings: Decimal, rates: ResolvedRates) -> Decimal:
    """Compute and round the salary a record stores."""
    return round_to_cents(compute_salary(hours, strings, rates.hourly_rate, rates.unit_price))


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def round_quantity(amount: Decimal) -> Decimal:
    """Round hours or strings to the 2 places a record keeps."""
    return amount.quantize(QUANTITY_PRECISION, rounding=ROUND_HALF_UP)
