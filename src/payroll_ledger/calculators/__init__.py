"""Payroll calculation primitives."""

from payroll_ledger.calculators.rate_resolver import RateResolver, resolve_rates
from payroll_ledger.calculators.salary import (
    compute_salary,
    compute_salary_for,
    round_quantity,
    round_to_cents,
)
from payroll_ledger.calculators.time_span import hours_between, parse_clock_time

__all__ = [
    "RateResolver",
    "resolve_rates",
    "compute_salary",
    "compute_salary_for",
    "round_to_cents",
    "round_quantity",
    "hours_between",
    "parse_clock_time",
]
