"""Pay rate resolution with per-employee overrides."""

from __future__ import annotations

from payroll_ledger.calculators.types import Employee, RateSettings, ResolvedRates


class RateResolver:
    """Resolves the rates that price a work record.

    Rate selection:
    1. Hourly rate: the employee's override if set, else the system default
    2. Unit price: always the system default (no per-employee piece rate)

    An override of zero is a real override. An unknown employee (``None``)
    resolves to the defaults.
    """

    @staticmethod
    def resolve(employee: Employee | None, settings: RateSettings) -> ResolvedRates:
        """Resolve hourly rate and unit price for an employee."""
        if employee is not None and employee.hourly_rate is not None:
            hourly_rate = employee.hourly_rate
        else:
            hourly_rate = settings.default_hourly_rate

        return ResolvedRates(
            hourly_rate=hourly_rate,
            unit_price=settings.default_unit_price,
        )


resolve_rates = RateResolver.resolve
