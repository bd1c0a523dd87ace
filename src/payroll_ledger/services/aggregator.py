"""Derived views over work records: totals, payouts and history."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID

from payroll_ledger.calculators.types import Employee, Payout, UnpaidSummary, WorkRecord
from payroll_ledger.services.settlement import last_payout

ZERO = Decimal("0")


def total_unpaid(records: Iterable[WorkRecord]) -> Decimal:
    """Sum of salary over all unpaid records."""
    return sum((r.salary for r in records if not r.paid), ZERO)


def unpaid_by_employee(records: Iterable[WorkRecord], employee_id: UUID) -> Decimal:
    """Sum of salary over one employee's unpaid records."""
    return sum(
        (r.salary for r in records if r.employee_id == employee_id and not r.paid),
        ZERO,
    )


def unpaid_summary(
    employees: Sequence[Employee],
    records: Sequence[WorkRecord],
) -> list[UnpaidSummary]:
    """Outstanding pay per employee, skipping employees with nothing unpaid."""
    summaries: list[UnpaidSummary] = []
    for employee in employees:
        unpaid = [r for r in records if r.employee_id == employee.id and not r.paid]
        if not unpaid:
            continue
        summaries.append(
            UnpaidSummary(
                employee_id=employee.id,
                employee_name=employee.name,
                amount=sum((r.salary for r in unpaid), ZERO),
                record_count=len(unpaid),
            )
        )
    return summaries


def last_payouts(
    employees: Sequence[Employee],
    records: Sequence[WorkRecord],
) -> list[Payout]:
    """Latest payout per employee, newest first.

    Employees that were never paid are left out.
    """
    payouts: list[Payout] = []
    for employee in employees:
        payout = last_payout(records, employee.id, employee.name)
        if payout is not None:
            payouts.append(payout)
    payouts.sort(key=lambda p: p.paid_at, reverse=True)
    return payouts


def history(
    records: Iterable[WorkRecord],
    employee_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[WorkRecord]:
    """Filter records by employee and inclusive date range, newest date first.

    Records on the same date keep their store order.
    """
    matched = [
        r for r in records
        if (employee_id is None or r.employee_id == employee_id)
        and (start_date is None or r.date >= start_date)
        and (end_date is None or r.date <= end_date)
    ]
    # Stable sort: same-date records keep store order
    matched.sort(key=lambda r: r.date, reverse=True)
    return matched
