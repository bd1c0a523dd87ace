"""Property-based tests for ledger invariants.

Hypothesis generates quantities, rates, clock times and record sets; the
pricing and settlement invariants must hold for all of them.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from uuid import uuid4

from hypothesis import given, settings, strategies as st

from payroll_ledger.calculators import compute_salary, hours_between
from payroll_ledger.calculators.types import WorkRecord
from payroll_ledger.services import aggregator
from payroll_ledger.services.settlement import SettlementResult, apply_settlement, last_payout

PAID_AT = datetime(2024, 1, 2, 18, 0, tzinfo=timezone.utc)

quantities = st.decimals(min_value=0, max_value=10_000, places=2, allow_nan=False, allow_infinity=False)
rates = st.decimals(min_value=0, max_value=500, places=4, allow_nan=False, allow_infinity=False)
clock_times = st.builds(time, hour=st.integers(0, 23), minute=st.integers(0, 59))


class TestPricingProperties:
    """Invariants of the salary formula and clock spans."""

    @given(h=quantities, s=quantities, r=rates, u=rates)
    def test_salary_is_exact_linear_combination(self, h, s, r, u):
        assert compute_salary(h, s, r, u) == h * r + s * u

    @given(h=quantities, s=quantities, r=rates, u=rates)
    def test_salary_never_negative(self, h, s, r, u):
        assert compute_salary(h, s, r, u) >= 0

    @given(start=clock_times, end=clock_times)
    def test_span_within_a_day(self, start, end):
        hours = hours_between(start, end)

        if start == end:
            assert hours is None
        else:
            assert Decimal("0") < hours <= Decimal("24")

    @given(start=clock_times, end=clock_times)
    def test_span_and_reverse_span_fill_a_day(self, start, end):
        forward = hours_between(start, end)
        backward = hours_between(end, start)

        if start != end:
            # Each side is rounded separately
            assert abs(forward + backward - Decimal("24")) <= Decimal("0.01")


class TestSettlementProperties:
    """Invariants of settling a batch of records."""

    @settings(max_examples=50)
    @given(
        salaries=st.lists(
            st.decimals(min_value=0, max_value=1000, places=2, allow_nan=False, allow_infinity=False),
            max_size=20,
        ),
        paid_mask=st.lists(st.booleans(), min_size=20, max_size=20),
    )
    def test_payout_equals_amount_owed(self, salaries, paid_mask):
        employee_id = uuid4()
        old_batch = uuid4()
        records = [
            WorkRecord(
                id=uuid4(),
                employee_id=employee_id,
                date=date(2024, 1, 1),
                hours=Decimal("1"),
                strings=Decimal("0"),
                salary=salary,
                paid=already_paid,
                paid_at=datetime(2023, 12, 1, tzinfo=timezone.utc) if already_paid else None,
                settlement_id=old_batch if already_paid else None,
            )
            for salary, already_paid in zip(salaries, paid_mask)
        ]
        owed = aggregator.unpaid_by_employee(records, employee_id)
        unpaid_count = sum(1 for r in records if not r.paid)
        result = SettlementResult(
            employee_id=employee_id,
            paid_at=PAID_AT,
            settlement_id=uuid4(),
            settled_count=unpaid_count,
        )

        settled = apply_settlement(records, result)

        assert aggregator.unpaid_by_employee(settled, employee_id) == 0
        payout = last_payout(settled, employee_id)
        if unpaid_count:
            assert payout.amount == owed
            assert payout.record_count == unpaid_count
            assert payout.paid_at == PAID_AT
        elif any(r.paid for r in records):
            assert payout.settlement_id == old_batch
        else:
            assert payout is None
