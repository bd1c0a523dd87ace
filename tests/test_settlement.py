"""Tests for settlement and payout reconstruction."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

from payroll_ledger.calculators.types import NewWorkRecord
from payroll_ledger.services.settlement import (
    SettlementResult,
    SettlementService,
    apply_settlement,
    last_payout,
)

PAID_AT = datetime(2024, 1, 2, 18, 0, tzinfo=timezone.utc)


class TestLastPayout:
    """Test grouping paid records into the latest batch."""

    def test_never_paid(self, employee, make_record):
        records = [make_record(), make_record()]

        assert last_payout(records, employee.id) is None

    def test_latest_batch_by_settlement_id(self, employee, make_record):
        first, second = uuid4(), uuid4()
        earlier = PAID_AT - timedelta(days=7)
        records = [
            make_record(paid=True, paid_at=earlier, settlement_id=first, salary=Decimal("50.00")),
            make_record(paid=True, paid_at=PAID_AT, settlement_id=second, salary=Decimal("160.00")),
            make_record(paid=True, paid_at=PAID_AT, settlement_id=second, salary=Decimal("100.00")),
            make_record(salary=Decimal("999.00")),
        ]

        payout = last_payout(records, employee.id, "Ana")

        assert payout.amount == Decimal("260.00")
        assert payout.record_count == 2
        assert payout.paid_at == PAID_AT
        assert payout.settlement_id == second
        assert payout.employee_name == "Ana"

    def test_falls_back_to_exact_paid_at(self, employee, make_record):
        """Records settled without a batch id group by identical timestamp."""
        records = [
            make_record(paid=True, paid_at=PAID_AT, salary=Decimal("10.00")),
            make_record(paid=True, paid_at=PAID_AT, salary=Decimal("20.00")),
            make_record(
                paid=True,
                paid_at=PAID_AT - timedelta(milliseconds=1),
                salary=Decimal("40.00"),
            ),
        ]

        payout = last_payout(records, employee.id)

        assert payout.amount == Decimal("30.00")
        assert payout.settlement_id is None

    def test_other_employees_ignored(self, employee, make_record):
        records = [make_record(employee_id=uuid4(), paid=True, paid_at=PAID_AT)]

        assert last_payout(records, employee.id) is None


class TestApplySettlement:
    """Test mirroring a settlement onto cached records."""

    def test_only_unpaid_records_of_employee_change(self, employee, make_record):
        old_batch = uuid4()
        already_paid = make_record(
            paid=True, paid_at=PAID_AT - timedelta(days=7), settlement_id=old_batch
        )
        unpaid = make_record()
        someone_else = make_record(employee_id=uuid4())
        result = SettlementResult(
            employee_id=employee.id,
            paid_at=PAID_AT,
            settlement_id=uuid4(),
            settled_count=1,
        )

        applied = apply_settlement([already_paid, unpaid, someone_else], result)

        assert applied[0] == already_paid
        assert applied[1].paid is True
        assert applied[1].paid_at == PAID_AT
        assert applied[1].settlement_id == result.settlement_id
        assert applied[2] == someone_else

    def test_noop_result_changes_nothing(self, employee, make_record):
        unpaid = make_record()
        result = SettlementResult(
            employee_id=employee.id,
            paid_at=PAID_AT,
            settlement_id=uuid4(),
            settled_count=0,
        )

        assert apply_settlement([unpaid], result) == [unpaid]


class TestSettlementService:
    """Test the store-facing settle operation."""

    async def test_batch_shares_timestamp_and_id(self, store):
        employee = await store.create_employee("Ana", None)
        for hours in ("8", "4"):
            await store.create_work_record(
                NewWorkRecord(
                    employee.id,
                    date(2024, 1, 1),
                    Decimal(hours),
                    Decimal("0"),
                    Decimal(hours) * 20,
                )
            )

        result = await SettlementService(store).settle(employee.id, PAID_AT)
        records = await store.list_work_records()

        assert result.settled_count == 2
        assert {r.paid_at for r in records} == {PAID_AT}
        assert {r.settlement_id for r in records} == {result.settlement_id}
        assert all(r.paid for r in records)

    async def test_naive_now_treated_as_utc(self, store):
        employee = await store.create_employee("Ana", None)
        await store.create_work_record(
            NewWorkRecord(employee.id, date(2024, 1, 1), Decimal("1"), Decimal("0"), Decimal("20.00"))
        )

        result = await SettlementService(store).settle(employee.id, datetime(2024, 1, 2, 18, 0))

        assert result.paid_at == PAID_AT
        assert result.paid_at.tzinfo == timezone.utc

    async def test_second_settle_is_noop(self, store):
        employee = await store.create_employee("Ana", None)
        await store.create_work_record(
            NewWorkRecord(employee.id, date(2024, 1, 1), Decimal("1"), Decimal("0"), Decimal("20.00"))
        )
        service = SettlementService(store)
        await service.settle(employee.id, PAID_AT)

        again = await service.settle(employee.id, PAID_AT + timedelta(hours=1))
        records = await store.list_work_records()

        assert again.is_noop
        assert records[0].paid_at == PAID_AT
