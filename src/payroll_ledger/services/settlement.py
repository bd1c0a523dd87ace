"""Settlement of unpaid work records and payout reconstruction."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from payroll_ledger.calculators.types import Payout, RecordStatus, WorkRecord
from payroll_ledger.models.base import utcnow
from payroll_ledger.services.state_machine import WorkRecordStateMachine
from payroll_ledger.store.base import WorkRecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of one settle call."""

    employee_id: UUID
    paid_at: datetime
    settlement_id: UUID
    settled_count: int

    @property
    def is_noop(self) -> bool:
        return self.settled_count == 0


class SettlementService:
    """Marks an employee's unpaid records paid as one batch.

    The whole batch shares one ``paid_at`` and one ``settlement_id`` and is
    written with a single store request. A payout is later reconstructed
    from that shared stamp, so the batch is never written record by record.
    """

    def __init__(self, store: WorkRecordStore):
        self.store = store

    async def settle(self, employee_id: UUID, now: datetime | None = None) -> SettlementResult:
        """Settle every unpaid record of an employee at ``now``."""
        paid_at = now or utcnow()
        if paid_at.tzinfo is None:
            paid_at = paid_at.replace(tzinfo=timezone.utc)
        paid_at = paid_at.astimezone(timezone.utc)
        settlement_id = uuid4()

        settled = await self.store.settle_batch(employee_id, paid_at, settlement_id)
        if settled:
            logger.info(
                "Settled %d record(s) for employee %s at %s (batch %s)",
                settled,
                employee_id,
                paid_at.isoformat(),
                settlement_id,
            )
        else:
            logger.info("Nothing to settle for employee %s", employee_id)

        return SettlementResult(
            employee_id=employee_id,
            paid_at=paid_at,
            settlement_id=settlement_id,
            settled_count=settled,
        )


def apply_settlement(records: Iterable[WorkRecord], result: SettlementResult) -> list[WorkRecord]:
    """Return records with a settlement applied, as the store now holds them."""
    if result.is_noop:
        return list(records)

    updated: list[WorkRecord] = []
    for record in records:
        if record.employee_id == result.employee_id and WorkRecordStateMachine.can_settle(record):
            WorkRecordStateMachine.validate_transition(record.status, RecordStatus.PAID)
            record = replace(
                record,
                paid=True,
                paid_at=result.paid_at,
                settlement_id=result.settlement_id,
            )
        updated.append(record)
    return updated


def last_payout(
    records: Iterable[WorkRecord],
    employee_id: UUID,
    employee_name: str = "",
) -> Payout | None:
    """The most recent payout batch of an employee, or None if never paid.

    The batch is identified by the latest record's settlement id; records
    settled without one are grouped by exact ``paid_at`` equality.
    """
    paid = [
        r for r in records
        if r.employee_id == employee_id and r.paid and r.paid_at is not None
    ]
    if not paid:
        return None

    latest = max(paid, key=lambda r: r.paid_at)
    if latest.settlement_id is not None:
        batch = [r for r in paid if r.settlement_id == latest.settlement_id]
    else:
        batch = [r for r in paid if r.settlement_id is None and r.paid_at == latest.paid_at]

    return Payout(
        employee_id=employee_id,
        employee_name=employee_name,
        paid_at=latest.paid_at,
        amount=sum((r.salary for r in batch), Decimal("0")),
        records=tuple(batch),
        settlement_id=latest.settlement_id,
    )
