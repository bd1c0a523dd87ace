"""Work record payment state machine with transition validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from payroll_ledger.calculators.types import RecordStatus
from payroll_ledger.exceptions import InvalidTransitionError

if TYPE_CHECKING:
    from payroll_ledger.calculators.types import WorkRecord


class WorkRecordStateMachine:
    """State machine for work record payment status.

    Allowed transitions:
    - unpaid → paid (settlement)

    Paid is terminal: a settled record is never reopened. Its monetary
    fields stay editable, but editing never reverts the status.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        RecordStatus.UNPAID: [RecordStatus.PAID],
        RecordStatus.PAID: [],  # Terminal state
    }

    # Fields an explicit edit may change, in any status
    EDITABLE_FIELDS = frozenset({"date", "hours", "strings", "salary"})

    # Fields only settlement may change
    SETTLEMENT_FIELDS = frozenset({"paid", "paid_at", "settlement_id"})

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def can_settle(cls, record: WorkRecord) -> bool:
        """Check if a record is part of the next settlement batch."""
        return cls.can_transition(record.status, RecordStatus.PAID)

    @classmethod
    def validate_edit(cls, record: WorkRecord, fields: set[str]) -> None:
        """Validate the fields of an explicit edit.

        Raises InvalidTransitionError when the edit would touch the payment
        status, which only settlement may change.
        """
        touched = fields & cls.SETTLEMENT_FIELDS
        if touched:
            raise InvalidTransitionError(
                record.status,
                RecordStatus.UNPAID if record.paid else RecordStatus.PAID,
                f"payment fields {sorted(touched)} are set by settlement only",
            )
