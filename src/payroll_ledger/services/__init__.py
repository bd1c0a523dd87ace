"""Payroll ledger services."""

from payroll_ledger.services.ledger_service import LedgerService
from payroll_ledger.services.settlement import SettlementResult, SettlementService
from payroll_ledger.services.state_machine import WorkRecordStateMachine

__all__ = [
    "LedgerService",
    "SettlementResult",
    "SettlementService",
    "WorkRecordStateMachine",
]
