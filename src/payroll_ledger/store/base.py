"""Work record store interface."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from payroll_ledger.calculators.types import (
    Employee,
    NewWorkRecord,
    RateSettings,
    WorkRecord,
)


@runtime_checkable
class WorkRecordStore(Protocol):
    """Persistence collaborator for employees, work records and settings.

    Implementations own the persisted state and translate between storage
    field names and the domain types at their boundary. Patches are keyed by
    domain field names. Every operation may raise StoreUnavailable or
    StoreOperationFailed; operations on a missing id raise NotFoundError.
    """

    backend: str

    async def ping(self) -> None:
        """Raise StoreUnavailable if the store cannot be reached."""
        ...

    async def close(self) -> None:
        ...

    async def list_employees(self) -> list[Employee]:
        ...

    async def create_employee(self, name: str, hourly_rate: Decimal | None) -> Employee:
        ...

    async def update_employee(self, employee_id: UUID, patch: Mapping[str, Any]) -> Employee:
        ...

    async def delete_employee(self, employee_id: UUID) -> None:
        """Delete an employee and every work record referencing it."""
        ...

    async def list_work_records(self) -> list[WorkRecord]:
        """All work records in creation order."""
        ...

    async def create_work_record(self, draft: NewWorkRecord) -> WorkRecord:
        ...

    async def update_work_record(self, record_id: UUID, patch: Mapping[str, Any]) -> WorkRecord:
        ...

    async def delete_work_record(self, record_id: UUID) -> None:
        ...

    async def settle_batch(self, employee_id: UUID, now: datetime, settlement_id: UUID) -> int:
        """Mark every unpaid record of an employee paid, atomically.

        Returns the number of records settled.
        """
        ...

    async def get_settings(self) -> RateSettings:
        ...

    async def put_settings(self, settings: RateSettings) -> None:
        ...
