"""Ledger service - entry workflow and write path for the payroll ledger."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from payroll_ledger.calculators.rate_resolver import RateResolver
from payroll_ledger.calculators.salary import (
    RATE_PLACES,
    compute_salary_for,
    round_quantity,
    round_to_cents,
)
from payroll_ledger.calculators.time_span import hours_between
from payroll_ledger.calculators.types import (
    ZERO,
    Employee,
    NewWorkRecord,
    Payout,
    RateSettings,
    RecordDraft,
    UnpaidSummary,
    WorkRecord,
)
from payroll_ledger.exceptions import NotFoundError, ValidationError
from payroll_ledger.services import aggregator, exporter
from payroll_ledger.services.settlement import SettlementService, apply_settlement, last_payout
from payroll_ledger.services.state_machine import WorkRecordStateMachine
from payroll_ledger.store.base import WorkRecordStore

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def to_decimal(value: Any, field: str) -> Decimal:
    """Coerce user input to a finite, non-negative Decimal."""
    if value is None or value == "":
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}", field=field)
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return amount


def to_quantity(value: Any, field: str) -> Decimal:
    """Hours or strings, rounded to cents before anything is priced."""
    amount = to_decimal(value, field)
    try:
        return round_quantity(amount)
    except InvalidOperation:
        raise ValidationError(f"{field} is too large, got {value!r}", field=field)


def to_rate(value: Any, field: str) -> Decimal:
    """A rate with at most ``RATE_PLACES`` decimals; finer rates are rejected."""
    rate = to_decimal(value, field)
    if rate.normalize().as_tuple().exponent < -RATE_PLACES:
        raise ValidationError(
            f"{field} allows at most {RATE_PLACES} decimal places, got {value!r}",
            field=field,
        )
    return rate


def to_date(value: date | str, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date, got {value!r}", field=field)


class LedgerService:
    """Service for recording work and paying it out.

    Holds the in-memory cache of employees, records and settings for one
    store. Every mutation validates first, then calls the store, and only
    updates the cache once the store has confirmed, using the values the
    store returned. A failed store call leaves the cache as it was.

    Operations:
    - add_record: price a work entry with the current rates and persist it
    - update_record: explicit edit, recomputing salary unless overridden
    - settle: pay out all of an employee's unpaid records as one batch
    - remove_employee: delete an employee and, with it, their records
    """

    def __init__(self, store: WorkRecordStore):
        self.store = store
        self.settlement_service = SettlementService(store)
        self.employees: list[Employee] = []
        self.records: list[WorkRecord] = []
        self.settings = RateSettings()

    @property
    def backend(self) -> str:
        return self.store.backend

    async def load(self) -> None:
        """Replace the cache with the store's current contents."""
        employees = await self.store.list_employees()
        records = await self.store.list_work_records()
        settings = await self.store.get_settings()

        self.employees = employees
        self.records = records
        self.settings = settings

        known = {e.id for e in employees}
        for record in records:
            if record.employee_id not in known:
                logger.warning(
                    "Work record %s references missing employee %s",
                    record.id,
                    record.employee_id,
                )
        logger.info(
            "Loaded %d employee(s) and %d record(s) from %s store",
            len(employees),
            len(records),
            self.backend,
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_employee(self, employee_id: UUID) -> Employee | None:
        return next((e for e in self.employees if e.id == employee_id), None)

    def get_record(self, record_id: UUID) -> WorkRecord | None:
        return next((r for r in self.records if r.id == record_id), None)

    def _require_employee(self, employee_id: UUID) -> Employee:
        employee = self.get_employee(employee_id)
        if employee is None:
            raise NotFoundError("employee", employee_id)
        return employee

    def _require_record(self, record_id: UUID) -> WorkRecord:
        record = self.get_record(record_id)
        if record is None:
            raise NotFoundError("work_record", record_id)
        return record

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    @staticmethod
    def _clean_name(name: str | None) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Employee name cannot be empty", field="name")
        return cleaned

    async def add_employee(self, name: str, hourly_rate: Decimal | None = None) -> Employee:
        """Add an employee; without a rate they are paid the default."""
        cleaned = self._clean_name(name)
        rate = None if hourly_rate is None else to_rate(hourly_rate, "hourly_rate")

        employee = await self.store.create_employee(cleaned, rate)
        self.employees = [*self.employees, employee]
        return employee

    async def update_employee(
        self,
        employee_id: UUID,
        *,
        name: str = _UNSET,
        hourly_rate: Decimal | None = _UNSET,
    ) -> Employee:
        """Rename an employee or change their rate override.

        ``hourly_rate=None`` clears the override. Existing records keep the
        salary they were created with.
        """
        self._require_employee(employee_id)
        patch: dict[str, Any] = {}
        if name is not _UNSET:
            patch["name"] = self._clean_name(name)
        if hourly_rate is not _UNSET:
            patch["hourly_rate"] = (
                None if hourly_rate is None else to_rate(hourly_rate, "hourly_rate")
            )

        employee = await self.store.update_employee(employee_id, patch)
        self.employees = [employee if e.id == employee_id else e for e in self.employees]
        return employee

    async def remove_employee(self, employee_id: UUID) -> None:
        """Delete an employee together with all of their work records."""
        self._require_employee(employee_id)

        await self.store.delete_employee(employee_id)
        self.employees = [e for e in self.employees if e.id != employee_id]
        removed = len(self.records)
        self.records = [r for r in self.records if r.employee_id != employee_id]
        logger.info(
            "Removed employee %s and %d work record(s)",
            employee_id,
            removed - len(self.records),
        )

    # ------------------------------------------------------------------
    # Work records
    # ------------------------------------------------------------------

    def resolve_hours(self, draft: RecordDraft) -> Decimal:
        """Hours of a draft, derived from its clock span when one is given."""
        if draft.start_time is not None and draft.end_time is not None:
            span = hours_between(draft.start_time, draft.end_time)
            if span is None:
                raise ValidationError("Start and end time are the same", field="end_time")
            return span
        return to_quantity(draft.hours, "hours")

    def preview_salary(
        self,
        employee_id: UUID | None,
        hours: Decimal | str | int = ZERO,
        strings: Decimal | str | int = ZERO,
    ) -> Decimal:
        """Salary a record would be stored with under the current rates."""
        employee = self.get_employee(employee_id) if employee_id else None
        rates = RateResolver.resolve(employee, self.settings)
        return compute_salary_for(
            to_quantity(hours, "hours"),
            to_quantity(strings, "strings"),
            rates,
        )

    async def add_record(self, draft: RecordDraft) -> WorkRecord:
        """Price a work entry with the rates in effect now and persist it."""
        employee = self.get_employee(draft.employee_id)
        if employee is None:
            raise ValidationError(
                f"Unknown employee {draft.employee_id}", field="employee_id"
            )

        hours = self.resolve_hours(draft)
        strings = to_quantity(draft.strings, "strings")
        if not (hours > 0 or strings > 0):
            raise ValidationError("Enter hours or strings", field="hours")

        rates = RateResolver.resolve(employee, self.settings)
        new_record = NewWorkRecord(
            employee_id=employee.id,
            date=to_date(draft.date),
            hours=hours,
            strings=strings,
            salary=compute_salary_for(hours, strings, rates),
        )

        record = await self.store.create_work_record(new_record)
        self.records = [*self.records, record]
        return record

    async def update_record(self, record_id: UUID, **patch: Any) -> WorkRecord:
        """Explicitly edit a record.

        Changing hours or strings without a salary recomputes the salary
        with the rates in effect now; a given salary overrides it. Paid
        records stay paid.
        """
        record = self._require_record(record_id)
        fields = set(patch)
        WorkRecordStateMachine.validate_edit(record, fields)
        unknown = fields - WorkRecordStateMachine.EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit fields {sorted(unknown)}", field=sorted(unknown)[0])

        changes: dict[str, Any] = {}
        if "date" in patch:
            changes["date"] = to_date(patch["date"])
        if "hours" in patch:
            changes["hours"] = to_quantity(patch["hours"], "hours")
        if "strings" in patch:
            changes["strings"] = to_quantity(patch["strings"], "strings")

        hours = changes.get("hours", record.hours)
        strings = changes.get("strings", record.strings)
        if not (hours > 0 or strings > 0):
            raise ValidationError("Enter hours or strings", field="hours")

        if "salary" in patch:
            changes["salary"] = round_to_cents(to_decimal(patch["salary"], "salary"))
        elif "hours" in changes or "strings" in changes:
            rates = RateResolver.resolve(self.get_employee(record.employee_id), self.settings)
            changes["salary"] = compute_salary_for(hours, strings, rates)

        updated = await self.store.update_work_record(record_id, changes)
        self.records = [updated if r.id == record_id else r for r in self.records]
        return updated

    async def delete_record(self, record_id: UUID) -> None:
        self._require_record(record_id)

        await self.store.delete_work_record(record_id)
        self.records = [r for r in self.records if r.id != record_id]

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def settle(self, employee_id: UUID, now: datetime | None = None) -> Payout | None:
        """Pay out every unpaid record of an employee as one batch.

        Returns the resulting payout, or None when nothing was unpaid.
        """
        employee = self._require_employee(employee_id)
        expected = sum(1 for r in self.records if r.employee_id == employee_id and not r.paid)

        result = await self.settlement_service.settle(employee_id, now)
        if result.is_noop:
            return None

        if result.settled_count == expected:
            self.records = apply_settlement(self.records, result)
        else:
            logger.warning(
                "Cache held %d unpaid record(s) for %s but store settled %d; reloading",
                expected,
                employee_id,
                result.settled_count,
            )
            self.records = await self.store.list_work_records()

        return last_payout(self.records, employee_id, employee.name)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def update_settings(
        self,
        *,
        default_hourly_rate: Decimal | None = None,
        default_unit_price: Decimal | None = None,
    ) -> RateSettings:
        """Change default rates. Only records priced afterwards are affected."""
        settings = self.settings
        if default_hourly_rate is not None:
            settings = replace(
                settings,
                default_hourly_rate=to_rate(default_hourly_rate, "default_hourly_rate"),
            )
        if default_unit_price is not None:
            settings = replace(
                settings,
                default_unit_price=to_rate(default_unit_price, "default_unit_price"),
            )

        await self.store.put_settings(settings)
        self.settings = settings
        return settings

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def employee_name(self, employee_id: UUID) -> str:
        employee = self.get_employee(employee_id)
        return employee.name if employee else exporter.UNKNOWN_EMPLOYEE

    def total_unpaid(self) -> Decimal:
        return aggregator.total_unpaid(self.records)

    def unpaid_by_employee(self, employee_id: UUID) -> Decimal:
        return aggregator.unpaid_by_employee(self.records, employee_id)

    def unpaid_summary(self) -> list[UnpaidSummary]:
        return aggregator.unpaid_summary(self.employees, self.records)

    def last_payout(self, employee_id: UUID) -> Payout | None:
        return last_payout(self.records, employee_id, self.employee_name(employee_id))

    def last_payouts(self) -> list[Payout]:
        return aggregator.last_payouts(self.employees, self.records)

    def history(
        self,
        employee_id: UUID | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[WorkRecord]:
        return aggregator.history(self.records, employee_id, start_date, end_date)

    def export_rows(self) -> list[exporter.ExportRow]:
        return list(exporter.to_rows(self.records, self.employees))

    def export_csv(self) -> str:
        return exporter.render_csv(self.records, self.employees)
