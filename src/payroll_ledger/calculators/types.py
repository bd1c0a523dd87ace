"""Type definitions for the ledger domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import UUID

ZERO = Decimal("0")


class WorkType(str, Enum):
    """Label describing what a work record pays for."""

    HOURLY = "hourly"
    PIECE = "piece"
    MIXED = "mixed"


class RecordStatus(str, Enum):
    """Work record payment status values."""

    UNPAID = "unpaid"
    PAID = "paid"


@dataclass(frozen=True)
class RateSettings:
    """System-wide default rates (singleton)."""

    default_hourly_rate: Decimal = Decimal("20")
    default_unit_price: Decimal = Decimal("0.25")


@dataclass(frozen=True)
class Employee:
    """A worker that can log work records."""

    id: UUID
    name: str
    hourly_rate: Decimal | None = None  # None = use the system default
    created_at: datetime | None = None


@dataclass(frozen=True)
class WorkRecord:
    """A single logged unit of work with its frozen salary."""

    id: UUID
    employee_id: UUID
    date: date
    hours: Decimal
    strings: Decimal
    salary: Decimal  # Snapshot at write time, never recomputed on read
    paid: bool = False
    paid_at: datetime | None = None
    settlement_id: UUID | None = None
    created_at: datetime | None = None

    @property
    def status(self) -> RecordStatus:
        return RecordStatus.PAID if self.paid else RecordStatus.UNPAID

    @property
    def work_type(self) -> WorkType:
        if self.hours > 0 and self.strings > 0:
            return WorkType.MIXED
        if self.strings > 0:
            return WorkType.PIECE
        return WorkType.HOURLY


@dataclass(frozen=True)
class RecordDraft:
    """Raw work entry as typed in by the user.

    When both ``start_time`` and ``end_time`` are given, hours are derived
    from the clock span and ``hours`` is ignored.
    """

    employee_id: UUID
    date: date
    hours: Decimal = ZERO
    strings: Decimal = ZERO
    start_time: time | str | None = None
    end_time: time | str | None = None


@dataclass(frozen=True)
class NewWorkRecord:
    """A validated, priced record ready to be persisted."""

    employee_id: UUID
    date: date
    hours: Decimal
    strings: Decimal
    salary: Decimal


@dataclass(frozen=True)
class ResolvedRates:
    """Rates in effect for one employee at one moment."""

    hourly_rate: Decimal
    unit_price: Decimal


@dataclass(frozen=True)
class Payout:
    """One payout batch for an employee."""

    employee_id: UUID
    employee_name: str
    paid_at: datetime
    amount: Decimal
    records: tuple[WorkRecord, ...] = field(default_factory=tuple)
    settlement_id: UUID | None = None

    @property
    def record_count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class UnpaidSummary:
    """Outstanding pay for one employee."""

    employee_id: UUID
    employee_name: str
    amount: Decimal
    record_count: int
