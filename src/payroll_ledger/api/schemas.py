"""Pydantic schemas for API request/response models."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for adding an employee."""

    name: str
    hourly_rate: Decimal | None = Field(default=None, ge=0)


class EmployeeUpdate(BaseModel):
    """Schema for renaming an employee or changing their rate.

    Only fields present in the request are changed; an explicit
    ``hourly_rate: null`` clears the override.
    """

    name: str | None = None
    hourly_rate: Decimal | None = Field(default=None, ge=0)


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    hourly_rate: Decimal | None = None
    created_at: dt.datetime | None = None


# ============================================================================
# Work record schemas
# ============================================================================


class WorkRecordCreate(BaseModel):
    """Schema for logging work.

    Give either ``hours`` or a ``start_time``/``end_time`` pair (HH:MM).
    """

    employee_id: UUID
    date: dt.date
    hours: Decimal = Field(default=Decimal("0"), ge=0)
    strings: Decimal = Field(default=Decimal("0"), ge=0)
    start_time: str | None = None
    end_time: str | None = None


class WorkRecordUpdate(BaseModel):
    """Schema for editing a work record; salary overrides the recomputed amount."""

    date: dt.date | None = None
    hours: Decimal | None = Field(default=None, ge=0)
    strings: Decimal | None = Field(default=None, ge=0)
    salary: Decimal | None = Field(default=None, ge=0)


class SalaryPreviewRequest(BaseModel):
    """Schema for previewing the salary of an entry."""

    employee_id: UUID | None = None
    hours: Decimal = Field(default=Decimal("0"), ge=0)
    strings: Decimal = Field(default=Decimal("0"), ge=0)
    start_time: str | None = None
    end_time: str | None = None


class SalaryPreviewResponse(BaseModel):
    """Schema for salary preview response."""

    hours: Decimal
    strings: Decimal
    hourly_rate: Decimal
    unit_price: Decimal
    salary: Decimal


class WorkRecordResponse(BaseModel):
    """Schema for work record response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    employee_name: str | None = None
    date: dt.date
    hours: Decimal
    strings: Decimal
    salary: Decimal
    work_type: str
    paid: bool
    paid_at: dt.datetime | None = None
    settlement_id: UUID | None = None
    created_at: dt.datetime | None = None


class WorkRecordListResponse(BaseModel):
    """Schema for listing work records."""

    items: list[WorkRecordResponse]
    total: int
    total_salary: Decimal


# ============================================================================
# Settlement and reporting schemas
# ============================================================================


class PayoutResponse(BaseModel):
    """Schema for one payout batch."""

    employee_id: UUID
    employee_name: str
    paid_at: dt.datetime
    amount: Decimal
    record_count: int
    settlement_id: UUID | None = None


class SettlementResponse(BaseModel):
    """Schema for settlement response."""

    employee_id: UUID
    settled: bool
    payout: PayoutResponse | None = None


class UnpaidSummaryResponse(BaseModel):
    """Schema for an employee's outstanding pay."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    employee_name: str
    amount: Decimal
    record_count: int


class DashboardResponse(BaseModel):
    """Schema for the dashboard summary."""

    total_unpaid: Decimal
    unpaid_record_count: int
    employee_count: int
    unpaid_by_employee: list[UnpaidSummaryResponse]
    last_payouts: list[PayoutResponse]


class RateSettingsSchema(BaseModel):
    """Schema for default rate settings."""

    model_config = ConfigDict(from_attributes=True)

    default_hourly_rate: Decimal = Field(ge=0)
    default_unit_price: Decimal = Field(ge=0)


class RateSettingsUpdate(BaseModel):
    """Schema for changing default rates."""

    default_hourly_rate: Decimal | None = Field(default=None, ge=0)
    default_unit_price: Decimal | None = Field(default=None, ge=0)


class TimeSpanResponse(BaseModel):
    """Schema for a clock-time span; hours is null for an empty span."""

    start: str
    end: str
    hours: Decimal | None = None


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str | None = None
