"""Work record API endpoints."""

from datetime import date
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from payroll_ledger.api.dependencies import Ledger
from payroll_ledger.api.schemas import (
    ErrorResponse,
    SalaryPreviewRequest,
    SalaryPreviewResponse,
    WorkRecordCreate,
    WorkRecordListResponse,
    WorkRecordResponse,
    WorkRecordUpdate,
)
from payroll_ledger.calculators.rate_resolver import RateResolver
from payroll_ledger.calculators.types import RecordDraft, WorkRecord
from payroll_ledger.exceptions import ValidationError
from payroll_ledger.services.ledger_service import LedgerService, to_quantity

router = APIRouter(prefix="/records", tags=["records"])


def record_response(ledger: LedgerService, record: WorkRecord) -> WorkRecordResponse:
    return WorkRecordResponse(
        id=record.id,
        employee_id=record.employee_id,
        employee_name=ledger.employee_name(record.employee_id),
        date=record.date,
        hours=record.hours,
        strings=record.strings,
        salary=record.salary,
        work_type=record.work_type.value,
        paid=record.paid,
        paid_at=record.paid_at,
        settlement_id=record.settlement_id,
        created_at=record.created_at,
    )


@router.get("", response_model=WorkRecordListResponse)
async def list_records(
    ledger: Ledger,
    employee_id: UUID | None = None,
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
) -> WorkRecordListResponse:
    """Work history, newest date first, with optional filters."""
    records = ledger.history(employee_id, start_date, end_date)
    return WorkRecordListResponse(
        items=[record_response(ledger, r) for r in records],
        total=len(records),
        total_salary=sum((r.salary for r in records), Decimal("0")),
    )


@router.post(
    "",
    response_model=WorkRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_record(ledger: Ledger, payload: WorkRecordCreate) -> WorkRecordResponse:
    """Log work; salary is priced with the rates in effect now."""
    record = await ledger.add_record(
        RecordDraft(
            employee_id=payload.employee_id,
            date=payload.date,
            hours=payload.hours,
            strings=payload.strings,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )
    )
    return record_response(ledger, record)


@router.post(
    "/preview",
    response_model=SalaryPreviewResponse,
    responses={422: {"model": ErrorResponse}},
)
async def preview_record(ledger: Ledger, payload: SalaryPreviewRequest) -> SalaryPreviewResponse:
    """Salary an entry would be stored with, without storing it."""
    hours = to_quantity(payload.hours, "hours")
    strings = to_quantity(payload.strings, "strings")
    if payload.start_time and payload.end_time:
        hours = ledger.resolve_hours(
            RecordDraft(
                employee_id=payload.employee_id,
                date=date.today(),
                start_time=payload.start_time,
                end_time=payload.end_time,
            )
        )

    employee = ledger.get_employee(payload.employee_id) if payload.employee_id else None
    rates = RateResolver.resolve(employee, ledger.settings)
    return SalaryPreviewResponse(
        hours=hours,
        strings=strings,
        hourly_rate=rates.hourly_rate,
        unit_price=rates.unit_price,
        salary=ledger.preview_salary(payload.employee_id, hours, strings),
    )


@router.patch(
    "/{record_id}",
    response_model=WorkRecordResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_record(
    ledger: Ledger,
    record_id: Annotated[UUID, Path()],
    payload: WorkRecordUpdate,
) -> WorkRecordResponse:
    """Edit a record's date, quantities or salary."""
    changes = {field: getattr(payload, field) for field in payload.model_fields_set}
    nulls = sorted(field for field, value in changes.items() if value is None)
    if nulls:
        raise ValidationError(f"Fields {nulls} cannot be null", field=nulls[0])
    record = await ledger.update_record(record_id, **changes)
    return record_response(ledger, record)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_record(
    ledger: Ledger,
    record_id: Annotated[UUID, Path()],
) -> Response:
    """Delete a work record."""
    await ledger.delete_record(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
