"""Employee API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Response, status

from payroll_ledger.api.dependencies import Ledger
from payroll_ledger.api.schemas import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(ledger: Ledger) -> list[EmployeeResponse]:
    """List employees in creation order."""
    return [EmployeeResponse.model_validate(e) for e in ledger.employees]


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_employee(ledger: Ledger, payload: EmployeeCreate) -> EmployeeResponse:
    """Add an employee, optionally with an hourly rate override."""
    employee = await ledger.add_employee(payload.name, payload.hourly_rate)
    return EmployeeResponse.model_validate(employee)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_employee(
    ledger: Ledger,
    employee_id: Annotated[UUID, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    """Rename an employee or change/clear their rate override."""
    changes = {field: getattr(payload, field) for field in payload.model_fields_set}
    employee = await ledger.update_employee(employee_id, **changes)
    return EmployeeResponse.model_validate(employee)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_employee(
    ledger: Ledger,
    employee_id: Annotated[UUID, Path()],
) -> Response:
    """Delete an employee and all of their work records."""
    await ledger.remove_employee(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
