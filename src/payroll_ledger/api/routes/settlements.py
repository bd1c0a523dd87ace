"""Settlement and payout API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from payroll_ledger.api.dependencies import Ledger
from payroll_ledger.api.schemas import ErrorResponse, PayoutResponse, SettlementResponse
from payroll_ledger.calculators.types import Payout

router = APIRouter(tags=["settlements"])


def payout_response(payout: Payout) -> PayoutResponse:
    return PayoutResponse(
        employee_id=payout.employee_id,
        employee_name=payout.employee_name,
        paid_at=payout.paid_at,
        amount=payout.amount,
        record_count=payout.record_count,
        settlement_id=payout.settlement_id,
    )


@router.post(
    "/settlements/{employee_id}",
    response_model=SettlementResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def settle_employee(
    ledger: Ledger,
    employee_id: Annotated[UUID, Path()],
) -> SettlementResponse:
    """Pay out all of an employee's unpaid records as one batch."""
    payout = await ledger.settle(employee_id)
    return SettlementResponse(
        employee_id=employee_id,
        settled=payout is not None,
        payout=payout_response(payout) if payout else None,
    )


@router.get("/payouts/latest", response_model=list[PayoutResponse])
async def latest_payouts(ledger: Ledger) -> list[PayoutResponse]:
    """Most recent payout per employee, newest first."""
    return [payout_response(p) for p in ledger.last_payouts()]
