"""Dashboard, settings, time span and export endpoints."""

from datetime import date

from fastapi import APIRouter, Query, Response

from payroll_ledger.api.dependencies import Ledger
from payroll_ledger.api.routes.settlements import payout_response
from payroll_ledger.api.schemas import (
    DashboardResponse,
    ErrorResponse,
    RateSettingsSchema,
    RateSettingsUpdate,
    TimeSpanResponse,
    UnpaidSummaryResponse,
)
from payroll_ledger.calculators.time_span import hours_between
from payroll_ledger.services.exporter import export_filename

router = APIRouter(tags=["reports"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(ledger: Ledger) -> DashboardResponse:
    """Totals owed and the latest payouts."""
    return DashboardResponse(
        total_unpaid=ledger.total_unpaid(),
        unpaid_record_count=sum(1 for r in ledger.records if not r.paid),
        employee_count=len(ledger.employees),
        unpaid_by_employee=[
            UnpaidSummaryResponse.model_validate(s) for s in ledger.unpaid_summary()
        ],
        last_payouts=[payout_response(p) for p in ledger.last_payouts()],
    )


@router.get("/settings", response_model=RateSettingsSchema)
async def get_rate_settings(ledger: Ledger) -> RateSettingsSchema:
    """Current default rates."""
    return RateSettingsSchema.model_validate(ledger.settings)


@router.put(
    "/settings",
    response_model=RateSettingsSchema,
    responses={422: {"model": ErrorResponse}},
)
async def update_rate_settings(ledger: Ledger, payload: RateSettingsUpdate) -> RateSettingsSchema:
    """Change default rates; existing records keep their salary."""
    settings = await ledger.update_settings(
        default_hourly_rate=payload.default_hourly_rate,
        default_unit_price=payload.default_unit_price,
    )
    return RateSettingsSchema.model_validate(settings)


@router.get(
    "/time-span",
    response_model=TimeSpanResponse,
    responses={422: {"model": ErrorResponse}},
)
async def time_span(
    start: str = Query(..., description="Start time, HH:MM"),
    end: str = Query(..., description="End time, HH:MM"),
) -> TimeSpanResponse:
    """Hours between two clock times; overnight spans wrap past midnight."""
    return TimeSpanResponse(start=start, end=end, hours=hours_between(start, end))


@router.get("/export.csv", response_class=Response)
async def export_csv(ledger: Ledger) -> Response:
    """All work records as a CSV download."""
    filename = export_filename(date.today())
    return Response(
        content=ledger.export_csv().encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
