"""Liveness, readiness and store health."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from payroll_ledger.api.dependencies import Ledger
from payroll_ledger.exceptions import StoreUnavailable

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Store reachability plus the size of the loaded ledger."""

    status: str
    timestamp: datetime
    backend: str
    store: str
    employees: int
    records: int


@router.get("/health", response_model=HealthResponse)
async def health_check(ledger: Ledger) -> HealthResponse:
    """Ping the active store.

    The ledger keeps serving its cache when the store stops answering, so an
    unreachable store reports ``degraded`` rather than failing the check.
    """
    try:
        await ledger.store.ping()
    except StoreUnavailable as exc:
        store_status = f"unreachable: {exc.reason}"
    else:
        store_status = "reachable"

    return HealthResponse(
        status="healthy" if store_status == "reachable" else "degraded",
        timestamp=datetime.now(timezone.utc),
        backend=ledger.backend,
        store=store_status,
        employees=len(ledger.employees),
        records=len(ledger.records),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Ready once the ledger has been loaded from its store."""
    if getattr(request.app.state, "ledger", None) is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "loading"},
        )
    return JSONResponse(content={"status": "ready"})


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
