"""API routes."""

from payroll_ledger.api.routes.employees import router as employees_router
from payroll_ledger.api.routes.health import router as health_router
from payroll_ledger.api.routes.records import router as records_router
from payroll_ledger.api.routes.reports import router as reports_router
from payroll_ledger.api.routes.settlements import router as settlements_router

__all__ = [
    "employees_router",
    "health_router",
    "records_router",
    "reports_router",
    "settlements_router",
]
