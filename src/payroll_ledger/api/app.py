"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_ledger.api.routes import (
    employees_router,
    health_router,
    records_router,
    reports_router,
    settlements_router,
)
from payroll_ledger.config import get_settings
from payroll_ledger.exceptions import (
    InvalidTransitionError,
    LedgerError,
    NotFoundError,
    StoreOperationFailed,
    StoreUnavailable,
    ValidationError,
)
from payroll_ledger.services.ledger_service import LedgerService
from payroll_ledger.store import open_store

logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS: list[tuple[type[LedgerError], int]] = [
    (ValidationError, 422),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreOperationFailed, status.HTTP_502_BAD_GATEWAY),
]


def status_for(exc: LedgerError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open and load the store on startup unless a ledger was injected."""
    if getattr(app.state, "ledger", None) is None:
        ledger = LedgerService(await open_store())
        await ledger.load()
        app.state.ledger = ledger
    yield
    await app.state.ledger.store.close()


def create_app(ledger: LedgerService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    A pre-loaded ledger may be injected; otherwise the store is chosen and
    loaded at startup.
    """
    app = FastAPI(
        title="Payroll Ledger API",
        description="Hourly and piece-rate payroll ledger",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.ledger = ledger

    origins = list(get_settings().cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerError)
    async def ledger_exception_handler(request: Request, exc: LedgerError) -> JSONResponse:
        """Map ledger errors to HTTP responses."""
        status_code = status_for(exc)
        if status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal error",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(records_router, prefix="/api/v1")
    app.include_router(settlements_router, prefix="/api/v1")
    app.include_router(reports_router, prefix="/api/v1")

    return app


app = create_app()
