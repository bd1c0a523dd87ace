"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from payroll_ledger.services.ledger_service import LedgerService


async def get_ledger(request: Request) -> LedgerService:
    """Get the ledger service created at startup."""
    ledger = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ledger is not initialized",
        )
    return ledger


# Type alias for cleaner dependency injection
Ledger = Annotated[LedgerService, Depends(get_ledger)]
