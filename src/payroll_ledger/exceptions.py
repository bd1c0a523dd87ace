"""Typed exceptions for the payroll ledger.

Every error carries a machine-readable ``code`` so the API layer can map it
to a response without parsing messages.

    LedgerError
    +-- ValidationError
    +-- InvalidTransitionError
    +-- StoreUnavailable
    +-- StoreOperationFailed
        +-- NotFoundError
"""

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(LedgerError):
    """Input rejected before it reached the store."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, field=field)


class InvalidTransitionError(LedgerError):
    """Raised when a work record status transition is not allowed."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, from_status=from_status, to_status=to_status)


class StoreUnavailable(LedgerError):
    """The backing store cannot be reached."""

    code = "STORE_UNAVAILABLE"

    def __init__(self, backend: str, reason: str):
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend} store unavailable: {reason}", backend=backend)


class StoreOperationFailed(LedgerError):
    """The store was reached but rejected the operation."""

    code = "STORE_OPERATION_FAILED"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}", operation=operation)


class NotFoundError(StoreOperationFailed):
    """The entity addressed by an operation does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"get_{entity}", f"{entity} {entity_id} not found")
