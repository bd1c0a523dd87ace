"""SQLAlchemy models for the durable store."""

from payroll_ledger.models.base import Base, TimestampMixin
from payroll_ledger.models.ledger import EmployeeRow, SettingsRow, WorkRecordRow

__all__ = [
    "Base",
    "TimestampMixin",
    "EmployeeRow",
    "SettingsRow",
    "WorkRecordRow",
]
