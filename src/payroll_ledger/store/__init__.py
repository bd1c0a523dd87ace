"""Persistence backends for the ledger."""

from payroll_ledger.store.base import WorkRecordStore
from payroll_ledger.store.local_store import LocalStore
from payroll_ledger.store.selection import open_store
from payroll_ledger.store.sql_store import SqlStore

__all__ = [
    "WorkRecordStore",
    "LocalStore",
    "SqlStore",
    "open_store",
]
