"""Pytest fixtures for payroll ledger tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest

from payroll_ledger.calculators.types import Employee, RateSettings, WorkRecord
from payroll_ledger.services.ledger_service import LedgerService
from payroll_ledger.store import LocalStore, SqlStore, WorkRecordStore

# Use in-memory SQLite for tests (with async support)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PAID_AT = datetime(2024, 1, 2, 18, 0, tzinfo=timezone.utc)


async def make_sql_store() -> SqlStore:
    store = SqlStore.from_url(TEST_DATABASE_URL)
    await store.initialize()
    return store


@pytest.fixture
async def sql_store() -> AsyncGenerator[SqlStore, None]:
    """Durable store on a fresh in-memory database."""
    store = await make_sql_store()
    yield store
    await store.close()


@pytest.fixture
def local_store() -> LocalStore:
    """Local store kept in memory only."""
    return LocalStore()


@pytest.fixture(params=["local", "sql"])
async def store(request) -> AsyncGenerator[WorkRecordStore, None]:
    """Each test using this runs once per backend."""
    if request.param == "sql":
        store = await make_sql_store()
    else:
        store = LocalStore()
    yield store
    await store.close()


@pytest.fixture
async def ledger(store) -> LedgerService:
    """Loaded ledger over an empty store with the stock default rates."""
    service = LedgerService(store)
    await service.load()
    return service


@pytest.fixture
def settings() -> RateSettings:
    return RateSettings(
        default_hourly_rate=Decimal("20"),
        default_unit_price=Decimal("0.25"),
    )


@pytest.fixture
def employee() -> Employee:
    return Employee(id=uuid4(), name="Ana")


@pytest.fixture
def make_record(employee):
    """Factory for work records belonging to ``employee`` by default."""

    def _make(**overrides) -> WorkRecord:
        values = {
            "id": uuid4(),
            "employee_id": employee.id,
            "date": date(2024, 1, 1),
            "hours": Decimal("8"),
            "strings": Decimal("0"),
            "salary": Decimal("160.00"),
        }
        values.update(overrides)
        return WorkRecord(**values)

    return _make
