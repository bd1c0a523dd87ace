"""Durable work record store backed by SQLAlchemy (async)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import delete, func, insert, select, text, update
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

from payroll_ledger.calculators.types import (
    Employee,
    NewWorkRecord,
    RateSettings,
    WorkRecord,
)
from payroll_ledger.database import create_engine_for_url, create_schema, create_session_factory
from payroll_ledger.exceptions import (
    LedgerError,
    NotFoundError,
    StoreOperationFailed,
    StoreUnavailable,
)
from payroll_ledger.models import EmployeeRow, SettingsRow, WorkRecordRow
from payroll_ledger.store.mapping import (
    SQL_EMPLOYEE,
    SQL_SETTINGS,
    SQL_WORK_RECORD,
    employee_from_storage,
    entity_to_storage,
    settings_from_storage,
    work_record_from_storage,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

logger = logging.getLogger(__name__)

# Errors meaning the database could not be reached at all
_CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, OSError, asyncio.TimeoutError)


class SqlStore:
    """Work record store over any async SQLAlchemy database.

    Every operation runs in its own transaction. Settlement is a single
    conditional UPDATE so a batch is applied entirely or not at all.
    """

    backend = "sql"

    def __init__(
        self,
        engine: AsyncEngine,
        default_settings: RateSettings | None = None,
    ):
        self.engine = engine
        self.default_settings = default_settings or RateSettings()
        self._session_factory = create_session_factory(engine)
        self._employees = EmployeeRow.__table__
        self._records = WorkRecordRow.__table__
        self._settings = SettingsRow.__table__

    @classmethod
    def from_url(
        cls,
        url: str,
        connect_timeout: float = 5.0,
        default_settings: RateSettings | None = None,
    ) -> SqlStore:
        """Create a store for a database URL."""
        return cls(create_engine_for_url(url, connect_timeout), default_settings)

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Run a unit of work, translating database errors to ledger errors."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except LedgerError:
            raise
        except _CONNECTIVITY_ERRORS as exc:
            logger.exception("Store unreachable during %s", operation)
            raise StoreUnavailable(self.backend, str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.exception("Store rejected %s", operation)
            raise StoreOperationFailed(operation, str(exc)) from exc

    async def ping(self) -> None:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (*_CONNECTIVITY_ERRORS, SQLAlchemyError) as exc:
            raise StoreUnavailable(self.backend, str(exc)) from exc

    async def initialize(self) -> None:
        """Create the ledger schema if it is missing."""
        try:
            await create_schema(self.engine)
        except _CONNECTIVITY_ERRORS as exc:
            raise StoreUnavailable(self.backend, str(exc)) from exc
        except SQLAlchemyError as exc:
            raise StoreOperationFailed("initialize", str(exc)) from exc

    async def close(self) -> None:
        await self.engine.dispose()

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    async def list_employees(self) -> list[Employee]:
        t = self._employees
        async with self._transaction("list_employees") as session:
            result = await session.execute(select(t).order_by(t.c.created_at, t.c.id))
            rows = result.mappings().all()
        return [employee_from_storage(row, SQL_EMPLOYEE) for row in rows]

    async def create_employee(self, name: str, hourly_rate: Decimal | None) -> Employee:
        t = self._employees
        values = SQL_EMPLOYEE.to_storage({"name": name, "hourly_rate": hourly_rate})
        async with self._transaction("create_employee") as session:
            result = await session.execute(insert(t).values(**values).returning(*t.c))
            row = result.mappings().one()
        return employee_from_storage(row, SQL_EMPLOYEE)

    async def update_employee(self, employee_id: UUID, patch: Mapping[str, Any]) -> Employee:
        t = self._employees
        values = SQL_EMPLOYEE.to_storage(patch)
        async with self._transaction("update_employee") as session:
            if values:
                stmt = update(t).where(t.c.id == employee_id).values(**values).returning(*t.c)
            else:
                stmt = select(t).where(t.c.id == employee_id)
            result = await session.execute(stmt)
            row = result.mappings().one_or_none()
            if row is None:
                raise NotFoundError("employee", employee_id)
        return employee_from_storage(row, SQL_EMPLOYEE)

    async def delete_employee(self, employee_id: UUID) -> None:
        async with self._transaction("delete_employee") as session:
            # Explicit cascade: SQLite does not enforce ON DELETE CASCADE by default
            await session.execute(
                delete(self._records).where(self._records.c.employee_id == employee_id)
            )
            result = await session.execute(
                delete(self._employees).where(self._employees.c.id == employee_id)
            )
            if result.rowcount == 0:
                raise NotFoundError("employee", employee_id)

    # ------------------------------------------------------------------
    # Work records
    # ------------------------------------------------------------------

    async def list_work_records(self) -> list[WorkRecord]:
        t = self._records
        async with self._transaction("list_work_records") as session:
            result = await session.execute(select(t).order_by(t.c.seq))
            rows = result.mappings().all()
        return [work_record_from_storage(row, SQL_WORK_RECORD) for row in rows]

    async def create_work_record(self, draft: NewWorkRecord) -> WorkRecord:
        t = self._records
        values = entity_to_storage(draft, SQL_WORK_RECORD)
        async with self._transaction("create_work_record") as session:
            exists = await session.scalar(
                select(self._employees.c.id).where(self._employees.c.id == draft.employee_id)
            )
            if exists is None:
                raise NotFoundError("employee", draft.employee_id)
            next_seq = select(func.coalesce(func.max(t.c.seq), 0) + 1).scalar_subquery()
            result = await session.execute(
                insert(t).values(seq=next_seq, **values).returning(*t.c)
            )
            row = result.mappings().one()
        return work_record_from_storage(row, SQL_WORK_RECORD)

    async def update_work_record(self, record_id: UUID, patch: Mapping[str, Any]) -> WorkRecord:
        t = self._records
        values = SQL_WORK_RECORD.to_storage(patch)
        async with self._transaction("update_work_record") as session:
            if values:
                stmt = update(t).where(t.c.id == record_id).values(**values).returning(*t.c)
            else:
                stmt = select(t).where(t.c.id == record_id)
            result = await session.execute(stmt)
            row = result.mappings().one_or_none()
            if row is None:
                raise NotFoundError("work_record", record_id)
        return work_record_from_storage(row, SQL_WORK_RECORD)

    async def delete_work_record(self, record_id: UUID) -> None:
        t = self._records
        async with self._transaction("delete_work_record") as session:
            result = await session.execute(delete(t).where(t.c.id == record_id))
            if result.rowcount == 0:
                raise NotFoundError("work_record", record_id)

    async def settle_batch(self, employee_id: UUID, now: datetime, settlement_id: UUID) -> int:
        t = self._records
        values = SQL_WORK_RECORD.to_storage(
            {"paid": True, "paid_at": now, "settlement_id": settlement_id}
        )
        async with self._transaction("settle_batch") as session:
            result = await session.execute(
                update(t)
                .where(
                    t.c.employee_id == employee_id,
                    t.c.paid.is_(False),
                )
                .values(**values)
            )
            settled = result.rowcount or 0
        return settled

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self) -> RateSettings:
        t = self._settings
        async with self._transaction("get_settings") as session:
            result = await session.execute(
                select(t).where(t.c.id == SettingsRow.SINGLETON_ID)
            )
            row = result.mappings().one_or_none()
        if row is None:
            return self.default_settings
        return settings_from_storage(row, SQL_SETTINGS)

    async def put_settings(self, settings: RateSettings) -> None:
        t = self._settings
        values = entity_to_storage(settings, SQL_SETTINGS)
        async with self._transaction("put_settings") as session:
            result = await session.execute(
                update(t).where(t.c.id == SettingsRow.SINGLETON_ID).values(**values)
            )
            if result.rowcount == 0:
                await session.execute(
                    insert(t).values(id=SettingsRow.SINGLETON_ID, **values)
                )
