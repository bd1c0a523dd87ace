"""Local-only work record store kept in a JSON file (or in memory)."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from payroll_ledger.calculators.types import (
    Employee,
    NewWorkRecord,
    RateSettings,
    WorkRecord,
)
from payroll_ledger.exceptions import NotFoundError, StoreOperationFailed, StoreUnavailable
from payroll_ledger.models.base import utcnow
from payroll_ledger.store.mapping import (
    JSON_EMPLOYEE,
    JSON_SETTINGS,
    JSON_WORK_RECORD,
    employee_from_storage,
    entity_to_storage,
    settings_from_storage,
    work_record_from_storage,
)

logger = logging.getLogger(__name__)

EMPLOYEES_KEY = "employees"
RECORDS_KEY = "records"
SETTINGS_KEY = "settings"


def _empty_document() -> dict[str, Any]:
    return {EMPLOYEES_KEY: [], RECORDS_KEY: [], SETTINGS_KEY: None}


class LocalStore:
    """Work record store for a single machine.

    The whole dataset is one JSON document with camelCase keys. Each
    mutation is applied to a copy of the document, written with an atomic
    file replace, and only then becomes the current state; a failed write
    leaves the store unchanged. Mutations run one at a time, so overlapping
    requests never write back a stale copy. With no path the document lives
    in memory.
    """

    backend = "local"

    def __init__(
        self,
        path: str | Path | None = None,
        default_settings: RateSettings | None = None,
    ):
        self.path = Path(path) if path else None
        self.default_settings = default_settings or RateSettings()
        self._document: dict[str, Any] | None = None
        self._lock = asyncio.Lock()

    async def _state(self) -> dict[str, Any]:
        if self._document is None:
            self._document = await asyncio.to_thread(self._read)
        return self._document

    def _read(self) -> dict[str, Any]:
        if self.path is None:
            return _empty_document()
        if not self.path.exists():
            logger.info("Local store %s does not exist yet, starting empty", self.path)
            return _empty_document()
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreOperationFailed("load", f"cannot read {self.path}: {exc}") from exc
        for key, default in _empty_document().items():
            document.setdefault(key, default)
        return document

    def _write(self, document: dict[str, Any]) -> None:
        if self.path is None:
            return
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreOperationFailed("save", f"cannot write {self.path}: {exc}") from exc

    @asynccontextmanager
    async def _mutation(self) -> AsyncIterator[dict[str, Any]]:
        """Working copy of the document, saved if the block changed it and exited cleanly."""
        async with self._lock:
            document = copy.deepcopy(await self._state())
            yield document
            if document != self._document:
                await asyncio.to_thread(self._write, document)
                self._document = document

    @staticmethod
    def _find(docs: list[dict[str, Any]], entity_id: UUID) -> dict[str, Any] | None:
        key = str(entity_id)
        return next((doc for doc in docs if doc["id"] == key), None)

    async def ping(self) -> None:
        try:
            await self._state()
        except StoreOperationFailed as exc:
            raise StoreUnavailable(self.backend, exc.reason) from exc

    async def close(self) -> None:
        self._document = None

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    async def list_employees(self) -> list[Employee]:
        state = await self._state()
        return [employee_from_storage(doc, JSON_EMPLOYEE) for doc in state[EMPLOYEES_KEY]]

    async def create_employee(self, name: str, hourly_rate: Decimal | None) -> Employee:
        employee = Employee(id=uuid4(), name=name, hourly_rate=hourly_rate, created_at=utcnow())
        async with self._mutation() as document:
            document[EMPLOYEES_KEY].append(
                entity_to_storage(employee, JSON_EMPLOYEE, jsonable=True)
            )
        return employee

    async def update_employee(self, employee_id: UUID, patch: Mapping[str, Any]) -> Employee:
        async with self._mutation() as document:
            doc = self._find(document[EMPLOYEES_KEY], employee_id)
            if doc is None:
                raise NotFoundError("employee", employee_id)
            doc.update(JSON_EMPLOYEE.to_storage(patch, jsonable=True))
        return employee_from_storage(doc, JSON_EMPLOYEE)

    async def delete_employee(self, employee_id: UUID) -> None:
        key = str(employee_id)
        employee_key = JSON_WORK_RECORD.storage_key("employee_id")
        async with self._mutation() as document:
            if self._find(document[EMPLOYEES_KEY], employee_id) is None:
                raise NotFoundError("employee", employee_id)
            document[EMPLOYEES_KEY] = [d for d in document[EMPLOYEES_KEY] if d["id"] != key]
            document[RECORDS_KEY] = [d for d in document[RECORDS_KEY] if d[employee_key] != key]

    # ------------------------------------------------------------------
    # Work records
    # ------------------------------------------------------------------

    async def list_work_records(self) -> list[WorkRecord]:
        state = await self._state()
        return [work_record_from_storage(doc, JSON_WORK_RECORD) for doc in state[RECORDS_KEY]]

    async def create_work_record(self, draft: NewWorkRecord) -> WorkRecord:
        record = WorkRecord(
            id=uuid4(),
            employee_id=draft.employee_id,
            date=draft.date,
            hours=draft.hours,
            strings=draft.strings,
            salary=draft.salary,
            created_at=utcnow(),
        )
        async with self._mutation() as document:
            if self._find(document[EMPLOYEES_KEY], draft.employee_id) is None:
                raise NotFoundError("employee", draft.employee_id)
            document[RECORDS_KEY].append(
                entity_to_storage(record, JSON_WORK_RECORD, jsonable=True)
            )
        return record

    async def update_work_record(self, record_id: UUID, patch: Mapping[str, Any]) -> WorkRecord:
        async with self._mutation() as document:
            doc = self._find(document[RECORDS_KEY], record_id)
            if doc is None:
                raise NotFoundError("work_record", record_id)
            doc.update(JSON_WORK_RECORD.to_storage(patch, jsonable=True))
        return work_record_from_storage(doc, JSON_WORK_RECORD)

    async def delete_work_record(self, record_id: UUID) -> None:
        key = str(record_id)
        async with self._mutation() as document:
            if self._find(document[RECORDS_KEY], record_id) is None:
                raise NotFoundError("work_record", record_id)
            document[RECORDS_KEY] = [d for d in document[RECORDS_KEY] if d["id"] != key]

    async def settle_batch(self, employee_id: UUID, now: datetime, settlement_id: UUID) -> int:
        employee_key = JSON_WORK_RECORD.storage_key("employee_id")
        paid_key = JSON_WORK_RECORD.storage_key("paid")
        stamp = JSON_WORK_RECORD.to_storage(
            {"paid": True, "paid_at": now, "settlement_id": settlement_id},
            jsonable=True,
        )

        settled = 0
        async with self._mutation() as document:
            for doc in document[RECORDS_KEY]:
                if doc[employee_key] == str(employee_id) and not doc.get(paid_key):
                    doc.update(stamp)
                    settled += 1
        return settled

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self) -> RateSettings:
        state = await self._state()
        if state[SETTINGS_KEY] is None:
            return self.default_settings
        return settings_from_storage(state[SETTINGS_KEY], JSON_SETTINGS)

    async def put_settings(self, settings: RateSettings) -> None:
        async with self._mutation() as document:
            document[SETTINGS_KEY] = entity_to_storage(settings, JSON_SETTINGS, jsonable=True)
