"""Translation between storage field names and domain fields.

Both stores keep their own schema: the SQL store uses snake_case columns
(with ``daily_salary`` for the salary snapshot), the local store keeps
camelCase JSON documents. This module is the only place that knows either
naming; the rest of the package sees domain types only.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from payroll_ledger.calculators.types import Employee, RateSettings, WorkRecord


@dataclass(frozen=True)
class FieldMap:
    """Bidirectional mapping of domain field names to storage keys."""

    fields: Mapping[str, str]  # domain name -> storage key

    def to_storage(self, values: Mapping[str, Any], jsonable: bool = False) -> dict[str, Any]:
        """Rename domain fields to storage keys, encoding values for JSON if asked."""
        unknown = set(values) - set(self.fields)
        if unknown:
            raise KeyError(f"Unmapped fields: {sorted(unknown)}")
        encode = _to_json_value if jsonable else _to_sql_value
        return {self.fields[name]: encode(value) for name, value in values.items()}

    def from_storage(self, row: Mapping[str, Any]) -> dict[str, Any]:
        """Rename storage keys back to domain fields, skipping absent keys."""
        return {
            name: row[key]
            for name, key in self.fields.items()
            if key in row
        }

    def storage_key(self, name: str) -> str:
        return self.fields[name]


SQL_EMPLOYEE = FieldMap({
    "id": "id",
    "name": "name",
    "hourly_rate": "hourly_rate",
    "created_at": "created_at",
})

SQL_WORK_RECORD = FieldMap({
    "id": "id",
    "employee_id": "employee_id",
    "date": "date",
    "hours": "hours",
    "strings": "strings",
    "salary": "daily_salary",
    "paid": "paid",
    "paid_at": "paid_at",
    "settlement_id": "settlement_id",
    "created_at": "created_at",
})

SQL_SETTINGS = FieldMap({
    "default_hourly_rate": "default_hourly_rate",
    "default_unit_price": "default_unit_price",
})

JSON_EMPLOYEE = FieldMap({
    "id": "id",
    "name": "name",
    "hourly_rate": "hourlyRate",
    "created_at": "createdAt",
})

JSON_WORK_RECORD = FieldMap({
    "id": "id",
    "employee_id": "employeeId",
    "date": "date",
    "hours": "hours",
    "strings": "strings",
    "salary": "salary",
    "paid": "paid",
    "paid_at": "paidAt",
    "settlement_id": "settlementId",
    "created_at": "createdAt",
})

JSON_SETTINGS = FieldMap({
    "default_hourly_rate": "defaultHourlyRate",
    "default_unit_price": "defaultUnitPrice",
})


# ============================================================================
# Value coercion
# ============================================================================


def _uuid(value: Any) -> UUID | None:
    if value is None or isinstance(value, UUID):
        return value
    return UUID(str(value))


def _decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    # str() first so floats keep their shortest repr instead of binary noise
    return Decimal(str(value))


def _date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _aware(value: Any) -> datetime | None:
    """Timestamps are always timezone-aware UTC inside the domain."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_sql_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return _aware(value)
    return value


def _to_json_value(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return _aware(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


# ============================================================================
# Entity conversion
# ============================================================================


def employee_from_storage(row: Mapping[str, Any], field_map: FieldMap) -> Employee:
    values = field_map.from_storage(row)
    return Employee(
        id=_uuid(values["id"]),
        name=values["name"],
        hourly_rate=_decimal(values.get("hourly_rate")),
        created_at=_aware(values.get("created_at")),
    )


def work_record_from_storage(row: Mapping[str, Any], field_map: FieldMap) -> WorkRecord:
    values = field_map.from_storage(row)
    paid_at = _aware(values.get("paid_at"))
    return WorkRecord(
        id=_uuid(values["id"]),
        employee_id=_uuid(values["employee_id"]),
        date=_date(values["date"]),
        hours=_decimal(values.get("hours")) or Decimal("0"),
        strings=_decimal(values.get("strings")) or Decimal("0"),
        salary=_decimal(values["salary"]),
        paid=bool(values.get("paid", False)),
        paid_at=paid_at,
        settlement_id=_uuid(values.get("settlement_id")),
        created_at=_aware(values.get("created_at")),
    )


def settings_from_storage(row: Mapping[str, Any], field_map: FieldMap) -> RateSettings:
    values = field_map.from_storage(row)
    defaults = RateSettings()
    return RateSettings(
        default_hourly_rate=_decimal(values.get("default_hourly_rate", defaults.default_hourly_rate)),
        default_unit_price=_decimal(values.get("default_unit_price", defaults.default_unit_price)),
    )


def entity_to_storage(entity: Any, field_map: FieldMap, jsonable: bool = False) -> dict[str, Any]:
    """Map a domain dataclass (or the mapped subset of its fields) to storage."""
    values = {k: v for k, v in asdict(entity).items() if k in field_map.fields}
    return field_map.to_storage(values, jsonable=jsonable)
