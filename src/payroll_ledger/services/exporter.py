"""Flat export of work records, with CSV rendering."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Iterator
from dataclasses import astuple, dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path

from payroll_ledger.calculators.types import Employee, WorkRecord

logger = logging.getLogger(__name__)

HEADERS = (
    "Date",
    "Employee Name",
    "Type",
    "Hours",
    "Strings",
    "Salary",
    "Paid Status",
    "Paid Date",
)
UNKNOWN_EMPLOYEE = "Unknown"
BOM = "\ufeff"
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class ExportRow:
    """One flattened work record, every field already formatted."""

    date: str
    employee_name: str
    work_type: str
    hours: str
    strings: str
    salary: str
    paid_status: str
    paid_date: str

    def values(self) -> tuple[str, ...]:
        return astuple(self)


def format_date_with_weekday(value: date) -> str:
    return f"{value.isoformat()} ({WEEKDAYS[value.weekday()]})"


def format_quantity(value: Decimal) -> str:
    """Plain decimal without trailing zeros or exponent (8.50 -> 8.5)."""
    text = format(value.normalize(), "f")
    return text if text != "-0" else "0"


def to_rows(records: Iterable[WorkRecord], employees: Iterable[Employee]) -> Iterator[ExportRow]:
    """Flatten records in store order.

    A record whose employee no longer exists is exported under a
    placeholder name and logged.
    """
    names = {e.id: e.name for e in employees}

    for record in records:
        name = names.get(record.employee_id)
        if name is None:
            logger.warning(
                "Work record %s references missing employee %s",
                record.id,
                record.employee_id,
            )
            name = UNKNOWN_EMPLOYEE

        yield ExportRow(
            date=format_date_with_weekday(record.date),
            employee_name=name,
            work_type=record.work_type.value,
            hours=format_quantity(record.hours),
            strings=format_quantity(record.strings),
            salary=f"{record.salary:.2f}",
            paid_status="Paid" if record.paid else "Unpaid",
            paid_date=record.paid_at.date().isoformat() if record.paid_at else "",
        )


def render_csv(records: Iterable[WorkRecord], employees: Iterable[Employee]) -> str:
    """CSV text with a leading byte-order mark, ready to be UTF-8 encoded."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(HEADERS)
    for row in to_rows(records, employees):
        writer.writerow(row.values())
    return BOM + buffer.getvalue()


def write_csv(
    path: str | Path,
    records: Iterable[WorkRecord],
    employees: Iterable[Employee],
) -> Path:
    """Write the CSV export to a file and return its path."""
    path = Path(path)
    path.write_text(render_csv(records, employees), encoding="utf-8")
    return path


def export_filename(today: date) -> str:
    return f"salary_data_{today.isoformat()}.csv"
