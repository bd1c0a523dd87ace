"""Tests for the flat export and CSV rendering."""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from payroll_ledger.calculators.types import Employee
from payroll_ledger.services import exporter


class TestToRows:
    """Test flattening records for export."""

    def test_row_fields(self, employee, make_record):
        record = make_record(
            hours=Decimal("8.50"),
            salary=Decimal("170"),
            paid=True,
            paid_at=datetime(2024, 1, 2, 18, 0, tzinfo=timezone.utc),
        )

        (row,) = exporter.to_rows([record], [employee])

        assert row.date == "2024-01-01 (Mon)"
        assert row.employee_name == "Ana"
        assert row.work_type == "hourly"
        assert row.hours == "8.5"
        assert row.strings == "0"
        assert row.salary == "170.00"
        assert row.paid_status == "Paid"
        assert row.paid_date == "2024-01-02"

    def test_unpaid_has_empty_paid_date(self, employee, make_record):
        (row,) = exporter.to_rows([make_record()], [employee])

        assert row.paid_status == "Unpaid"
        assert row.paid_date == ""

    def test_dangling_employee_gets_placeholder(self, make_record):
        record = make_record(employee_id=uuid4())

        (row,) = exporter.to_rows([record], [])

        assert row.employee_name == exporter.UNKNOWN_EMPLOYEE

    def test_rows_are_restartable(self, employee, make_record):
        records = [make_record(), make_record(date=date(2024, 1, 2))]

        first = list(exporter.to_rows(records, [employee]))
        second = list(exporter.to_rows(records, [employee]))

        assert first == second
        assert len(first) == 2

    def test_work_type_labels(self, employee, make_record):
        records = [
            make_record(hours=Decimal("0"), strings=Decimal("40")),
            make_record(hours=Decimal("2"), strings=Decimal("40")),
        ]

        rows = list(exporter.to_rows(records, [employee]))

        assert [r.work_type for r in rows] == ["piece", "mixed"]


class TestRenderCsv:
    """Test CSV framing."""

    def test_header_and_bom(self):
        text = exporter.render_csv([], [])

        assert text.startswith("\ufeff")
        assert text[1:] == "Date,Employee Name,Type,Hours,Strings,Salary,Paid Status,Paid Date\n"

    def test_quotes_only_when_needed(self, make_record):
        smith = Employee(id=uuid4(), name="Smith, John")
        record = make_record(
            employee_id=smith.id,
            hours=Decimal("0"),
            strings=Decimal("50"),
            salary=Decimal("12.5"),
        )

        lines = exporter.render_csv([record], [smith]).splitlines()

        assert lines[1] == '2024-01-01 (Mon),"Smith, John",piece,0,50,12.50,Unpaid,'

    def test_internal_quotes_doubled(self, make_record):
        nick = Employee(id=uuid4(), name='Jo "JJ" Lee')
        record = make_record(employee_id=nick.id)

        lines = exporter.render_csv([record], [nick]).splitlines()

        assert '"Jo ""JJ"" Lee"' in lines[1]

    def test_write_csv(self, tmp_path, employee, make_record):
        path = exporter.write_csv(tmp_path / "out.csv", [make_record()], [employee])

        content = path.read_bytes()
        assert content.startswith(b"\xef\xbb\xbf")
        assert b"Ana" in content

    def test_export_filename(self):
        assert exporter.export_filename(date(2024, 3, 9)) == "salary_data_2024-03-09.csv"
