"""Employee, work record and settings tables."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from payroll_ledger.models.base import Base, TimestampMixin


class EmployeeRow(Base, TimestampMixin):
    """Employee record."""

    __tablename__ = "employees"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="name_not_empty"),
        CheckConstraint(
            "hourly_rate IS NULL OR hourly_rate >= 0",
            name="hourly_rate_non_negative",
        ),
    )


class WorkRecordRow(Base, TimestampMixin):
    """Work record with its salary snapshot."""

    __tablename__ = "work_records"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    # Insertion counter; orders records created within the same instant
    seq: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    employee_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    strings: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    daily_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    settlement_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    __table_args__ = (
        CheckConstraint("hours >= 0 AND strings >= 0", name="quantities_non_negative"),
        CheckConstraint("hours > 0 OR strings > 0", name="has_work"),
        CheckConstraint(
            "(paid AND paid_at IS NOT NULL) OR (NOT paid AND paid_at IS NULL)",
            name="paid_at_matches_paid",
        ),
        Index("ix_work_records_employee_paid", "employee_id", "paid"),
    )


class SettingsRow(Base):
    """Singleton row of system-wide default rates."""

    __tablename__ = "settings"

    SINGLETON_ID = 1

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    default_hourly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    default_unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)

    __table_args__ = (
        CheckConstraint("id = 1", name="singleton"),
        CheckConstraint(
            "default_hourly_rate >= 0 AND default_unit_price >= 0",
            name="rates_non_negative",
        ),
    )
