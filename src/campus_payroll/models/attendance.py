"""Employee attendance ledger model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from campus_payroll.models.base import Base, TimestampMixin


def attendance_event_id(employee_id: str, work_date: date) -> str:
    """Deterministic attendance key: one event per employee per day."""
    return f"{employee_id}_{work_date.isoformat()}"


class AttendanceEvent(Base, TimestampMixin):
    """One day's recorded presence status and overtime for an employee."""

    __tablename__ = "attendance_event"

    attendance_event_id: Mapped[str] = mapped_column(String, primary_key=True)
    employee_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False, default=Decimal("0")
    )
    check_in_time: Mapped[str | None] = mapped_column(String, nullable=True)
    check_out_time: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="attendance_employee_date_unique"),
        CheckConstraint(
            "status IN ('present', 'late', 'half-day', 'absent')",
            name="attendance_status_check",
        ),
        CheckConstraint("overtime_hours >= 0", name="attendance_overtime_nonneg"),
        Index("ix_attendance_employee_date", "employee_id", "work_date"),
    )
