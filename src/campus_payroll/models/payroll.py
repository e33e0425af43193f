"""Payroll record and audit event models."""

from __future__ import annotations

import hashlib
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from campus_payroll.models.base import Base, TimestampMixin


def payroll_record_id(employee_id: str, month: str) -> UUID:
    """Deterministic record identity for an (employee, month) pair."""
    digest = hashlib.sha256(f"payroll:{employee_id}:{month}".encode()).digest()
    return UUID(bytes=digest[:16])


# Fields written by generation. Lifecycle fields (status, approved_*,
# paid_at) are deliberately absent.
COMPUTED_FIELDS: tuple[str, ...] = (
    "basic_salary",
    "hourly_rate",
    "working_days",
    "present_days",
    "leave_days",
    "unpaid_leave_days",
    "overtime_hours",
    "daily_salary",
    "salary_for_present_days",
    "overtime_pay",
    "leave_deduction",
    "tax_deduction",
    "deductions",
    "gross_salary",
    "total_salary",
    "source_attendance_ids",
    "generated_at",
    "engine_version",
)


class PayrollRecord(Base, TimestampMixin):
    """Computed monthly compensation for one employee plus its lifecycle state."""

    __tablename__ = "payroll_record"

    payroll_record_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    employee_id: Mapped[str] = mapped_column(String, nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)

    # Snapshot of configuration at generation time
    basic_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)

    # Attendance figures
    working_days: Mapped[int] = mapped_column(Integer, nullable=False)
    present_days: Mapped[int] = mapped_column(Integer, nullable=False)
    leave_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unpaid_leave_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False, default=Decimal("0")
    )

    # Money
    daily_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    salary_for_present_days: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    overtime_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    leave_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    tax_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    deductions: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    gross_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    source_attendance_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    engine_version: Mapped[str] = mapped_column(String, nullable=False, default="1.0.0")

    # Lifecycle
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "month", name="payroll_record_employee_month_unique"),
        CheckConstraint(
            "status IN ('draft', 'approved', 'paid')",
            name="payroll_record_status_check",
        ),
        CheckConstraint("total_salary >= 0", name="payroll_record_total_nonneg"),
        Index("ix_payroll_record_month", "month"),
    )


class AuditEvent(Base):
    """Append-only audit trail of payroll lifecycle actions."""

    __tablename__ = "audit_event"

    audit_event_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    actor: Mapped[str | None] = mapped_column(String, nullable=True)
    details_json: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_audit_event_entity", "entity_type", "entity_id"),)
