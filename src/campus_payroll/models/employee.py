"""Employee directory and salary configuration models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_payroll.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Staff member or lecturer participating in payroll.

    Created and edited by the user-management workflow; the payroll
    engine only reads it.
    """

    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String, primary_key=True)
    display_code: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str] = mapped_column(String, nullable=False, default="")
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    subjects: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "category IN ('staff', 'lecturer')",
            name="employee_category_check",
        ),
    )

    # Relationships
    salary_configuration: Mapped[SalaryConfiguration | None] = relationship(
        back_populates="employee",
        uselist=False,
    )


class SalaryConfiguration(Base, TimestampMixin):
    """Compensation parameters for one employee (at most one per employee)."""

    __tablename__ = "salary_configuration"

    employee_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        primary_key=True,
    )
    basic_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)

    # Allowances
    transport_allowance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    meal_allowance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    overtime_rate_allowance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    special_allowance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )

    # Deductions
    tax_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    provident_fund_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    insurance_flat: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )

    effective_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint("basic_salary >= 0", name="salary_config_basic_nonneg"),
        CheckConstraint("hourly_rate >= 0", name="salary_config_hourly_nonneg"),
        CheckConstraint(
            "tax_percent >= 0 AND tax_percent <= 100",
            name="salary_config_tax_percent_range",
        ),
        CheckConstraint(
            "provident_fund_percent >= 0 AND provident_fund_percent <= 100",
            name="salary_config_pf_percent_range",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="salary_configuration")
