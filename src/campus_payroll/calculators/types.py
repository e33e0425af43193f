"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class PayrollValidationError(ValueError):
    """Raised when calculation inputs are invalid."""

    def __init__(self, message: str, field_name: str | None = None):
        self.field_name = field_name
        super().__init__(message)


class EmployeeCategory(str, Enum):
    """Employee categories participating in payroll."""

    STAFF = "staff"
    LECTURER = "lecturer"


class AttendanceStatus(str, Enum):
    """Attendance status values."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half-day"
    ABSENT = "absent"


# Half-day is intentionally not counted as a present day.
PRESENT_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})


@dataclass(frozen=True)
class EmployeeProfile:
    """Read-only view of an employee from the directory."""

    employee_id: str
    name: str
    category: EmployeeCategory
    department: str = ""
    display_code: str = ""
    position: str | None = None
    subjects: tuple[str, ...] = ()


@dataclass(frozen=True)
class Allowances:
    """Monthly allowance components."""

    transport: Decimal = Decimal("0")
    meal: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    special: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.transport + self.meal + self.overtime_rate + self.special


@dataclass(frozen=True)
class DeductionSettings:
    """Configured deduction percentages and flat amounts."""

    tax_percent: Decimal = Decimal("0")
    provident_fund_percent: Decimal = Decimal("0")
    insurance_flat: Decimal = Decimal("0")


@dataclass(frozen=True)
class SalaryConfig:
    """Compensation parameters used for one calculation."""

    employee_id: str
    basic_salary: Decimal
    hourly_rate: Decimal
    allowances: Allowances = field(default_factory=Allowances)
    deductions: DeductionSettings = field(default_factory=DeductionSettings)
    effective_date: date | None = None
    is_default: bool = False


@dataclass(frozen=True)
class AttendanceEntry:
    """One attendance event as seen by the calculator."""

    attendance_id: str
    employee_id: str
    work_date: date
    status: AttendanceStatus
    overtime_hours: Decimal = Decimal("0")
    notes: str | None = None


@dataclass
class PayrollComputation:
    """Result of computing one employee's month.

    ``to_record_fields`` returns exactly the subset written on upsert.
    """

    employee_id: str
    month: str
    basic_salary: Decimal
    hourly_rate: Decimal
    working_days: int
    present_days: int
    leave_days: int
    unpaid_leave_days: int
    overtime_hours: Decimal
    daily_salary: Decimal
    salary_for_present_days: Decimal
    overtime_pay: Decimal
    leave_deduction: Decimal
    tax_deduction: Decimal
    deductions: Decimal
    gross_salary: Decimal
    total_salary: Decimal
    generated_at: datetime
    source_attendance_ids: list[str] = field(default_factory=list)
    engine_version: str = "1.0.0"
    status: str = "draft"

    def to_record_fields(self) -> dict[str, Any]:
        """Computed fields for the payroll store."""
        return {
            "basic_salary": self.basic_salary,
            "hourly_rate": self.hourly_rate,
            "working_days": self.working_days,
            "present_days": self.present_days,
            "leave_days": self.leave_days,
            "unpaid_leave_days": self.unpaid_leave_days,
            "overtime_hours": self.overtime_hours,
            "daily_salary": self.daily_salary,
            "salary_for_present_days": self.salary_for_present_days,
            "overtime_pay": self.overtime_pay,
            "leave_deduction": self.leave_deduction,
            "tax_deduction": self.tax_deduction,
            "deductions": self.deductions,
            "gross_salary": self.gross_salary,
            "total_salary": self.total_salary,
            "source_attendance_ids": list(self.source_attendance_ids),
            "generated_at": self.generated_at,
            "engine_version": self.engine_version,
        }

    def financial_fields(self) -> dict[str, Any]:
        """Computed fields minus generation metadata."""
        fields = self.to_record_fields()
        fields.pop("generated_at")
        return fields
