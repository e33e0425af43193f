"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from campus_payroll.calculators.types import AttendanceStatus


# ============================================================================
# Payroll record schemas
# ============================================================================


class PayrollRecordResponse(BaseModel):
    """Schema for payroll record response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_record_id: UUID
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
    source_attendance_ids: list[str] = Field(default_factory=list)
    engine_version: str
    status: str
    generated_at: datetime
    approved_by: str | None = None
    approved_at: datetime | None = None
    paid_at: datetime | None = None


class PayrollRecordListResponse(BaseModel):
    """Schema for listing a month's payroll records."""

    items: list[PayrollRecordResponse]
    total: int


class GenerationFailureResponse(BaseModel):
    """One employee whose record could not be generated."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    error_type: str
    message: str


class GenerationResponse(BaseModel):
    """Schema for a generation run result."""

    month: str
    generated_count: int
    failed_count: int
    records: list[PayrollRecordResponse]
    failures: list[GenerationFailureResponse]


class MonthSummaryResponse(BaseModel):
    """Dashboard counters for one month."""

    model_config = ConfigDict(from_attributes=True)

    month: str
    counts: dict[str, int]
    record_count: int
    total_payout: Decimal
    paid_total: Decimal


# ============================================================================
# Lifecycle schemas
# ============================================================================


class ApprovalRequest(BaseModel):
    """Schema for approving a payroll record."""

    approved_by: str = Field(..., min_length=1)


class MarkPaidRequest(BaseModel):
    """Schema for marking a payroll record paid."""

    actor: str | None = None


# ============================================================================
# Attendance schemas
# ============================================================================


class AttendanceRequest(BaseModel):
    """Schema for recording one day's attendance."""

    employee_id: str = Field(..., min_length=1)
    work_date: date
    status: AttendanceStatus
    overtime_hours: Decimal = Field(default=Decimal("0"), ge=0)
    check_in_time: str | None = None
    check_out_time: str | None = None
    notes: str | None = None


class AttendanceResponse(BaseModel):
    """Schema for a recorded attendance event."""

    model_config = ConfigDict(from_attributes=True)

    attendance_id: str
    employee_id: str
    work_date: date
    status: AttendanceStatus
    overtime_hours: Decimal
    notes: str | None = None


# ============================================================================
# Salary configuration schemas
# ============================================================================


class SalaryConfigurationRequest(BaseModel):
    """Schema for saving an employee's salary configuration.

    ``hourly_rate`` defaults to basic_salary / (22 * 8) when omitted.
    """

    basic_salary: Decimal = Field(..., ge=0)
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    transport_allowance: Decimal = Field(default=Decimal("0"), ge=0)
    meal_allowance: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_rate_allowance: Decimal = Field(default=Decimal("0"), ge=0)
    special_allowance: Decimal = Field(default=Decimal("0"), ge=0)
    tax_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    provident_fund_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    insurance_flat: Decimal = Field(default=Decimal("0"), ge=0)
    effective_date: date | None = None


class SalaryConfigurationResponse(BaseModel):
    """Schema for a resolved salary configuration."""

    employee_id: str
    basic_salary: Decimal
    hourly_rate: Decimal
    transport_allowance: Decimal
    meal_allowance: Decimal
    overtime_rate_allowance: Decimal
    special_allowance: Decimal
    tax_percent: Decimal
    provident_fund_percent: Decimal
    insurance_flat: Decimal
    effective_date: date | None = None
    is_default: bool
    estimated_net: Decimal


# ============================================================================
# Notification schemas
# ============================================================================


class NotificationResponse(BaseModel):
    """Schema for a published domain event."""

    event_type: str
    payload: dict[str, Any]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str
    field: str | None = None
