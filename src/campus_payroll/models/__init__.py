"""SQLAlchemy ORM models for the campus payroll engine."""

from campus_payroll.models.attendance import AttendanceEvent, attendance_event_id
from campus_payroll.models.base import Base, TimestampMixin, utcnow
from campus_payroll.models.employee import Employee, SalaryConfiguration
from campus_payroll.models.payroll import (
    COMPUTED_FIELDS,
    AuditEvent,
    PayrollRecord,
    payroll_record_id,
)

__all__ = [
    "AttendanceEvent",
    "AuditEvent",
    "Base",
    "COMPUTED_FIELDS",
    "Employee",
    "PayrollRecord",
    "SalaryConfiguration",
    "TimestampMixin",
    "attendance_event_id",
    "payroll_record_id",
    "utcnow",
]
