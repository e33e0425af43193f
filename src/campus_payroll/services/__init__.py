"""Payroll services."""

from campus_payroll.services.attendance_ledger import AttendanceLedger
from campus_payroll.services.directory import EmployeeDirectory, EmployeeNotFoundError
from campus_payroll.services.payroll_service import (
    GenerationFailure,
    GenerationResult,
    PayrollLifecycleManager,
)
from campus_payroll.services.payroll_store import (
    MonthSummary,
    PayrollRecordNotFoundError,
    PayrollStore,
)
from campus_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollStateMachine,
    PayrollStatus,
)

__all__ = [
    "AttendanceLedger",
    "EmployeeDirectory",
    "EmployeeNotFoundError",
    "GenerationFailure",
    "GenerationResult",
    "InvalidTransitionError",
    "MonthSummary",
    "PayrollLifecycleManager",
    "PayrollRecordNotFoundError",
    "PayrollStateMachine",
    "PayrollStatus",
    "PayrollStore",
]
