"""Attendance-based monthly payroll calculator."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable

from campus_payroll.calculators.periods import PayrollMonth
from campus_payroll.calculators.tax_calculator import StepTaxSchedule
from campus_payroll.calculators.types import (
    PRESENT_STATUSES,
    AttendanceEntry,
    AttendanceStatus,
    EmployeeProfile,
    PayrollComputation,
    PayrollValidationError,
    SalaryConfig,
)

CENTS = Decimal("0.01")
OVERTIME_MULTIPLIER = Decimal("1.5")
PAID_LEAVE_GRACE_DAYS = 2


def _dec(value: object) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _money(amount: Decimal) -> Decimal:
    return _dec(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PayrollCalculator:
    """Computes one employee's payroll for one month.

    Calculation pipeline:
    1) Working days = Mon-Fri dates in the month
    2) Present days = present + late events (half-day excluded)
    3) Overtime hours summed, uncapped
    4) Leave days beyond the 2-day grace become unpaid
    5) Daily rate, salary for present days, overtime at 1.5x hourly rate
    6) Step tax on gross, leave deduction, floor total at zero

    The only non-deterministic output is ``generated_at``, taken from the
    injected clock.
    """

    def __init__(
        self,
        tax_schedule: StepTaxSchedule | None = None,
        clock: Callable[[], datetime] = _utcnow,
        engine_version: str = "1.0.0",
    ):
        self.tax_schedule = tax_schedule or StepTaxSchedule()
        self.clock = clock
        self.engine_version = engine_version

    def compute_month(
        self,
        employee: EmployeeProfile,
        configuration: SalaryConfig,
        attendance_events: Iterable[AttendanceEntry],
        month: str,
    ) -> PayrollComputation:
        """Compute the payroll record for ``employee`` in ``month``.

        Raises:
            PayrollValidationError: If month or configuration are invalid
        """
        period = PayrollMonth.parse(month)
        self._validate_configuration(configuration)

        events = self._events_for_month(attendance_events, period)

        working_days = period.working_days()
        present_days = sum(1 for e in events if e.status in PRESENT_STATUSES)
        overtime_hours = sum((_dec(e.overtime_hours) for e in events), Decimal("0"))

        if working_days == 0 and present_days > 0:
            raise PayrollValidationError(
                f"{present_days} present day(s) recorded in {period} with no working days",
                "present_days",
            )

        leave_days = max(0, working_days - present_days)
        unpaid_leave_days = max(0, leave_days - PAID_LEAVE_GRACE_DAYS)

        if working_days > 0:
            daily_salary = _money(_dec(configuration.basic_salary) / working_days)
        else:
            daily_salary = Decimal("0.00")

        salary_for_present_days = _money(daily_salary * present_days)
        overtime_pay = _money(
            overtime_hours * _dec(configuration.hourly_rate) * OVERTIME_MULTIPLIER
        )
        gross = salary_for_present_days + overtime_pay

        leave_deduction = _money(daily_salary * unpaid_leave_days)
        tax_deduction = self.tax_schedule.calculate(gross)
        total_deductions = leave_deduction + tax_deduction

        total_salary = max(Decimal("0.00"), gross - total_deductions)

        return PayrollComputation(
            employee_id=employee.employee_id,
            month=str(period),
            basic_salary=_money(configuration.basic_salary),
            hourly_rate=_dec(configuration.hourly_rate),
            working_days=working_days,
            present_days=present_days,
            leave_days=leave_days,
            unpaid_leave_days=unpaid_leave_days,
            overtime_hours=overtime_hours,
            daily_salary=daily_salary,
            salary_for_present_days=salary_for_present_days,
            overtime_pay=overtime_pay,
            leave_deduction=leave_deduction,
            tax_deduction=tax_deduction,
            deductions=total_deductions,
            gross_salary=gross,
            total_salary=total_salary,
            generated_at=self.clock(),
            source_attendance_ids=[e.attendance_id for e in events],
            engine_version=self.engine_version,
        )

    @staticmethod
    def _validate_configuration(configuration: SalaryConfig) -> None:
        if configuration.basic_salary is None or configuration.basic_salary < 0:
            raise PayrollValidationError(
                f"Negative basic salary for employee {configuration.employee_id}: "
                f"{configuration.basic_salary}",
                "basic_salary",
            )
        if configuration.hourly_rate is None or configuration.hourly_rate < 0:
            raise PayrollValidationError(
                f"Negative hourly rate for employee {configuration.employee_id}: "
                f"{configuration.hourly_rate}",
                "hourly_rate",
            )

    @staticmethod
    def _events_for_month(
        attendance_events: Iterable[AttendanceEntry], period: PayrollMonth
    ) -> list[AttendanceEntry]:
        """Events inside the month, one per date, last write wins."""
        by_date: dict[date, AttendanceEntry] = {}
        for entry in attendance_events:
            if entry.work_date not in period:
                continue
            if entry.overtime_hours < 0:
                raise PayrollValidationError(
                    f"Negative overtime hours on {entry.work_date}: {entry.overtime_hours}",
                    "overtime_hours",
                )
            try:
                status = AttendanceStatus(entry.status)
            except ValueError:
                raise PayrollValidationError(
                    f"Unknown attendance status on {entry.work_date}: {entry.status!r}",
                    "status",
                ) from None
            if status is not entry.status:
                entry = replace(entry, status=status)
            by_date.pop(entry.work_date, None)
            by_date[entry.work_date] = entry
        return sorted(by_date.values(), key=lambda e: e.work_date)
