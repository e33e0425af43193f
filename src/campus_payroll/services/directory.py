"""Employee directory: roster and stored salary configuration lookups."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_payroll.calculators.salary_resolver import default_hourly_rate
from campus_payroll.calculators.types import (
    Allowances,
    DeductionSettings,
    EmployeeCategory,
    EmployeeProfile,
    PayrollValidationError,
    SalaryConfig,
)
from campus_payroll.models import Employee, SalaryConfiguration


class EmployeeNotFoundError(Exception):
    """Raised when an employee is not in the directory."""

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")


def to_profile(employee: Employee) -> EmployeeProfile:
    """Convert an Employee row to the calculator's read-only profile."""
    return EmployeeProfile(
        employee_id=employee.employee_id,
        name=employee.name,
        category=EmployeeCategory(employee.category),
        department=employee.department or "",
        display_code=employee.display_code,
        position=employee.position,
        subjects=tuple(employee.subjects or ()),
    )


def to_salary_config(row: SalaryConfiguration) -> SalaryConfig:
    """Convert a SalaryConfiguration row to the calculator's value object."""
    return SalaryConfig(
        employee_id=row.employee_id,
        basic_salary=row.basic_salary,
        hourly_rate=row.hourly_rate,
        allowances=Allowances(
            transport=row.transport_allowance,
            meal=row.meal_allowance,
            overtime_rate=row.overtime_rate_allowance,
            special=row.special_allowance,
        ),
        deductions=DeductionSettings(
            tax_percent=row.tax_percent,
            provident_fund_percent=row.provident_fund_percent,
            insurance_flat=row.insurance_flat,
        ),
        effective_date=row.effective_date,
    )


class EmployeeDirectory:
    """Read access to the employee roster plus the salary setup write path.

    The payroll engine only reads from here; ``save_salary_configuration``
    serves the administrative salary setup screen.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active_employees(
        self, category: EmployeeCategory | str | None = None
    ) -> list[EmployeeProfile]:
        """Active staff and lecturers, optionally filtered by category."""
        query = select(Employee).where(Employee.is_active.is_(True))
        if category is not None:
            query = query.where(Employee.category == EmployeeCategory(category).value)
        query = query.order_by(Employee.category, Employee.employee_id)

        result = await self.session.execute(query)
        return [to_profile(e) for e in result.scalars().all()]

    async def get_employee(self, employee_id: str) -> EmployeeProfile:
        """Look up one employee.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return to_profile(employee)

    async def get_active_employee(self, employee_id: str) -> EmployeeProfile:
        """Like get_employee, but inactive employees are treated as missing."""
        employee = await self.session.get(Employee, employee_id)
        if employee is None or not employee.is_active:
            raise EmployeeNotFoundError(employee_id)
        return to_profile(employee)

    async def get_salary_configuration(self, employee_id: str) -> SalaryConfig | None:
        """Stored configuration, or None when the employee has none."""
        row = await self.session.get(SalaryConfiguration, employee_id)
        if row is None:
            return None
        return to_salary_config(row)

    async def save_salary_configuration(
        self,
        employee_id: str,
        basic_salary: Decimal,
        hourly_rate: Decimal | None = None,
        allowances: Allowances | None = None,
        deductions: DeductionSettings | None = None,
        effective_date: date | None = None,
    ) -> SalaryConfig:
        """Create or replace the employee's single active configuration.

        ``hourly_rate`` defaults to basic_salary / (22 * 8) when not given.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            PayrollValidationError: If amounts or percentages are out of range
        """
        if await self.session.get(Employee, employee_id) is None:
            raise EmployeeNotFoundError(employee_id)

        allowances = allowances or Allowances()
        deductions = deductions or DeductionSettings()
        _validate_configuration(basic_salary, hourly_rate, allowances, deductions)

        row = await self.session.get(SalaryConfiguration, employee_id)
        if row is None:
            row = SalaryConfiguration(employee_id=employee_id)
            self.session.add(row)

        if hourly_rate is None:
            hourly_rate = default_hourly_rate(basic_salary)

        row.basic_salary = basic_salary
        row.hourly_rate = hourly_rate
        row.transport_allowance = allowances.transport
        row.meal_allowance = allowances.meal
        row.overtime_rate_allowance = allowances.overtime_rate
        row.special_allowance = allowances.special
        row.tax_percent = deductions.tax_percent
        row.provident_fund_percent = deductions.provident_fund_percent
        row.insurance_flat = deductions.insurance_flat
        row.effective_date = effective_date or date.today()

        await self.session.flush()
        return to_salary_config(row)


def _validate_configuration(
    basic_salary: Decimal,
    hourly_rate: Decimal | None,
    allowances: Allowances,
    deductions: DeductionSettings,
) -> None:
    if basic_salary < 0:
        raise PayrollValidationError(
            f"Basic salary must be >= 0, got {basic_salary}", "basic_salary"
        )
    if hourly_rate is not None and hourly_rate < 0:
        raise PayrollValidationError(
            f"Hourly rate must be >= 0, got {hourly_rate}", "hourly_rate"
        )

    for name in ("transport", "meal", "overtime_rate", "special"):
        if getattr(allowances, name) < 0:
            raise PayrollValidationError(f"Allowance '{name}' must be >= 0", name)

    for name in ("tax_percent", "provident_fund_percent"):
        value = getattr(deductions, name)
        if not Decimal("0") <= value <= Decimal("100"):
            raise PayrollValidationError(
                f"'{name}' must be within [0, 100], got {value}", name
            )
    if deductions.insurance_flat < 0:
        raise PayrollValidationError("'insurance_flat' must be >= 0", "insurance_flat")
