"""Salary configuration resolution with a department/position default table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Callable, Mapping

from campus_payroll.calculators.types import (
    Allowances,
    DeductionSettings,
    EmployeeCategory,
    EmployeeProfile,
    SalaryConfig,
)

STANDARD_WORKING_DAYS = 22
STANDARD_HOURS_PER_DAY = 8
RATE_PRECISION = Decimal("0.0001")


def default_hourly_rate(basic_salary: Decimal) -> Decimal:
    """basic_salary / (22 working days * 8 hours)."""
    hours = Decimal(STANDARD_WORKING_DAYS * STANDARD_HOURS_PER_DAY)
    return (Decimal(basic_salary) / hours).quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)


def _freeze(table: Mapping[str, Mapping[str, Decimal]]) -> Mapping[str, Mapping[str, Decimal]]:
    return MappingProxyType(
        {category: MappingProxyType(dict(amounts)) for category, amounts in table.items()}
    )


@dataclass(frozen=True)
class DefaultSalaryTable:
    """Immutable (category, key) -> basic salary lookup.

    Lecturers are keyed by department, staff by position. A key missing
    from the table falls back to the category default.
    """

    amounts: Mapping[str, Mapping[str, Decimal]]
    category_defaults: Mapping[str, Decimal]

    def __post_init__(self) -> None:
        object.__setattr__(self, "amounts", _freeze(self.amounts))
        object.__setattr__(
            self, "category_defaults", MappingProxyType(dict(self.category_defaults))
        )

    @classmethod
    def standard(cls) -> DefaultSalaryTable:
        return cls(
            amounts={
                EmployeeCategory.LECTURER.value: {
                    "Computer Science": Decimal("150000"),
                    "Mathematics": Decimal("140000"),
                    "Physics": Decimal("145000"),
                    "Engineering": Decimal("160000"),
                },
                EmployeeCategory.STAFF.value: {
                    "Manager": Decimal("120000"),
                    "Assistant Manager": Decimal("100000"),
                    "Coordinator": Decimal("80000"),
                    "Administrator": Decimal("70000"),
                },
            },
            category_defaults={
                EmployeeCategory.LECTURER.value: Decimal("130000"),
                EmployeeCategory.STAFF.value: Decimal("60000"),
            },
        )

    @staticmethod
    def lookup_key(employee: EmployeeProfile) -> str | None:
        if employee.category == EmployeeCategory.LECTURER:
            return employee.department
        return employee.position

    def basic_salary_for(self, employee: EmployeeProfile) -> Decimal:
        category = EmployeeCategory(employee.category).value
        by_key = self.amounts.get(category, {})
        key = self.lookup_key(employee)
        if key is not None and key in by_key:
            return by_key[key]
        return self.category_defaults[category]


@dataclass(frozen=True)
class DefaultComponents:
    """Allowances and deductions applied to synthesized configurations."""

    allowances: Allowances = field(
        default_factory=lambda: Allowances(
            transport=Decimal("5000"),
            meal=Decimal("3000"),
        )
    )
    deductions: DeductionSettings = field(
        default_factory=lambda: DeductionSettings(insurance_flat=Decimal("2000"))
    )


class SalaryResolver:
    """Resolves the salary configuration used for an employee.

    Never writes: a synthesized default is returned with ``is_default=True``
    and it is up to the caller whether to persist it.
    """

    def __init__(
        self,
        table: DefaultSalaryTable | None = None,
        components: DefaultComponents | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.table = table or DefaultSalaryTable.standard()
        self.components = components or DefaultComponents()
        self._today = today

    def resolve_configuration(
        self,
        employee: EmployeeProfile,
        stored: SalaryConfig | None = None,
        effective_date: date | None = None,
    ) -> SalaryConfig:
        """Return the stored configuration verbatim, else a table default."""
        if stored is not None:
            return stored

        basic_salary = self.table.basic_salary_for(employee)
        return SalaryConfig(
            employee_id=employee.employee_id,
            basic_salary=basic_salary,
            hourly_rate=default_hourly_rate(basic_salary),
            allowances=self.components.allowances,
            deductions=self.components.deductions,
            effective_date=effective_date or self._today(),
            is_default=True,
        )


def estimate_monthly_net(config: SalaryConfig) -> Decimal:
    """Configured net estimate shown on the salary setup screen.

    basic + allowances - (basic * tax% + basic * provident fund% + insurance).
    Attendance is not considered.
    """
    basic = config.basic_salary
    percent_deductions = basic * (
        config.deductions.tax_percent + config.deductions.provident_fund_percent
    ) / Decimal("100")
    net = basic + config.allowances.total - percent_deductions - config.deductions.insurance_flat
    return net.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
