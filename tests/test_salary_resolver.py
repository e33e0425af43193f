"""Tests for salary configuration resolution and the default table."""

from datetime import date
from decimal import Decimal

import pytest

from campus_payroll.calculators.salary_resolver import (
    DefaultSalaryTable,
    SalaryResolver,
    default_hourly_rate,
    estimate_monthly_net,
)
from campus_payroll.calculators.types import (
    Allowances,
    DeductionSettings,
    EmployeeCategory,
    EmployeeProfile,
    SalaryConfig,
)

TODAY = date(2024, 6, 15)


def lecturer(department: str) -> EmployeeProfile:
    return EmployeeProfile(
        employee_id="lec-1",
        name="Lecturer",
        category=EmployeeCategory.LECTURER,
        department=department,
    )


def staff(position: str | None) -> EmployeeProfile:
    return EmployeeProfile(
        employee_id="stf-1",
        name="Staff",
        category=EmployeeCategory.STAFF,
        department="Registry",
        position=position,
    )


@pytest.fixture
def resolver() -> SalaryResolver:
    return SalaryResolver(today=lambda: TODAY)


class TestDefaultTable:
    @pytest.mark.parametrize(
        "employee,expected",
        [
            (lecturer("Computer Science"), Decimal("150000")),
            (lecturer("Mathematics"), Decimal("140000")),
            (lecturer("Physics"), Decimal("145000")),
            (lecturer("Engineering"), Decimal("160000")),
            (lecturer("Philosophy"), Decimal("130000")),
            (staff("Manager"), Decimal("120000")),
            (staff("Assistant Manager"), Decimal("100000")),
            (staff("Coordinator"), Decimal("80000")),
            (staff("Administrator"), Decimal("70000")),
            (staff("Technician"), Decimal("60000")),
            (staff(None), Decimal("60000")),
        ],
    )
    def test_standard_amounts(self, employee, expected):
        assert DefaultSalaryTable.standard().basic_salary_for(employee) == expected

    def test_staff_lookup_ignores_department(self):
        """Staff are keyed by position even when the department matches a lecturer key."""
        employee = EmployeeProfile(
            employee_id="stf-2",
            name="Staff",
            category=EmployeeCategory.STAFF,
            department="Computer Science",
            position=None,
        )
        assert DefaultSalaryTable.standard().basic_salary_for(employee) == Decimal("60000")

    def test_table_is_read_only(self):
        table = DefaultSalaryTable.standard()

        with pytest.raises(TypeError):
            table.amounts["lecturer"]["Philosophy"] = Decimal("1")  # type: ignore[index]
        with pytest.raises(TypeError):
            table.category_defaults["staff"] = Decimal("1")  # type: ignore[index]


class TestResolveConfiguration:
    def test_stored_configuration_returned_verbatim(self, resolver):
        stored = SalaryConfig(
            employee_id="lec-1",
            basic_salary=Decimal("99000"),
            hourly_rate=Decimal("500"),
            effective_date=date(2023, 1, 1),
        )

        assert resolver.resolve_configuration(lecturer("Physics"), stored) is stored

    def test_default_configuration(self, resolver):
        config = resolver.resolve_configuration(staff("Coordinator"))

        assert config.is_default is True
        assert config.employee_id == "stf-1"
        assert config.basic_salary == Decimal("80000")
        assert config.hourly_rate == Decimal("454.5455")
        assert config.allowances.transport == Decimal("5000")
        assert config.allowances.meal == Decimal("3000")
        assert config.allowances.overtime_rate == Decimal("0")
        assert config.deductions.insurance_flat == Decimal("2000")
        assert config.deductions.tax_percent == Decimal("0")
        assert config.effective_date == TODAY

    def test_effective_date_override(self, resolver):
        config = resolver.resolve_configuration(staff(None), effective_date=date(2024, 4, 1))
        assert config.effective_date == date(2024, 4, 1)

    def test_injected_table(self):
        table = DefaultSalaryTable(
            amounts={"lecturer": {"Philosophy": Decimal("135000")}, "staff": {}},
            category_defaults={"lecturer": Decimal("1"), "staff": Decimal("2")},
        )
        resolver = SalaryResolver(table=table, today=lambda: TODAY)

        philosophy = resolver.resolve_configuration(lecturer("Philosophy"))
        assert philosophy.basic_salary == Decimal("135000")
        assert resolver.resolve_configuration(staff("Manager")).basic_salary == Decimal("2")


class TestHelpers:
    def test_default_hourly_rate(self):
        assert default_hourly_rate(Decimal("176000")) == Decimal("1000.0000")
        assert default_hourly_rate(Decimal("130000")) == Decimal("738.6364")

    def test_estimated_net_for_default(self, resolver):
        config = resolver.resolve_configuration(staff("Coordinator"))

        # 80000 + 5000 + 3000 - 2000
        assert estimate_monthly_net(config) == Decimal("86000.00")

    def test_estimated_net_with_percentages(self):
        config = SalaryConfig(
            employee_id="lec-1",
            basic_salary=Decimal("100000"),
            hourly_rate=Decimal("568.1818"),
            allowances=Allowances(transport=Decimal("5000"), meal=Decimal("3000")),
            deductions=DeductionSettings(
                tax_percent=Decimal("10"),
                provident_fund_percent=Decimal("5"),
                insurance_flat=Decimal("2000"),
            ),
        )

        assert estimate_monthly_net(config) == Decimal("91000.00")
