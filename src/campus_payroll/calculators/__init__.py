"""Payroll calculation engine."""

from campus_payroll.calculators.engine import PayrollCalculator
from campus_payroll.calculators.periods import PayrollMonth, working_days_in_month
from campus_payroll.calculators.salary_resolver import (
    DefaultSalaryTable,
    SalaryResolver,
    estimate_monthly_net,
)
from campus_payroll.calculators.tax_calculator import StepTaxSchedule
from campus_payroll.calculators.types import PayrollComputation, PayrollValidationError

__all__ = [
    "DefaultSalaryTable",
    "PayrollCalculator",
    "PayrollComputation",
    "PayrollMonth",
    "PayrollValidationError",
    "SalaryResolver",
    "StepTaxSchedule",
    "estimate_monthly_net",
    "working_days_in_month",
]
