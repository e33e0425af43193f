"""Employee salary configuration endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from campus_payroll.api.dependencies import DbSession
from campus_payroll.api.schemas import (
    ErrorResponse,
    SalaryConfigurationRequest,
    SalaryConfigurationResponse,
)
from campus_payroll.calculators import SalaryResolver, estimate_monthly_net
from campus_payroll.calculators.types import Allowances, DeductionSettings, SalaryConfig
from campus_payroll.services import EmployeeDirectory

router = APIRouter(prefix="/employees", tags=["employees"])


def _to_response(config: SalaryConfig) -> SalaryConfigurationResponse:
    return SalaryConfigurationResponse(
        employee_id=config.employee_id,
        basic_salary=config.basic_salary,
        hourly_rate=config.hourly_rate,
        transport_allowance=config.allowances.transport,
        meal_allowance=config.allowances.meal,
        overtime_rate_allowance=config.allowances.overtime_rate,
        special_allowance=config.allowances.special,
        tax_percent=config.deductions.tax_percent,
        provident_fund_percent=config.deductions.provident_fund_percent,
        insurance_flat=config.deductions.insurance_flat,
        effective_date=config.effective_date,
        is_default=config.is_default,
        estimated_net=estimate_monthly_net(config),
    )


@router.get(
    "/{employee_id}/salary-configuration",
    response_model=SalaryConfigurationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_salary_configuration(
    db: DbSession,
    employee_id: Annotated[str, Path()],
) -> SalaryConfigurationResponse:
    """Stored configuration, or the table default flagged with ``is_default``."""
    directory = EmployeeDirectory(db)
    employee = await directory.get_employee(employee_id)
    stored = await directory.get_salary_configuration(employee_id)
    return _to_response(SalaryResolver().resolve_configuration(employee, stored))


@router.put(
    "/{employee_id}/salary-configuration",
    response_model=SalaryConfigurationResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def save_salary_configuration(
    db: DbSession,
    employee_id: Annotated[str, Path()],
    payload: SalaryConfigurationRequest,
) -> SalaryConfigurationResponse:
    """Create or replace an employee's salary configuration."""
    config = await EmployeeDirectory(db).save_salary_configuration(
        employee_id,
        basic_salary=payload.basic_salary,
        hourly_rate=payload.hourly_rate,
        allowances=Allowances(
            transport=payload.transport_allowance,
            meal=payload.meal_allowance,
            overtime_rate=payload.overtime_rate_allowance,
            special=payload.special_allowance,
        ),
        deductions=DeductionSettings(
            tax_percent=payload.tax_percent,
            provident_fund_percent=payload.provident_fund_percent,
            insurance_flat=payload.insurance_flat,
        ),
        effective_date=payload.effective_date,
    )
    await db.commit()
    return _to_response(config)
