"""Attendance API endpoints."""

from fastapi import APIRouter

from campus_payroll.api.dependencies import DbSession
from campus_payroll.api.schemas import AttendanceRequest, AttendanceResponse, ErrorResponse
from campus_payroll.services import AttendanceLedger, EmployeeDirectory

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.put(
    "",
    response_model=AttendanceResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def mark_attendance(db: DbSession, payload: AttendanceRequest) -> AttendanceResponse:
    """Record one day's attendance; a second write for the same day replaces it."""
    await EmployeeDirectory(db).get_employee(payload.employee_id)

    entry = await AttendanceLedger(db).mark_attendance(
        employee_id=payload.employee_id,
        work_date=payload.work_date,
        status=payload.status,
        overtime_hours=payload.overtime_hours,
        check_in_time=payload.check_in_time,
        check_out_time=payload.check_out_time,
        notes=payload.notes,
    )
    await db.commit()
    return AttendanceResponse.model_validate(entry)
