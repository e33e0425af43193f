"""Attendance ledger: per-day attendance events per employee."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_payroll.calculators.periods import PayrollMonth
from campus_payroll.calculators.types import (
    AttendanceEntry,
    AttendanceStatus,
    PayrollValidationError,
)
from campus_payroll.models import AttendanceEvent, attendance_event_id


def to_entry(event: AttendanceEvent) -> AttendanceEntry:
    return AttendanceEntry(
        attendance_id=event.attendance_event_id,
        employee_id=event.employee_id,
        work_date=event.work_date,
        status=AttendanceStatus(event.status),
        overtime_hours=event.overtime_hours,
        notes=event.notes,
    )


class AttendanceLedger:
    """One upsertable attendance event per (employee, date).

    Missing days are simply absent from the ledger; a second write for the
    same day replaces the first.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_events(self, employee_id: str, month: str) -> list[AttendanceEntry]:
        """Events for one employee within a ``YYYY-MM`` month, ordered by date."""
        period = PayrollMonth.parse(month)
        result = await self.session.execute(
            select(AttendanceEvent)
            .where(
                AttendanceEvent.employee_id == employee_id,
                AttendanceEvent.work_date >= period.first_day,
                AttendanceEvent.work_date <= period.last_day,
            )
            .order_by(AttendanceEvent.work_date)
        )
        return [to_entry(e) for e in result.scalars().all()]

    async def mark_attendance(
        self,
        employee_id: str,
        work_date: date,
        status: AttendanceStatus | str,
        overtime_hours: Decimal = Decimal("0"),
        check_in_time: str | None = None,
        check_out_time: str | None = None,
        notes: str | None = None,
    ) -> AttendanceEntry:
        """Record the day's attendance, overwriting any earlier entry for that day."""
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise PayrollValidationError(
                f"Unknown attendance status {status!r}", "status"
            ) from None
        if overtime_hours < 0:
            raise PayrollValidationError(
                f"Overtime hours must be >= 0, got {overtime_hours}", "overtime_hours"
            )

        event_id = attendance_event_id(employee_id, work_date)
        event = await self.session.get(AttendanceEvent, event_id)
        if event is None:
            event = AttendanceEvent(
                attendance_event_id=event_id,
                employee_id=employee_id,
                work_date=work_date,
            )
            self.session.add(event)

        event.status = status.value
        event.overtime_hours = overtime_hours
        event.check_in_time = check_in_time
        event.check_out_time = check_out_time
        event.notes = notes

        await self.session.flush()
        return to_entry(event)
