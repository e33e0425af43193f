"""Seed a demo roster and a month of attendance.

Usage:
    python scripts/seed_demo.py [--database-url URL] [--month YYYY-MM]

Creates the schema if needed, inserts a handful of staff and lecturers,
and marks weekday attendance so `campus-payroll generate` has something
to compute. Safe to re-run: employees are merged and attendance is
upserted per day.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal

from campus_payroll.calculators.periods import PayrollMonth
from campus_payroll.calculators.types import AttendanceStatus
from campus_payroll.cli import session_scope
from campus_payroll.database import create_engine, create_schema
from campus_payroll.models import Employee
from campus_payroll.services import AttendanceLedger

DEMO_EMPLOYEES = [
    # (employee_id, code, name, category, department, position)
    ("lec-001", "L001", "Ama Mensah", "lecturer", "Computer Science", None),
    ("lec-002", "L002", "Kwame Boateng", "lecturer", "Mathematics", None),
    ("lec-003", "L003", "Efua Owusu", "lecturer", "Philosophy", None),
    ("stf-001", "S001", "Yaw Asante", "staff", "Administration", "Manager"),
    ("stf-002", "S002", "Akosua Darko", "staff", "Registry", "Coordinator"),
    ("stf-003", "S003", "Kofi Adjei", "staff", "Facilities", "Technician"),
]

# Weekday indexes (0-based among the month's working days) with a non-present status
ABSENCES = {
    "lec-002": {3: AttendanceStatus.ABSENT, 10: AttendanceStatus.HALF_DAY},
    "stf-002": {0: AttendanceStatus.LATE, 5: AttendanceStatus.ABSENT, 6: AttendanceStatus.ABSENT},
    "stf-003": {i: AttendanceStatus.ABSENT for i in range(1, 8)},
}

OVERTIME = {"stf-001": Decimal("2.5"), "lec-001": Decimal("1")}


async def seed(database_url: str | None, month: str) -> None:
    period = PayrollMonth.parse(month)

    engine = create_engine(database_url)
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()

    async with session_scope(database_url) as session:
        for employee_id, code, name, category, department, position in DEMO_EMPLOYEES:
            await session.merge(
                Employee(
                    employee_id=employee_id,
                    display_code=code,
                    name=name,
                    category=category,
                    department=department,
                    position=position,
                    subjects=[],
                    is_active=True,
                )
            )
        await session.flush()

        ledger = AttendanceLedger(session)
        workdays = [d for d in period.days() if d.weekday() < 5]
        marked = 0
        for employee_id, *_ in DEMO_EMPLOYEES:
            exceptions = ABSENCES.get(employee_id, {})
            for index, day in enumerate(workdays):
                status = exceptions.get(index, AttendanceStatus.PRESENT)
                overtime = OVERTIME.get(employee_id, Decimal("0"))
                await ledger.mark_attendance(
                    employee_id,
                    day,
                    status,
                    overtime_hours=overtime if status == AttendanceStatus.PRESENT else Decimal("0"),
                )
                marked += 1

    print(f"Seeded {len(DEMO_EMPLOYEES)} employees and {marked} attendance events for {period}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo payroll data")
    parser.add_argument("--database-url", type=str, help="Database URL (default: $DATABASE_URL)")
    parser.add_argument("--month", type=str, default="2024-06", help="Month to mark (YYYY-MM)")
    args = parser.parse_args()

    asyncio.run(seed(args.database_url, args.month))
    return 0


if __name__ == "__main__":
    sys.exit(main())
