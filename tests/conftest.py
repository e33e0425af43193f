"""Pytest fixtures for campus payroll tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from campus_payroll.calculators.periods import PayrollMonth
from campus_payroll.calculators.types import AttendanceStatus
from campus_payroll.config import Settings
from campus_payroll.database import create_engine, create_schema, create_session_factory
from campus_payroll.events import EventEmitter, EventLog
from campus_payroll.models import Employee
from campus_payroll.services import AttendanceLedger, PayrollLifecycleManager

# In-memory SQLite, one database per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2024, 7, 1, 9, 30, tzinfo=timezone.utc)

ROSTER = [
    # (employee_id, code, name, category, department, position, is_active)
    ("lec-cs", "L001", "Ama Mensah", "lecturer", "Computer Science", None, True),
    ("lec-phil", "L002", "Efua Owusu", "lecturer", "Philosophy", None, True),
    ("stf-coord", "S001", "Akosua Darko", "staff", "Registry", "Coordinator", True),
    ("stf-none", "S002", "Kofi Adjei", "staff", "Facilities", None, True),
    ("stf-gone", "S003", "Yaw Asante", "staff", "Administration", "Manager", False),
]

ACTIVE_IDS = sorted(row[0] for row in ROSTER if row[6])


def naive(value: datetime) -> datetime:
    """SQLite returns timestamps without tzinfo."""
    return value.replace(tzinfo=None)


def workdays(month: str) -> list[date]:
    return [d for d in PayrollMonth.parse(month).days() if d.weekday() < 5]


async def add_roster(session: AsyncSession) -> dict[str, Employee]:
    employees = {}
    for employee_id, code, name, category, department, position, active in ROSTER:
        employees[employee_id] = Employee(
            employee_id=employee_id,
            display_code=code,
            name=name,
            category=category,
            department=department,
            position=position,
            subjects=["Ethics"] if employee_id == "lec-phil" else [],
            is_active=active,
        )
    session.add_all(employees.values())
    await session.flush()
    return employees


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with schema."""
    engine = create_engine(TEST_DATABASE_URL)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def roster(session: AsyncSession) -> dict[str, Employee]:
    """Four active employees and one inactive one."""
    return await add_roster(session)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        engine_version="test-1.0",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
        lock_approved_records=False,
    )


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def emitter(event_log: EventLog) -> EventEmitter:
    emitter = EventEmitter()
    emitter.on_all(event_log)
    return emitter


@pytest.fixture
def manager(
    session: AsyncSession,
    roster: dict[str, Employee],
    emitter: EventEmitter,
    clock: Callable[[], datetime],
    settings: Settings,
) -> PayrollLifecycleManager:
    return PayrollLifecycleManager(session, emitter=emitter, clock=clock, settings=settings)


MarkMonth = Callable[..., Awaitable[None]]


@pytest.fixture
def mark_month(session: AsyncSession) -> MarkMonth:
    """Mark an employee's workdays; the first ``present`` are present, the rest absent."""

    async def mark(
        employee_id: str,
        month: str,
        present: int,
        absent_status: AttendanceStatus = AttendanceStatus.ABSENT,
        overtime_hours: Decimal = Decimal("0"),
    ) -> None:
        ledger = AttendanceLedger(session)
        for index, day in enumerate(workdays(month)):
            status = AttendanceStatus.PRESENT if index < present else absent_status
            await ledger.mark_attendance(
                employee_id,
                day,
                status,
                overtime_hours=overtime_hours if index == 0 else Decimal("0"),
            )

    return mark
