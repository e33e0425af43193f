"""Payroll lifecycle manager - orchestrates generation and approval."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from campus_payroll.calculators.engine import PayrollCalculator
from campus_payroll.calculators.periods import PayrollMonth
from campus_payroll.calculators.salary_resolver import SalaryResolver
from campus_payroll.calculators.types import EmployeeProfile, PayrollValidationError
from campus_payroll.config import Settings, get_settings
from campus_payroll.events import (
    EventEmitter,
    EventMetadata,
    PayrollGenerationCompleted,
    PayrollGenerationFailed,
    PayrollRecordApproved,
    PayrollRecordGenerated,
    PayrollRecordPaid,
)
from campus_payroll.models import PayrollRecord
from campus_payroll.services.attendance_ledger import AttendanceLedger
from campus_payroll.services.directory import EmployeeDirectory
from campus_payroll.services.payroll_store import (
    MonthSummary,
    PayrollRecordNotFoundError,
    PayrollStore,
)
from campus_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollStateMachine,
    PayrollStatus,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GenerationFailure:
    """One employee whose record could not be generated."""

    employee_id: str
    error_type: str
    message: str


@dataclass
class GenerationResult:
    """Outcome of a generation pass over the roster."""

    month: str
    records: list[PayrollRecord] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)
    correlation_id: UUID = field(default_factory=uuid4)

    @property
    def success(self) -> bool:
        return not self.failures


class PayrollLifecycleManager:
    """Service for generating payroll records and moving them through approval.

    Operations:
    - generate_monthly_payroll: compute and upsert every active employee's record
    - generate_for_employee: retry a single employee
    - approve: draft → approved, stamping approver and time
    - mark_paid: approved → paid, stamping payment time
    """

    def __init__(
        self,
        session: AsyncSession,
        resolver: SalaryResolver | None = None,
        calculator: PayrollCalculator | None = None,
        emitter: EventEmitter | None = None,
        clock: Callable[[], datetime] = _utcnow,
        settings: Settings | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.clock = clock
        self.directory = EmployeeDirectory(session)
        self.ledger = AttendanceLedger(session)
        self.store = PayrollStore(session)
        self.resolver = resolver or SalaryResolver(today=lambda: clock().date())
        self.calculator = calculator or PayrollCalculator(
            clock=clock, engine_version=self.settings.engine_version
        )
        self.emitter = emitter or EventEmitter()

    # === Generation ===

    async def generate_monthly_payroll(self, month: str) -> GenerationResult:
        """Generate (or regenerate) payroll records for all active employees.

        Each employee is computed and upserted inside its own savepoint.
        A failure is logged, reported in ``GenerationResult.failures`` and
        the pass moves on to the next employee.

        Raises:
            PayrollValidationError: If month is malformed
        """
        period = PayrollMonth.parse(month)
        month = str(period)
        result = GenerationResult(month=month)

        employees = await self.directory.list_active_employees()
        logger.info("Generating payroll for %s: %d employee(s)", month, len(employees))

        with self.emitter.batch():
            for employee in employees:
                try:
                    async with self.session.begin_nested():
                        record = await self._generate_one(employee, period)
                except Exception as e:
                    logger.exception(
                        "Payroll generation failed for employee %s in %s",
                        employee.employee_id,
                        month,
                    )
                    failure = GenerationFailure(
                        employee_id=employee.employee_id,
                        error_type=type(e).__name__,
                        message=str(e),
                    )
                    result.failures.append(failure)
                    self.emitter.emit(
                        PayrollGenerationFailed(
                            metadata=self._metadata(result.correlation_id),
                            employee_id=employee.employee_id,
                            month=month,
                            error_type=failure.error_type,
                            message=failure.message,
                        )
                    )
                    continue

                result.records.append(record)
                self._emit_generated(record, result.correlation_id)

            self.emitter.emit(
                PayrollGenerationCompleted(
                    metadata=self._metadata(result.correlation_id),
                    month=month,
                    generated_count=len(result.records),
                    failed_count=len(result.failures),
                )
            )

        logger.info(
            "Payroll generation for %s completed: %d generated, %d failed",
            month,
            len(result.records),
            len(result.failures),
        )
        return result

    async def generate_for_employee(self, employee_id: str, month: str) -> PayrollRecord:
        """Generate one employee's record, e.g. to retry a failure.

        Raises:
            EmployeeNotFoundError: If the employee is unknown or inactive
            PayrollValidationError: If inputs are invalid
        """
        period = PayrollMonth.parse(month)
        employee = await self.directory.get_active_employee(employee_id)

        async with self.session.begin_nested():
            record = await self._generate_one(employee, period)

        self._emit_generated(record, uuid4())
        return record

    async def _generate_one(
        self, employee: EmployeeProfile, period: PayrollMonth
    ) -> PayrollRecord:
        month = str(period)
        stored = await self.directory.get_salary_configuration(employee.employee_id)
        configuration = self.resolver.resolve_configuration(
            employee, stored, effective_date=period.first_day
        )
        if configuration.is_default:
            logger.debug(
                "No salary configuration for %s; using default %s",
                employee.employee_id,
                configuration.basic_salary,
            )

        events = await self.ledger.get_events(employee.employee_id, month)
        computation = self.calculator.compute_month(employee, configuration, events, month)

        record = await self.store.upsert_record(
            employee.employee_id,
            month,
            computation.to_record_fields(),
            only_draft=self.settings.lock_approved_records,
        )

        if PayrollStateMachine.is_signed_off(record.status):
            if self.settings.lock_approved_records:
                logger.info(
                    "Kept %s payroll for %s in %s unchanged",
                    record.status,
                    employee.employee_id,
                    month,
                )
            else:
                logger.warning(
                    "Recomputed %s payroll for %s in %s; signed-off figures may have changed",
                    record.status,
                    employee.employee_id,
                    month,
                )
        return record

    # === Lifecycle ===

    async def approve(self, record_id: UUID, approved_by: str) -> PayrollRecord:
        """Approve a draft record.

        Raises:
            PayrollRecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is not in draft
        """
        if not approved_by or not approved_by.strip():
            raise PayrollValidationError("Approver identity is required", "approved_by")

        now = self.clock()
        record = await self._transition(
            record_id,
            PayrollStatus.DRAFT,
            PayrollStatus.APPROVED,
            {"approved_by": approved_by, "approved_at": now},
            actor=approved_by,
        )
        self.emitter.emit(
            PayrollRecordApproved(
                metadata=self._metadata(actor=approved_by),
                payroll_record_id=record.payroll_record_id,
                employee_id=record.employee_id,
                month=record.month,
                approved_by=approved_by,
            )
        )
        return record

    async def mark_paid(self, record_id: UUID, actor: str | None = None) -> PayrollRecord:
        """Mark an approved record as paid.

        Raises:
            PayrollRecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is not approved
        """
        now = self.clock()
        record = await self._transition(
            record_id,
            PayrollStatus.APPROVED,
            PayrollStatus.PAID,
            {"paid_at": now},
            actor=actor,
        )
        self.emitter.emit(
            PayrollRecordPaid(
                metadata=self._metadata(actor=actor),
                payroll_record_id=record.payroll_record_id,
                employee_id=record.employee_id,
                month=record.month,
                total_salary=record.total_salary,
            )
        )
        return record

    async def _transition(
        self,
        record_id: UUID,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        values: dict,
        actor: str | None,
    ) -> PayrollRecord:
        record = await self.store.get_record(record_id)
        if record is None:
            raise PayrollRecordNotFoundError(record_id)

        PayrollStateMachine.validate_transition(record.status, to_status)

        updated = await self.store.update_status(record_id, from_status, to_status, values)
        if not updated:
            # Status changed between the read and the conditional update
            current = await self.store.get_record(record_id)
            current_status = current.status if current is not None else "missing"
            raise InvalidTransitionError(
                current_status, to_status, "status changed concurrently"
            )

        record = await self.store.get_record(record_id)
        assert record is not None
        await self.store.record_audit(
            record,
            action=f"status_change:{from_status.value}:{to_status.value}",
            actor=actor,
            details={"total_salary": str(record.total_salary)},
            occurred_at=values.get("approved_at") or values.get("paid_at"),
        )
        logger.info(
            "Payroll record %s (%s, %s) moved %s -> %s",
            record_id,
            record.employee_id,
            record.month,
            from_status.value,
            to_status.value,
        )
        return record

    # === Queries ===

    async def get_record(self, record_id: UUID) -> PayrollRecord:
        record = await self.store.get_record(record_id)
        if record is None:
            raise PayrollRecordNotFoundError(record_id)
        return record

    async def list_month(
        self, month: str, status: PayrollStatus | str | None = None
    ) -> list[PayrollRecord]:
        period = PayrollMonth.parse(month)
        return await self.store.list_records_for_month(str(period), status)

    async def summarize_month(self, month: str) -> MonthSummary:
        """Draft/approved/paid counts and payout totals for the dashboard."""
        return await self.store.summarize_month(str(PayrollMonth.parse(month)))

    def _emit_generated(self, record: PayrollRecord, correlation_id: UUID) -> None:
        self.emitter.emit(
            PayrollRecordGenerated(
                metadata=self._metadata(correlation_id),
                payroll_record_id=record.payroll_record_id,
                employee_id=record.employee_id,
                month=record.month,
                total_salary=record.total_salary,
                status=record.status,
            )
        )

    def _metadata(
        self, correlation_id: UUID | None = None, actor: str | None = None
    ) -> EventMetadata:
        return EventMetadata.create(
            correlation_id=correlation_id, actor=actor, timestamp=self.clock()
        )
