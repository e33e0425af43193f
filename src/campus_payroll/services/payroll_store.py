"""Durable payroll record store keyed by (employee, month)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from campus_payroll.models import (
    COMPUTED_FIELDS,
    AuditEvent,
    PayrollRecord,
    payroll_record_id,
    utcnow,
)
from campus_payroll.services.state_machine import PayrollStatus


class PayrollRecordNotFoundError(Exception):
    """Raised when a payroll record does not exist."""

    def __init__(self, record_id: UUID | str):
        self.record_id = record_id
        super().__init__(f"Payroll record {record_id} not found")


@dataclass
class MonthSummary:
    """Status counts and payout totals for one month."""

    month: str
    counts: dict[str, int] = field(default_factory=dict)
    total_payout: Decimal = Decimal("0")
    paid_total: Decimal = Decimal("0")

    @property
    def record_count(self) -> int:
        return sum(self.counts.values())


class PayrollStore:
    """Payroll record persistence.

    Key invariants:
    1. One record per (employee_id, month), enforced by a unique constraint
    2. Upserts write only the computed fields; status and approval/payment
       stamps are never part of an upsert
    3. Status changes are compare-and-set on the current status
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self) -> Any:
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(PayrollRecord)
        if dialect == "sqlite":
            return sqlite.insert(PayrollRecord)
        raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

    async def upsert_record(
        self,
        employee_id: str,
        month: str,
        fields: dict[str, Any],
        only_draft: bool = False,
    ) -> PayrollRecord:
        """Insert a draft record or merge computed fields into the existing one.

        With ``only_draft`` the merge is skipped for records that have moved
        past draft; the existing record is returned unchanged.
        """
        unknown = set(fields) - set(COMPUTED_FIELDS)
        if unknown:
            raise ValueError(f"Non-computed fields in upsert: {sorted(unknown)}")

        record_id = payroll_record_id(employee_id, month)
        now = utcnow()

        stmt = self._insert().values(
            payroll_record_id=record_id,
            employee_id=employee_id,
            month=month,
            status=PayrollStatus.DRAFT.value,
            created_at=now,
            updated_at=now,
            **fields,
        )
        set_ = {name: stmt.excluded[name] for name in fields}
        set_["updated_at"] = now
        conflict_kwargs: dict[str, Any] = {
            "index_elements": ["employee_id", "month"],
            "set_": set_,
        }
        if only_draft:
            conflict_kwargs["where"] = PayrollRecord.status == PayrollStatus.DRAFT.value
        stmt = stmt.on_conflict_do_update(**conflict_kwargs)

        await self.session.execute(stmt)

        record = await self.get_record_for(employee_id, month)
        if record is None:
            raise PayrollRecordNotFoundError(record_id)
        return record

    async def get_record(self, record_id: UUID) -> PayrollRecord | None:
        """Load a record by id, refreshing any stale identity-map copy."""
        result = await self.session.execute(
            select(PayrollRecord)
            .where(PayrollRecord.payroll_record_id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_record_for(self, employee_id: str, month: str) -> PayrollRecord | None:
        return await self.get_record(payroll_record_id(employee_id, month))

    async def list_records_for_month(
        self, month: str, status: PayrollStatus | str | None = None
    ) -> list[PayrollRecord]:
        """Records for a month, most recently generated first."""
        query = select(PayrollRecord).where(PayrollRecord.month == month)
        if status is not None:
            query = query.where(PayrollRecord.status == PayrollStatus(status).value)
        query = query.order_by(
            PayrollRecord.generated_at.desc(), PayrollRecord.employee_id
        ).execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update_status(
        self,
        record_id: UUID,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        values: dict[str, Any] | None = None,
    ) -> bool:
        """Compare-and-set transition.

        Returns False when the record is not currently in ``from_status``
        (missing, already moved, or a concurrent writer won).
        """
        result = await self.session.execute(
            update(PayrollRecord)
            .where(
                PayrollRecord.payroll_record_id == record_id,
                PayrollRecord.status == PayrollStatus(from_status).value,
            )
            .values(
                status=PayrollStatus(to_status).value,
                updated_at=utcnow(),
                **(values or {}),
            )
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0

    async def summarize_month(self, month: str) -> MonthSummary:
        """Counts per status and payout totals for the month's dashboard."""
        result = await self.session.execute(
            select(
                PayrollRecord.status,
                func.count(),
                func.coalesce(func.sum(PayrollRecord.total_salary), 0),
            )
            .where(PayrollRecord.month == month)
            .group_by(PayrollRecord.status)
        )

        summary = MonthSummary(
            month=month,
            counts={status.value: 0 for status in PayrollStatus},
        )
        for status, count, total in result.all():
            total = Decimal(str(total)).quantize(Decimal("0.01"))
            summary.counts[status] = count
            summary.total_payout += total
            if status == PayrollStatus.PAID.value:
                summary.paid_total += total
        return summary

    async def record_audit(
        self,
        record: PayrollRecord,
        action: str,
        actor: str | None = None,
        details: dict[str, Any] | None = None,
        occurred_at: datetime | None = None,
    ) -> AuditEvent:
        """Append an audit event for a payroll record action."""
        event = AuditEvent(
            entity_type="payroll_record",
            entity_id=str(record.payroll_record_id),
            action=action,
            actor=actor,
            details_json=details,
            created_at=occurred_at or utcnow(),
        )
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_audit_events(self, record_id: UUID) -> list[AuditEvent]:
        result = await self.session.execute(
            select(AuditEvent)
            .where(
                AuditEvent.entity_type == "payroll_record",
                AuditEvent.entity_id == str(record_id),
            )
            .order_by(AuditEvent.created_at)
        )
        return list(result.scalars().all())
