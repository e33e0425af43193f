"""Domain event types for payroll operations.

All events are:
- Immutable (frozen dataclasses)
- Typed with explicit payloads
- Serializable for notification feeds and audit export
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class EventCategory(str, Enum):
    """Event categories for routing and filtering."""

    GENERATION = "generation"
    LIFECYCLE = "lifecycle"


@dataclass(frozen=True)
class EventMetadata:
    """Metadata attached to every domain event."""

    event_id: UUID
    timestamp: datetime
    correlation_id: UUID  # Links events of one generation run
    actor: str | None
    source_service: str = "payroll"

    @classmethod
    def create(
        cls,
        correlation_id: UUID | None = None,
        actor: str | None = None,
        timestamp: datetime | None = None,
    ) -> EventMetadata:
        """Create metadata with auto-generated fields."""
        return cls(
            event_id=uuid4(),
            timestamp=timestamp or datetime.now(timezone.utc),
            correlation_id=correlation_id or uuid4(),
            actor=actor,
        )


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    metadata: EventMetadata

    @property
    def event_type(self) -> str:
        """Event type name for routing."""
        return self.__class__.__name__

    @property
    def category(self) -> EventCategory:
        """Event category for filtering."""
        raise NotImplementedError("Subclasses must define category")

    def to_dict(self) -> dict[str, Any]:
        """Serialize event to dictionary."""
        data = _serialize_dict(asdict(self))
        data["event_type"] = self.event_type
        return data

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        return json.dumps(self.to_dict(), default=str)


def _serialize_dict(obj: Any) -> Any:
    """Recursively serialize objects for JSON compatibility."""
    if isinstance(obj, dict):
        return {k: _serialize_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_serialize_dict(v) for v in obj]
    elif isinstance(obj, UUID):
        return str(obj)
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif isinstance(obj, Decimal):
        return str(obj)
    elif isinstance(obj, Enum):
        return obj.value
    return obj


# =============================================================================
# Generation Events
# =============================================================================


@dataclass(frozen=True)
class PayrollRecordGenerated(DomainEvent):
    """A payroll record was computed and upserted."""

    payroll_record_id: UUID = field(default_factory=uuid4)
    employee_id: str = ""
    month: str = ""
    total_salary: Decimal = Decimal("0")
    status: str = "draft"

    @property
    def category(self) -> EventCategory:
        return EventCategory.GENERATION


@dataclass(frozen=True)
class PayrollGenerationFailed(DomainEvent):
    """One employee's record could not be generated."""

    employee_id: str = ""
    month: str = ""
    error_type: str = ""
    message: str = ""

    @property
    def category(self) -> EventCategory:
        return EventCategory.GENERATION


@dataclass(frozen=True)
class PayrollGenerationCompleted(DomainEvent):
    """A generation pass over the roster finished."""

    month: str = ""
    generated_count: int = 0
    failed_count: int = 0

    @property
    def category(self) -> EventCategory:
        return EventCategory.GENERATION


# =============================================================================
# Lifecycle Events
# =============================================================================


@dataclass(frozen=True)
class PayrollRecordApproved(DomainEvent):
    """A draft record was approved."""

    payroll_record_id: UUID = field(default_factory=uuid4)
    employee_id: str = ""
    month: str = ""
    approved_by: str = ""

    @property
    def category(self) -> EventCategory:
        return EventCategory.LIFECYCLE


@dataclass(frozen=True)
class PayrollRecordPaid(DomainEvent):
    """An approved record was marked paid."""

    payroll_record_id: UUID = field(default_factory=uuid4)
    employee_id: str = ""
    month: str = ""
    total_salary: Decimal = Decimal("0")

    @property
    def category(self) -> EventCategory:
        return EventCategory.LIFECYCLE
