"""Payroll domain events package.

This package provides:
- Typed domain events for generation and lifecycle operations
- Event emitter for publishing events to notification handlers
"""

from campus_payroll.events.emitter import EventBatch, EventEmitter, EventHandler, EventLog
from campus_payroll.events.types import (
    DomainEvent,
    EventCategory,
    EventMetadata,
    PayrollGenerationCompleted,
    PayrollGenerationFailed,
    PayrollRecordApproved,
    PayrollRecordGenerated,
    PayrollRecordPaid,
)

__all__ = [
    "DomainEvent",
    "EventBatch",
    "EventCategory",
    "EventEmitter",
    "EventHandler",
    "EventLog",
    "EventMetadata",
    "PayrollGenerationCompleted",
    "PayrollGenerationFailed",
    "PayrollRecordApproved",
    "PayrollRecordGenerated",
    "PayrollRecordPaid",
]
