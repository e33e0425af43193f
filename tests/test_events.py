"""Tests for payroll domain events.

Tests verify:
1. Event types are properly structured and serializable
2. Event emitter routes to correct handlers
3. Event batching holds delivery until the batch completes
4. Handler errors are isolated
"""

import json
from decimal import Decimal
from uuid import uuid4

import pytest

from campus_payroll.events import (
    EventCategory,
    EventEmitter,
    EventLog,
    EventMetadata,
    PayrollGenerationCompleted,
    PayrollRecordApproved,
    PayrollRecordGenerated,
    PayrollRecordPaid,
)


def generated(total: str = "100.00") -> PayrollRecordGenerated:
    return PayrollRecordGenerated(
        metadata=EventMetadata.create(),
        payroll_record_id=uuid4(),
        employee_id="lec-1",
        month="2024-06",
        total_salary=Decimal(total),
    )


def approved() -> PayrollRecordApproved:
    return PayrollRecordApproved(
        metadata=EventMetadata.create(actor="registrar"),
        payroll_record_id=uuid4(),
        employee_id="lec-1",
        month="2024-06",
        approved_by="registrar",
    )


class TestEventTypes:
    def test_metadata_auto_generates_fields(self):
        correlation_id = uuid4()
        meta = EventMetadata.create(correlation_id=correlation_id, actor="ops")

        assert meta.event_id is not None
        assert meta.timestamp.tzinfo is not None
        assert meta.correlation_id == correlation_id
        assert meta.actor == "ops"
        assert meta.source_service == "payroll"

    def test_categories(self):
        assert generated().category == EventCategory.GENERATION
        assert approved().category == EventCategory.LIFECYCLE

    def test_to_dict_serializes_values(self):
        event = generated("106363.62")
        data = event.to_dict()

        assert data["event_type"] == "PayrollRecordGenerated"
        assert data["total_salary"] == "106363.62"
        assert data["payroll_record_id"] == str(event.payroll_record_id)
        assert data["metadata"]["event_id"] == str(event.metadata.event_id)

    def test_to_json_round_trips_through_json(self):
        data = json.loads(approved().to_json())
        assert data["approved_by"] == "registrar"

    def test_events_are_immutable(self):
        event = generated()
        with pytest.raises(AttributeError):
            event.month = "2024-07"  # type: ignore[misc]


class TestEventEmitter:
    def test_routes_by_type(self):
        emitter = EventEmitter()
        received = []
        emitter.on(PayrollRecordApproved, received.append)

        emitter.emit(generated())
        emitter.emit(approved())

        assert [e.event_type for e in received] == ["PayrollRecordApproved"]

    def test_routes_by_category(self):
        emitter = EventEmitter()
        received = []
        emitter.on_category(EventCategory.LIFECYCLE, received.append)

        emitter.emit(generated())
        emitter.emit(approved())

        assert len(received) == 1

    def test_multiple_types_and_off(self):
        emitter = EventEmitter()
        received = []
        handler = received.append
        emitter.on([PayrollRecordApproved, PayrollRecordGenerated], handler)

        emitter.emit(generated())
        emitter.off(handler)
        emitter.emit(approved())

        assert len(received) == 1

    def test_failing_handler_is_isolated(self, caplog):
        emitter = EventEmitter()
        received = []

        def broken(event):
            raise RuntimeError("mail server down")

        emitter.on_all(broken)
        emitter.on_all(received.append)

        errors = emitter.emit(approved())

        assert len(received) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], RuntimeError)
        assert "failed for event PayrollRecordApproved" in caplog.text

    def test_batch_delivers_on_exit(self):
        emitter = EventEmitter()
        received = []
        emitter.on_all(received.append)

        with emitter.batch():
            emitter.emit(generated())
            emitter.emit(generated())
            assert received == []

        assert len(received) == 2

    def test_batch_discarded_on_exception(self):
        emitter = EventEmitter()
        received = []
        emitter.on_all(received.append)

        with pytest.raises(ValueError):
            with emitter.batch():
                emitter.emit(generated())
                raise ValueError("abort")

        assert received == []
        emitter.emit(generated())
        assert len(received) == 1


class TestEventLog:
    def test_keeps_most_recent(self):
        log = EventLog(max_events=2)
        first, second, third = generated("1"), generated("2"), generated("3")

        for event in (first, second, third):
            log(event)

        assert log.events == [second, third]

    def test_of_type_and_clear(self):
        log = EventLog()
        log(generated())
        log(approved())
        log(
            PayrollGenerationCompleted(
                metadata=EventMetadata.create(), month="2024-06", generated_count=1
            )
        )
        log(
            PayrollRecordPaid(
                metadata=EventMetadata.create(), payroll_record_id=uuid4(), month="2024-06"
            )
        )

        assert len(log.of_type(PayrollRecordApproved)) == 1
        assert log.of_type(PayrollGenerationCompleted)[0].generated_count == 1

        log.clear()
        assert log.events == []
