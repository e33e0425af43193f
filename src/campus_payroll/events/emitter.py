"""Event emitter for publishing payroll domain events.

The emitter provides:
- Handler registration with type or category filtering
- Error isolation (handler failures don't break other handlers)
- Event batching so a generation run publishes only once it completes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from campus_payroll.events.types import DomainEvent, EventCategory

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DomainEvent)

EventHandler = Callable[[DomainEvent], None]


@dataclass
class HandlerRegistration:
    """Registration of an event handler."""

    handler: EventHandler
    event_types: set[str] | None  # None = all events
    categories: set[EventCategory] | None  # None = all categories


class EventEmitter:
    """Synchronous event emitter.

    Publishes events to registered handlers. Handlers are isolated -
    if one fails, others still receive the event and the payroll
    operation that emitted it is unaffected.

    Usage:
        emitter = EventEmitter()
        emitter.on(PayrollRecordApproved, notify_employee)
        emitter.on_category(EventCategory.GENERATION, update_dashboard)

        with emitter.batch():
            emitter.emit(event1)
            emitter.emit(event2)
        # Both delivered when the context exits cleanly
    """

    def __init__(self) -> None:
        self._handlers: list[HandlerRegistration] = []
        self._batching = False
        self._batch: list[DomainEvent] = []

    def on(
        self,
        event_type: type[T] | list[type[T]],
        handler: EventHandler,
    ) -> None:
        """Register handler for specific event type(s)."""
        if isinstance(event_type, list):
            types = {t.__name__ for t in event_type}
        else:
            types = {event_type.__name__}

        self._handlers.append(
            HandlerRegistration(handler=handler, event_types=types, categories=None)
        )

    def on_category(
        self,
        category: EventCategory | list[EventCategory],
        handler: EventHandler,
    ) -> None:
        """Register handler for event category(ies)."""
        cats = set(category) if isinstance(category, list) else {category}
        self._handlers.append(
            HandlerRegistration(handler=handler, event_types=None, categories=cats)
        )

    def on_all(self, handler: EventHandler) -> None:
        """Register handler for all events."""
        self._handlers.append(
            HandlerRegistration(handler=handler, event_types=None, categories=None)
        )

    def off(self, handler: EventHandler) -> None:
        """Unregister a handler."""
        self._handlers = [reg for reg in self._handlers if reg.handler is not handler]

    def emit(self, event: DomainEvent) -> list[Exception]:
        """Emit an event to all matching handlers.

        Returns list of any exceptions raised by handlers.
        """
        if self._batching:
            self._batch.append(event)
            return []

        return self._dispatch(event)

    def _dispatch(self, event: DomainEvent) -> list[Exception]:
        errors: list[Exception] = []
        event_type = event.event_type
        event_category = event.category

        for reg in self._handlers:
            if reg.event_types and event_type not in reg.event_types:
                continue
            if reg.categories and event_category not in reg.categories:
                continue

            try:
                reg.handler(event)
            except Exception as e:
                logger.exception(
                    "Handler %s failed for event %s",
                    reg.handler,
                    event_type,
                )
                errors.append(e)

        return errors

    def batch(self) -> EventBatch:
        """Create a batch context for collecting events."""
        return EventBatch(self)

    def _start_batch(self) -> None:
        self._batching = True
        self._batch = []

    def _end_batch(self) -> list[Exception]:
        self._batching = False
        events = self._batch
        self._batch = []

        errors: list[Exception] = []
        for event in events:
            errors.extend(self._dispatch(event))
        return errors


class EventBatch:
    """Context manager for batching events."""

    def __init__(self, emitter: EventEmitter) -> None:
        self._emitter = emitter
        self._errors: list[Exception] = []

    def __enter__(self) -> EventBatch:
        self._emitter._start_batch()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            self._errors = self._emitter._end_batch()
        else:
            # Exception occurred - discard batch
            self._emitter._batching = False
            self._emitter._batch = []

    def add(self, event: DomainEvent) -> None:
        """Add event to batch."""
        self._emitter.emit(event)

    @property
    def errors(self) -> list[Exception]:
        """Errors from handler execution (available after context exits)."""
        return self._errors


class EventLog:
    """Handler that keeps emitted events in memory, newest last.

    Backs the notification feed in the API and is convenient in tests.
    """

    def __init__(self, max_events: int = 1000) -> None:
        self.max_events = max_events
        self.events: list[DomainEvent] = []

    def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)
        if len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

    def of_type(self, event_type: type[T]) -> list[T]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()
