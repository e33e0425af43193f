"""Payroll record state machine with transition validation."""

from __future__ import annotations

from enum import Enum


class PayrollStatus(str, Enum):
    """Payroll record status values."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = str(getattr(from_status, "value", from_status))
        self.to_status = str(getattr(to_status, "value", to_status))
        self.reason = reason
        msg = f"Invalid transition from '{self.from_status}' to '{self.to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayrollStateMachine:
    """State machine for payroll record status transitions.

    Allowed transitions:
    - draft → approved
    - approved → paid

    Paid is terminal; nothing skips draft.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.DRAFT: [PayrollStatus.APPROVED],
        PayrollStatus.APPROVED: [PayrollStatus.PAID],
        PayrollStatus.PAID: [],  # Terminal state
    }

    # Statuses whose figures have been signed off
    SIGNED_OFF = {
        PayrollStatus.APPROVED,
        PayrollStatus.PAID,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status, cls._explain(from_status))

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return status in cls.VALID_TRANSITIONS and not cls.VALID_TRANSITIONS[status]

    @classmethod
    def is_signed_off(cls, status: str) -> bool:
        """Approved or paid records whose regeneration changes signed-off figures."""
        return status in cls.SIGNED_OFF

    @classmethod
    def _explain(cls, from_status: str) -> str:
        if from_status not in cls.VALID_TRANSITIONS:
            return f"unknown status '{from_status}'"
        if cls.is_terminal(from_status):
            return f"'{PayrollStatus(from_status).value}' is terminal"
        allowed = ", ".join(PayrollStatus(s).value for s in cls.VALID_TRANSITIONS[from_status])
        return f"allowed next status: {allowed}"
