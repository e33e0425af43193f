"""Tests for payroll record state machine."""

import pytest

from campus_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollStateMachine,
    PayrollStatus,
)


class TestPayrollStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        assert PayrollStateMachine.can_transition("draft", "approved") is True
        assert PayrollStateMachine.can_transition("approved", "paid") is True

    def test_invalid_transitions(self):
        # Can't skip approval
        assert PayrollStateMachine.can_transition("draft", "paid") is False

        # Can't go backwards
        assert PayrollStateMachine.can_transition("approved", "draft") is False
        assert PayrollStateMachine.can_transition("paid", "approved") is False

        # No self transitions
        assert PayrollStateMachine.can_transition("approved", "approved") is False

        # Paid is terminal
        assert PayrollStateMachine.can_transition("paid", "draft") is False

    def test_enum_and_string_forms_agree(self):
        assert PayrollStateMachine.can_transition(PayrollStatus.DRAFT, "approved") is True
        assert PayrollStateMachine.can_transition("approved", PayrollStatus.PAID) is True

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollStateMachine.validate_transition("draft", PayrollStatus.PAID)

        assert exc_info.value.from_status == "draft"
        assert exc_info.value.to_status == "paid"
        assert "allowed next status: approved" in str(exc_info.value)

    def test_terminal_reason(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollStateMachine.validate_transition("paid", "approved")

        assert exc_info.value.reason == "'paid' is terminal"

    def test_unknown_status(self):
        assert PayrollStateMachine.can_transition("voided", "paid") is False
        with pytest.raises(InvalidTransitionError, match="unknown status"):
            PayrollStateMachine.validate_transition("voided", "paid")

    def test_get_next_statuses(self):
        assert PayrollStateMachine.get_next_statuses("draft") == [PayrollStatus.APPROVED]
        assert PayrollStateMachine.get_next_statuses("paid") == []

    def test_terminal_and_signed_off(self):
        assert PayrollStateMachine.is_terminal("paid") is True
        assert PayrollStateMachine.is_terminal("approved") is False
        assert PayrollStateMachine.is_signed_off("draft") is False
        assert PayrollStateMachine.is_signed_off("approved") is True
        assert PayrollStateMachine.is_signed_off("paid") is True
