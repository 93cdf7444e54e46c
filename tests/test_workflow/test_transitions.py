"""Tests for the gate state machine and transition titles."""

from __future__ import annotations

import pytest

from src.core.types import GateState, TransitionType
from src.workflow.exceptions import InvalidTransitionError
from src.workflow.transitions import DEFAULT_TITLE, GateEvent, next_state, transition_title


class TestNextState:
    @pytest.mark.parametrize("state", list(GateState))
    def test_check_started_from_any_state(self, state: GateState) -> None:
        assert next_state(state, GateEvent.CHECK_STARTED) == GateState.CHECKING

    @pytest.mark.parametrize("state", list(GateState))
    def test_reset_from_any_state(self, state: GateState) -> None:
        assert next_state(state, GateEvent.RESET) == GateState.HIDDEN

    def test_checking_results(self) -> None:
        assert next_state(GateState.CHECKING, GateEvent.RESULT_VALID) == GateState.PASSED
        assert next_state(GateState.CHECKING, GateEvent.RESULT_INVALID) == GateState.FAILED

    def test_success_window_hides_passed(self) -> None:
        assert next_state(GateState.PASSED, GateEvent.SUCCESS_WINDOW_ELAPSED) == GateState.HIDDEN

    def test_failed_never_auto_hides(self) -> None:
        with pytest.raises(InvalidTransitionError):
            next_state(GateState.FAILED, GateEvent.SUCCESS_WINDOW_ELAPSED)

    def test_result_without_check_rejected(self) -> None:
        with pytest.raises(InvalidTransitionError, match="not allowed"):
            next_state(GateState.HIDDEN, GateEvent.RESULT_VALID)


class TestTransitionTitle:
    def test_known_titles(self) -> None:
        assert transition_title("quote-to-proposal") == "Quote Validation for Proposal Creation"
        assert transition_title(TransitionType.SERVICE_COMPLETION) == "Service Ticket Validation for Completion"

    def test_unknown_transition_gets_generic_title(self) -> None:
        assert transition_title("lead-to-quote") == DEFAULT_TITLE
        assert DEFAULT_TITLE == "Validation Check"
