"""Pure validation-gate state machine and transition titles."""

from __future__ import annotations

from enum import StrEnum

from src.core.types import GateState, TransitionType
from src.workflow.exceptions import InvalidTransitionError

DEFAULT_TITLE = "Validation Check"

TRANSITION_TITLES: dict[TransitionType, str] = {
    TransitionType.QUOTE_TO_PROPOSAL: "Quote Validation for Proposal Creation",
    TransitionType.PROPOSAL_TO_CONTRACT: "Proposal Validation for Contract Generation",
    TransitionType.PO_TO_WAREHOUSE: "Purchase Order Validation for Warehouse Release",
    TransitionType.SERVICE_COMPLETION: "Service Ticket Validation for Completion",
}


class GateEvent(StrEnum):
    """Inputs that drive the validation gate."""

    CHECK_STARTED = "check_started"
    RESULT_VALID = "result_valid"
    RESULT_INVALID = "result_invalid"
    SUCCESS_WINDOW_ELAPSED = "success_window_elapsed"
    RESET = "reset"


# CHECK_STARTED is legal from every state: a subject change can arrive
# mid-flight or during the success window. RESET is handled separately.
_TRANSITIONS: dict[tuple[GateState, GateEvent], GateState] = {
    (GateState.HIDDEN, GateEvent.CHECK_STARTED): GateState.CHECKING,
    (GateState.CHECKING, GateEvent.CHECK_STARTED): GateState.CHECKING,
    (GateState.PASSED, GateEvent.CHECK_STARTED): GateState.CHECKING,
    (GateState.FAILED, GateEvent.CHECK_STARTED): GateState.CHECKING,
    (GateState.CHECKING, GateEvent.RESULT_VALID): GateState.PASSED,
    (GateState.CHECKING, GateEvent.RESULT_INVALID): GateState.FAILED,
    (GateState.PASSED, GateEvent.SUCCESS_WINDOW_ELAPSED): GateState.HIDDEN,
}


def next_state(state: GateState, event: GateEvent) -> GateState:
    """Return the state reached from *state* on *event*.

    Raises:
        InvalidTransitionError: the event is not legal in *state*.
    """
    if event == GateEvent.RESET:
        return GateState.HIDDEN
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransitionError(f"{event.value} not allowed in state {state.value}") from None


def transition_title(transition_type: str) -> str:
    """Human-readable gate title; unknown transitions get a generic title."""
    try:
        return TRANSITION_TITLES[TransitionType(transition_type)]
    except ValueError:
        return DEFAULT_TITLE
