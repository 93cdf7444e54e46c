"""Workflow-stage validation — gate state machine and enforced transitions."""

from src.workflow.enforcement import enforce_transition
from src.workflow.exceptions import (
    InvalidTransitionError,
    TransitionBlockedError,
    WorkflowError,
)
from src.workflow.gate import ValidationGate, Validator
from src.workflow.transitions import (
    DEFAULT_TITLE,
    TRANSITION_TITLES,
    GateEvent,
    next_state,
    transition_title,
)

__all__ = [
    "DEFAULT_TITLE",
    "TRANSITION_TITLES",
    "GateEvent",
    "InvalidTransitionError",
    "TransitionBlockedError",
    "ValidationGate",
    "Validator",
    "WorkflowError",
    "enforce_transition",
    "next_state",
    "transition_title",
]
