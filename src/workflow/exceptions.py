"""Workflow validation exceptions."""

from __future__ import annotations

from src.core.types import ValidationError


class WorkflowError(Exception):
    """Base exception for workflow validation errors."""


class InvalidTransitionError(WorkflowError):
    """A gate event is not legal in the gate's current state."""


class TransitionBlockedError(WorkflowError):
    """A workflow-stage transition failed its Definition-of-Done check."""

    def __init__(self, transition_type: str, errors: list[ValidationError]) -> None:
        count = len(errors)
        super().__init__(
            f"{transition_type} blocked: {count} issue{'s' if count != 1 else ''} found"
        )
        self.transition_type = transition_type
        self.errors = errors
