"""Validate-then-proceed guard for workflow actions (DoD enforcement)."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from src.api.exceptions import ApiError
from src.core.types import SYSTEM_VALIDATION_ERROR
from src.workflow.exceptions import TransitionBlockedError
from src.workflow.gate import Validator

logger = structlog.stdlib.get_logger()

T = TypeVar("T")


async def enforce_transition(
    validator: Validator,
    transition_type: str,
    record_id: str | None,
    proceed: Callable[[], Awaitable[T] | T],
) -> T:
    """Run *proceed* only if *record_id* passes its transition check.

    A missing record id means there is nothing to validate yet (e.g. a
    record being created), so *proceed* runs directly.

    Raises:
        TransitionBlockedError: the check failed; ``errors`` holds the
            remediation items, or the synthetic system error when the
            validator could not be reached.
    """
    if record_id:
        try:
            result = await validator.validate(str(transition_type), record_id)
        except ApiError as exc:
            logger.warning(
                "validation_transport_error",
                transition_type=str(transition_type),
                record_id=record_id,
                error=str(exc),
            )
            raise TransitionBlockedError(str(transition_type), [SYSTEM_VALIDATION_ERROR]) from exc

        if not result.valid:
            logger.info(
                "transition_blocked",
                transition_type=str(transition_type),
                record_id=record_id,
                error_count=len(result.errors),
            )
            raise TransitionBlockedError(str(transition_type), list(result.errors))

    outcome = proceed()
    if asyncio.iscoroutine(outcome):
        return await outcome
    return outcome  # type: ignore[return-value]
