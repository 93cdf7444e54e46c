"""ValidationGate — gates a workflow-stage transition on a remote DoD check."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import structlog

from src.api.exceptions import ApiError
from src.core.config import GateConfig, get_settings
from src.core.types import (
    SYSTEM_VALIDATION_ERROR,
    GateState,
    ValidationError,
    ValidationResult,
)
from src.monitor.presentation import GateStyle, gate_style
from src.workflow.transitions import GateEvent, next_state, transition_title

logger = structlog.stdlib.get_logger()

PassCallback = Callable[[], Awaitable[None] | None]
FailCallback = Callable[[list[ValidationError]], Awaitable[None] | None]


class Validator(Protocol):
    """Anything that can answer a transition validation request."""

    async def validate(self, transition_type: str, record_id: str) -> ValidationResult: ...


class ValidationGate:
    """Tracks one subject's validation through hidden → checking → passed|failed.

    - ``passed`` returns to ``hidden`` after the success display window.
    - ``failed`` stays until dismissed, re-checked, or the subject changes.
    - Only the most recently issued request may update the gate; late
      responses for an older subject are discarded.

    Usage::

        gate = ValidationGate(client, "quote-to-proposal", "Q-100",
                              on_pass=enable_next_step)
        await gate.mount()
        ...
        await gate.set_subject("Q-101")
        ...
        await gate.close()
    """

    def __init__(
        self,
        validator: Validator,
        transition_type: str,
        record_id: str | None = None,
        *,
        enabled: bool = True,
        on_pass: PassCallback | None = None,
        on_fail: FailCallback | None = None,
        config: GateConfig | None = None,
    ) -> None:
        self._validator = validator
        self._transition_type = str(transition_type)
        self._record_id = record_id
        self._enabled = enabled
        self._on_pass = on_pass
        self._on_fail = on_fail
        self._config = config or get_settings().gate

        self._state = GateState.HIDDEN
        self._errors: list[ValidationError] = []
        self._dismissed = False
        self._generation = 0
        self._hide_task: asyncio.Task[None] | None = None
        self._closed = False

    # ── Properties ────────────────────────────────────────────────

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def errors(self) -> list[ValidationError]:
        """Errors from the latest completed check, in server order."""
        return list(self._errors)

    @property
    def dismissed(self) -> bool:
        return self._dismissed

    @property
    def visible(self) -> bool:
        """Whether the gate banner should render at all."""
        return self._state != GateState.HIDDEN and not self._dismissed

    @property
    def can_recheck(self) -> bool:
        return self._state == GateState.FAILED

    @property
    def title(self) -> str:
        return transition_title(self._transition_type)

    @property
    def style(self) -> GateStyle:
        return gate_style(self._state)

    @property
    def subject(self) -> tuple[str, str | None]:
        return self._transition_type, self._record_id

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── Lifecycle / inputs ───────────────────────────────────────

    async def mount(self) -> None:
        """Initial check for the current subject, if enabled."""
        await self._sync()

    async def set_subject(self, record_id: str | None, transition_type: str | None = None) -> None:
        """Point the gate at a new subject; unchanged subjects are a no-op."""
        new_type = str(transition_type) if transition_type is not None else self._transition_type
        if (new_type, record_id) == (self._transition_type, self._record_id):
            return
        self._transition_type = new_type
        self._record_id = record_id
        await self._sync()

    async def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        await self._sync()

    async def recheck(self) -> None:
        """User-triggered re-run after a failure.

        Ignored outside ``failed``, so a repeated click while the first
        re-check is in flight is a no-op. ``can_recheck`` is the UI hint.
        """
        if self._state != GateState.FAILED:
            logger.debug(
                "recheck_ignored",
                transition_type=self._transition_type,
                record_id=self._record_id,
                state=self._state.value,
            )
            return
        await self._check()

    def dismiss(self) -> None:
        """Hide the banner without touching the last known result."""
        self._dismissed = True

    async def close(self) -> None:
        """Teardown: cancel the hide timer and ignore any in-flight result."""
        self._closed = True
        self._generation += 1
        await self._cancel_hide(wait=True)

    # ── Internals ────────────────────────────────────────────────

    async def _sync(self) -> None:
        if self._closed:
            return
        if not self._enabled or not self._record_id:
            await self._reset()
            return
        await self._check()

    async def _reset(self) -> None:
        self._generation += 1
        await self._cancel_hide()
        self._errors = []
        self._dismissed = False
        self._advance(GateEvent.RESET)

    def _advance(self, event: GateEvent) -> None:
        previous = self._state
        self._state = next_state(previous, event)
        if previous != self._state:
            logger.debug(
                "validation_gate_transition",
                transition_type=self._transition_type,
                record_id=self._record_id,
                from_state=previous.value,
                to_state=self._state.value,
            )

    async def _check(self) -> None:
        record_id = self._record_id
        if not record_id or self._closed:
            return

        self._generation += 1
        token = self._generation
        transition_type = self._transition_type

        await self._cancel_hide()
        self._errors = []
        self._dismissed = False
        self._advance(GateEvent.CHECK_STARTED)

        result: ValidationResult | None
        try:
            result = await self._validator.validate(transition_type, record_id)
        except asyncio.CancelledError:
            raise
        except ApiError as exc:
            logger.warning(
                "validation_transport_error",
                transition_type=transition_type,
                record_id=record_id,
                error=str(exc),
            )
            result = None
        except Exception:
            logger.exception(
                "validation_transport_error",
                transition_type=transition_type,
                record_id=record_id,
            )
            result = None

        if token != self._generation:
            logger.debug(
                "stale_validation_discarded",
                transition_type=transition_type,
                record_id=record_id,
            )
            return

        if result is None:
            self._errors = [SYSTEM_VALIDATION_ERROR]
            self._advance(GateEvent.RESULT_INVALID)
            await self._invoke(self._on_fail, list(self._errors))
        elif result.valid:
            self._advance(GateEvent.RESULT_VALID)
            logger.info(
                "validation_passed",
                transition_type=transition_type,
                record_id=record_id,
            )
            self._hide_task = asyncio.create_task(self._hide_after_window(token))
            await self._invoke(self._on_pass)
        else:
            self._errors = list(result.errors)
            self._advance(GateEvent.RESULT_INVALID)
            logger.info(
                "validation_failed",
                transition_type=transition_type,
                record_id=record_id,
                error_count=len(self._errors),
            )
            await self._invoke(self._on_fail, list(self._errors))

    async def _hide_after_window(self, token: int) -> None:
        await asyncio.sleep(self._config.success_display_secs)
        if token == self._generation and self._state == GateState.PASSED:
            self._advance(GateEvent.SUCCESS_WINDOW_ELAPSED)

    async def _cancel_hide(self, wait: bool = False) -> None:
        task, self._hide_task = self._hide_task, None
        if task is None or task.done():
            return
        task.cancel()
        if wait:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _invoke(self, callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            result = callback(*args)
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            logger.exception(
                "validation_callback_error",
                transition_type=self._transition_type,
                record_id=self._record_id,
            )
