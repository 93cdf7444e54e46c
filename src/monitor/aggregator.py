"""Alert aggregation — filtering, limiting, bell view and critical toasts."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import structlog
from pydantic import BaseModel, Field

from src.core.types import AlertBatch, AlertRecord, Severity
from src.monitor.dispatcher import ToastDispatcher
from src.monitor.types import Toast, ToastVariant

logger = structlog.get_logger(__name__)

PAGE_ALERT_LIMIT = 3
BELL_DISPLAY_CAP = 10
BELL_BADGE_MAX = 9


class AlertFilter(BaseModel):
    """Declarative filter for an alert view.

    Empty ``categories`` / ``severities`` and an unset ``page_key`` mean
    "no constraint". ``limit=None`` means unlimited.
    """

    categories: list[str] = Field(default_factory=list)
    severities: list[Severity] = Field(default_factory=list)
    page_key: str | None = None
    limit: int | None = Field(default=PAGE_ALERT_LIMIT, ge=0)


def dedupe_by_id(alerts: Iterable[AlertRecord]) -> list[AlertRecord]:
    """Drop repeated ids within one batch, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[AlertRecord] = []
    for alert in alerts:
        if alert.id in seen:
            logger.debug("duplicate_alert_dropped", alert_id=alert.id)
            continue
        seen.add(alert.id)
        unique.append(alert)
    return unique


def matches(alert: AlertRecord, spec: AlertFilter) -> bool:
    """Whether *alert* passes every active predicate of *spec*."""
    if spec.categories and alert.category not in spec.categories:
        return False
    # A record with no severity can never satisfy an active severity filter.
    if spec.severities and (alert.severity is None or alert.severity not in spec.severities):
        return False
    if spec.page_key is not None and alert.page != spec.page_key:
        return False
    return True


def aggregate(
    alerts: Sequence[AlertRecord],
    spec: AlertFilter | None = None,
) -> list[AlertRecord]:
    """Filter and truncate *alerts*, preserving fetch order.

    No re-sorting by urgency takes place; the first ``limit`` matches in
    original order are returned.
    """
    spec = spec or AlertFilter()
    selected = [a for a in dedupe_by_id(alerts) if matches(a, spec)]
    if spec.limit is not None:
        selected = selected[: spec.limit]
    return selected


# ── Views ───────────────────────────────────────────────────────


class PageAlertsView(BaseModel):
    """Inline alerts for one page. Invisible means render no UI at all."""

    alerts: list[AlertRecord] = Field(default_factory=list)

    @property
    def visible(self) -> bool:
        return len(self.alerts) > 0


def page_alerts(batch: AlertBatch | None, spec: AlertFilter | None = None) -> PageAlertsView:
    """Build the inline alert view for a page.

    Loading (no batch yet) and failed batches produce an invisible view,
    never an error or empty-state placeholder.
    """
    if batch is None or batch.failed:
        return PageAlertsView()
    return PageAlertsView(alerts=aggregate(batch.alerts, spec))


class BellView(BaseModel):
    """Notification-bell dropdown state."""

    unread_count: int = 0
    items: list[AlertRecord] = Field(default_factory=list)

    @property
    def badge_label(self) -> str | None:
        if self.unread_count == 0:
            return None
        if self.unread_count > BELL_BADGE_MAX:
            return f"{BELL_BADGE_MAX}+"
        return str(self.unread_count)

    @property
    def empty(self) -> bool:
        return self.unread_count == 0


def bell_view(batch: AlertBatch | None, cap: int = BELL_DISPLAY_CAP) -> BellView:
    """Unfiltered, unlimited alert list, capped at *cap* rows for display."""
    if batch is None:
        return BellView()
    alerts = aggregate(batch.alerts, AlertFilter(limit=None))
    return BellView(unread_count=len(alerts), items=alerts[:cap])


# ── Critical toasts ─────────────────────────────────────────────


class CriticalToastNotifier:
    """Raises at most one toast per novel alert batch.

    A batch containing any record with ``severity == critical`` or
    ``kind == error`` triggers a single toast built from the first such
    record. Observing the same batch again is a no-op, and so is a new
    poll whose alert content is unchanged from the last toasted batch.
    """

    def __init__(
        self,
        dispatcher: ToastDispatcher | None = None,
        title: str = "System Alert",
    ) -> None:
        self._dispatcher = dispatcher or ToastDispatcher()
        self._title = title
        self._last_sequence: int | None = None
        self._last_fingerprint: tuple[tuple[Any, ...], ...] | None = None
        self._fired = 0

    @property
    def fired_count(self) -> int:
        return self._fired

    async def observe(self, batch: AlertBatch) -> Toast | None:
        """Inspect *batch*; dispatch and return a toast if one is due."""
        if batch.sequence == self._last_sequence:
            return None
        self._last_sequence = batch.sequence

        # An outage carries no information about the alert set.
        if batch.failed:
            return None

        critical = next((a for a in batch.alerts if a.is_critical), None)
        if critical is None:
            self._last_fingerprint = None
            return None

        fingerprint = batch.fingerprint
        if fingerprint == self._last_fingerprint:
            logger.debug("critical_toast_suppressed", sequence=batch.sequence)
            return None
        self._last_fingerprint = fingerprint

        toast = Toast(
            title=self._title,
            description=critical.message,
            variant=ToastVariant.DESTRUCTIVE,
            alert_id=critical.id,
            batch_sequence=batch.sequence,
        )
        self._fired += 1
        logger.info(
            "critical_toast_raised",
            alert_id=critical.id,
            sequence=batch.sequence,
        )
        await self._dispatcher.send(toast)
        return toast
