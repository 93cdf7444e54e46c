"""Breach/SLA board — active-set filtering, severity styling, drill-through."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import TracebackType

import structlog
from pydantic import BaseModel, Field

from src.core.types import BreachMetric, BreachSnapshot, BreachSummary, Severity
from src.feeds.breaches import BreachFeed
from src.monitor.presentation import (
    BadgeVariant,
    Tone,
    severity_badge,
    severity_rank,
    severity_tone,
)

logger = structlog.get_logger(__name__)

# Receives a relative URL; routing itself is the host application's concern.
Navigator = Callable[[str], None]

ALL_CLEAR_TITLE = "All Clear"
ALL_CLEAR_MESSAGE = "No SLA breaches detected"

DEFAULT_BREACH_TYPES: tuple[BreachMetric, ...] = (
    BreachMetric(
        type="sales_response_sla",
        title="Response SLA Breach",
        severity=Severity.HIGH,
        description="Leads not contacted within 24h",
        drill_through_url="/leads-management?filter=sla_breach",
    ),
    BreachMetric(
        type="proposal_aging",
        title="Aging Proposals",
        severity=Severity.MEDIUM,
        description="Proposals older than 14 days",
        drill_through_url="/proposal-builder?filter=aging&days=14",
    ),
    BreachMetric(
        type="po_variance",
        title="PO Lead Time Variance",
        severity=Severity.MEDIUM,
        description="Orders > 2x planned lead time",
        drill_through_url="/admin/purchase-orders?filter=variance_gt_2x",
    ),
    BreachMetric(
        type="service_sla",
        title="Service SLA Breach",
        severity=Severity.CRITICAL,
        description="Tickets aging > 5 days",
        drill_through_url="/service-hub?filter=sla_breach",
    ),
    BreachMetric(
        type="billing_delay",
        title="Invoice Issuance Delay",
        severity=Severity.HIGH,
        description="Invoices not issued within 24h",
        drill_through_url="/advanced-billing?filter=issuance_delay_gt_24h",
    ),
)

_CATALOGUE: dict[str, BreachMetric] = {m.type: m for m in DEFAULT_BREACH_TYPES}


def with_catalogue_defaults(metric: BreachMetric) -> BreachMetric:
    """Fill display fields the server left blank from the standard rule catalogue."""
    default = _CATALOGUE.get(metric.type)
    if default is None:
        return metric
    update: dict[str, object] = {
        name: getattr(default, name)
        for name in ("title", "description", "drill_through_url")
        if not getattr(metric, name)
    }
    if metric.severity is None:
        update["severity"] = default.severity
    return metric.model_copy(update=update) if update else metric


class BreachTile(BaseModel):
    """Render-ready tile for one actively breaching SLA rule."""

    type: str
    title: str
    description: str = ""
    count: int
    severity: Severity | None = None
    rank: int = 0
    badge: BadgeVariant = BadgeVariant.SECONDARY
    tone: Tone = Tone.GRAY
    drill_through_url: str = ""
    last_updated: str | None = None

    @property
    def severity_label(self) -> str:
        return self.severity.value.upper() if self.severity else "UNKNOWN"

    @classmethod
    def from_metric(cls, metric: BreachMetric) -> BreachTile:
        return cls(
            type=metric.type,
            title=metric.title,
            description=metric.description,
            count=metric.count,
            severity=metric.severity,
            rank=severity_rank(metric.severity),
            badge=severity_badge(metric.severity),
            tone=severity_tone(metric.severity),
            drill_through_url=metric.drill_through_url,
            last_updated=metric.last_updated,
        )


class BreachBoard(BaseModel):
    """The breach widget's render state.

    Exactly one of three shapes: ``loading`` (no poll yet), ``all_clear``
    (failure, empty or all-zero response) or a non-empty ``tiles`` list.
    """

    tiles: list[BreachTile] = Field(default_factory=list)
    all_clear: bool = False
    loading: bool = False
    failed: bool = False


def active_breaches(metrics: Sequence[BreachMetric]) -> list[BreachMetric]:
    """Metrics with ``count > 0``, in server order."""
    return [m for m in metrics if m.breaching]


def build_breach_board(snapshot: BreachSnapshot | None) -> BreachBoard:
    """Turn the latest snapshot into tiles; never reorders by severity."""
    if snapshot is None:
        return BreachBoard(loading=True)
    active = active_breaches(snapshot.metrics)
    if not active:
        return BreachBoard(all_clear=True, failed=snapshot.failed)
    return BreachBoard(tiles=[BreachTile.from_metric(with_catalogue_defaults(m)) for m in active])


def summarize_breaches(metrics: Sequence[BreachMetric]) -> BreachSummary:
    """Total and per-severity breach counts."""
    by_severity: dict[Severity, int] = dict.fromkeys(Severity, 0)
    for m in map(with_catalogue_defaults, metrics):
        if m.severity is not None:
            by_severity[m.severity] += m.count
    return BreachSummary(
        total_breaches=sum(m.count for m in metrics),
        critical_count=by_severity[Severity.CRITICAL],
        high_count=by_severity[Severity.HIGH],
        medium_count=by_severity[Severity.MEDIUM],
        low_count=by_severity[Severity.LOW],
        breach_types=len(metrics),
        last_check=time.time(),
    )


@dataclass
class ClickEvent:
    """Minimal bubbling click event for nested tile actions."""

    propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class BreachMonitor:
    """Owns the breach feed and turns operator clicks into navigation.

    Usage::

        monitor = BreachMonitor(BreachFeed(client), navigator=router.push)
        async with monitor:
            board = monitor.board
            await monitor.refresh()
    """

    def __init__(self, feed: BreachFeed, navigator: Navigator) -> None:
        self._feed = feed
        self._navigator = navigator

    @property
    def feed(self) -> BreachFeed:
        return self._feed

    @property
    def board(self) -> BreachBoard:
        return build_breach_board(self._feed.latest)

    @property
    def summary(self) -> BreachSummary:
        latest = self._feed.latest
        return summarize_breaches(latest.metrics if latest else [])

    @property
    def refresh_enabled(self) -> bool:
        # Manual refresh stays available even while the automatic poll runs.
        return True

    async def refresh(self) -> BreachBoard:
        """Request fresh metrics now; races freely with the automatic poll."""
        logger.info("breach_refresh_requested")
        await self._feed.poll_once()
        return self.board

    def click_tile(self, tile: BreachTile, event: ClickEvent | None = None) -> None:
        """Tile-level click handler: navigate unless a child handled it."""
        if event is not None and event.propagation_stopped:
            return
        self._navigate(tile)

    def click_view_details(self, tile: BreachTile, event: ClickEvent | None = None) -> None:
        """Nested "View Details" action; the click then bubbles to the tile."""
        event = event or ClickEvent()
        event.stop_propagation()
        self._navigate(tile)
        self.click_tile(tile, event)

    def _navigate(self, tile: BreachTile) -> None:
        if not tile.drill_through_url:
            logger.warning("breach_tile_without_target", breach_type=tile.type)
            return
        logger.info("breach_drill_through", breach_type=tile.type, url=tile.drill_through_url)
        self._navigator(tile.drill_through_url)

    async def start(self) -> None:
        await self._feed.start()

    async def stop(self) -> None:
        await self._feed.stop()

    async def __aenter__(self) -> BreachMonitor:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()
