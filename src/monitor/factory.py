"""Convenience factory for wiring the monitoring stack."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

import structlog

from src.api.client import PrintyxClient, TenantProvider
from src.core.config import Settings, get_settings
from src.core.types import Severity
from src.feeds.alerts import AlertFeed
from src.feeds.base import BasePoller
from src.feeds.breaches import BreachFeed
from src.feeds.kpi import KpiFeed
from src.monitor.aggregator import (
    AlertFilter,
    BellView,
    CriticalToastNotifier,
    PageAlertsView,
    bell_view,
    page_alerts,
)
from src.monitor.breach_board import BreachMonitor, Navigator
from src.monitor.channels import LogToastChannel, ToastChannel, WebhookToastChannel
from src.monitor.dispatcher import ToastDispatcher

logger = structlog.get_logger(__name__)


def _log_navigation(url: str) -> None:
    logger.info("navigate", url=url)


@dataclass
class MonitorStack:
    """Pollers, toast path and breach monitor sharing one API client."""

    settings: Settings
    client: PrintyxClient
    dispatcher: ToastDispatcher
    notifier: CriticalToastNotifier
    alert_feed: AlertFeed
    breach_monitor: BreachMonitor
    kpi_feed: KpiFeed

    @property
    def active_pollers(self) -> list[BasePoller]:
        pollers: list[BasePoller] = []
        if self.settings.alerts.enabled:
            pollers.append(self.alert_feed)
        if self.settings.breaches.enabled:
            pollers.append(self.breach_monitor.feed)
        if self.settings.kpis.enabled:
            pollers.append(self.kpi_feed)
        return pollers

    def bell(self) -> BellView:
        """Notification-bell view of the latest alert batch."""
        return bell_view(self.alert_feed.latest, cap=self.settings.alerts.bell_display_cap)

    def page_alerts(
        self,
        categories: list[str] | None = None,
        severities: list[Severity] | None = None,
        page_key: str | None = None,
    ) -> PageAlertsView:
        """Inline alerts for one page, limited to the configured page limit."""
        spec = AlertFilter(
            categories=categories or [],
            severities=severities or [],
            page_key=page_key,
            limit=self.settings.alerts.page_limit,
        )
        return page_alerts(self.alert_feed.latest, spec)

    async def start(self) -> None:
        await self.client.connect()
        for poller in self.active_pollers:
            await poller.start()
        logger.info(
            "monitor_stack_started",
            pollers=[p.name for p in self.active_pollers],
        )

    async def stop(self) -> None:
        for poller in self.active_pollers:
            try:
                await poller.stop()
            except Exception:
                logger.exception("poller_stop_error", poller=poller.name)
        await self.dispatcher.close()
        await self.client.close()
        logger.info("monitor_stack_stopped")

    async def __aenter__(self) -> MonitorStack:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()


def create_monitor_stack(
    settings: Settings | None = None,
    navigator: Navigator | None = None,
    tenant_provider: TenantProvider | None = None,
    client: PrintyxClient | None = None,
) -> MonitorStack:
    """Build the full monitoring stack from config.

    Critical alert batches are wired to the toast notifier; the webhook
    channel is added only when enabled.
    """
    settings = settings or get_settings()
    if client is None:
        client = PrintyxClient(settings.api, tenant_provider=tenant_provider, settings=settings)
    else:
        client.use_settings(settings)

    channels: list[ToastChannel] = [LogToastChannel()]
    if settings.toasts.webhook.enabled:
        channels.append(WebhookToastChannel(settings.toasts.webhook))

    dispatcher = ToastDispatcher(channels=channels)
    notifier = CriticalToastNotifier(dispatcher=dispatcher, title=settings.toasts.title)

    alert_feed = AlertFeed(client, settings.alerts)
    alert_feed.on_update(notifier.observe)

    breach_monitor = BreachMonitor(
        BreachFeed(client, settings.breaches),
        navigator=navigator or _log_navigation,
    )

    return MonitorStack(
        settings=settings,
        client=client,
        dispatcher=dispatcher,
        notifier=notifier,
        alert_feed=alert_feed,
        breach_monitor=breach_monitor,
        kpi_feed=KpiFeed(client, settings.kpis),
    )
