"""Monitoring subsystem — alert aggregation, breach board, critical toasts."""

from src.monitor.aggregator import (
    AlertFilter,
    BellView,
    CriticalToastNotifier,
    PageAlertsView,
    aggregate,
    bell_view,
    page_alerts,
)
from src.monitor.breach_board import (
    DEFAULT_BREACH_TYPES,
    BreachBoard,
    BreachMonitor,
    BreachTile,
    ClickEvent,
    build_breach_board,
    summarize_breaches,
    with_catalogue_defaults,
)
from src.monitor.channels import LogToastChannel, ToastChannel, WebhookToastChannel
from src.monitor.dispatcher import ToastDispatcher
from src.monitor.factory import MonitorStack, create_monitor_stack
from src.monitor.types import Toast, ToastVariant

__all__ = [
    "DEFAULT_BREACH_TYPES",
    "AlertFilter",
    "BellView",
    "BreachBoard",
    "BreachMonitor",
    "BreachTile",
    "ClickEvent",
    "CriticalToastNotifier",
    "LogToastChannel",
    "MonitorStack",
    "PageAlertsView",
    "Toast",
    "ToastChannel",
    "ToastDispatcher",
    "ToastVariant",
    "WebhookToastChannel",
    "aggregate",
    "bell_view",
    "build_breach_board",
    "create_monitor_stack",
    "page_alerts",
    "summarize_breaches",
    "with_catalogue_defaults",
]
