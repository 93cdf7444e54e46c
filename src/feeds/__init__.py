"""Endpoint pollers — alerts, SLA breaches and dashboard KPIs."""

from src.feeds.alerts import AlertFeed
from src.feeds.base import BasePoller, PollCallback
from src.feeds.breaches import BreachFeed
from src.feeds.kpi import KpiFeed

__all__ = [
    "AlertFeed",
    "BasePoller",
    "BreachFeed",
    "KpiFeed",
    "PollCallback",
]
