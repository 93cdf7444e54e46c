"""SLA breach feed — polls the breach metrics endpoint."""

from __future__ import annotations

import structlog

from src.api.client import PrintyxClient
from src.core.config import BreachFeedConfig, get_settings
from src.core.types import BreachSnapshot
from src.feeds.base import BasePoller

logger = structlog.stdlib.get_logger()


class BreachFeed(BasePoller[BreachSnapshot]):
    """Polls ``/api/reports/breaches`` and publishes a BreachSnapshot per cycle.

    A failed fetch publishes an empty snapshot flagged ``failed``; the
    breach board renders that as "All Clear".
    """

    def __init__(
        self,
        client: PrintyxClient,
        config: BreachFeedConfig | None = None,
    ) -> None:
        cfg = config or get_settings().breaches
        super().__init__(name="breaches", poll_interval_secs=cfg.poll_interval_secs)
        self._client = client
        self._config = cfg

    async def fetch(self) -> BreachSnapshot:
        metrics = await self._client.fetch_breaches(self._config.endpoint)
        active = sum(1 for m in metrics if m.breaching)
        logger.debug("breach_snapshot_fetched", rules=len(metrics), active=active)
        return BreachSnapshot(metrics=metrics)

    def fallback(self, exc: Exception) -> BreachSnapshot:
        return BreachSnapshot(metrics=[], failed=True)
