"""System alert feed — polls the performance alerts endpoint."""

from __future__ import annotations

import structlog

from src.api.client import PrintyxClient
from src.core.config import AlertFeedConfig, get_settings
from src.core.types import AlertBatch
from src.feeds.base import BasePoller

logger = structlog.stdlib.get_logger()


class AlertFeed(BasePoller[AlertBatch]):
    """Polls ``/api/performance/alerts`` and publishes one AlertBatch per cycle.

    A failed fetch publishes an empty batch flagged ``failed``. Alert
    outages are advisory and must never block the page hosting them.

    Usage::

        feed = AlertFeed(client)
        feed.on_update(notifier.observe)
        async with feed:
            await asyncio.sleep(600)
    """

    def __init__(
        self,
        client: PrintyxClient,
        config: AlertFeedConfig | None = None,
    ) -> None:
        cfg = config or get_settings().alerts
        super().__init__(name="alerts", poll_interval_secs=cfg.poll_interval_secs)
        self._client = client
        self._config = cfg
        self._sequence = 0

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    async def fetch(self) -> AlertBatch:
        alerts = await self._client.fetch_alerts(self._config.endpoint)
        batch = AlertBatch(sequence=self._next_sequence(), alerts=alerts)
        logger.debug("alert_batch_fetched", sequence=batch.sequence, count=len(alerts))
        return batch

    def fallback(self, exc: Exception) -> AlertBatch:
        return AlertBatch(sequence=self._next_sequence(), alerts=[], failed=True)
