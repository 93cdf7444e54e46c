"""KPI feed — polls the performance metrics endpoint for the summary bar."""

from __future__ import annotations

from src.api.client import PrintyxClient
from src.core.config import KpiFeedConfig, get_settings
from src.core.types import KpiSnapshot
from src.feeds.base import BasePoller


class KpiFeed(BasePoller[KpiSnapshot]):
    """Polls ``/api/performance/metrics``.

    On failure the last good snapshot is republished marked ``stale``;
    before any success there is nothing to show.
    """

    def __init__(
        self,
        client: PrintyxClient,
        config: KpiFeedConfig | None = None,
    ) -> None:
        cfg = config or get_settings().kpis
        super().__init__(name="kpis", poll_interval_secs=cfg.poll_interval_secs)
        self._client = client
        self._config = cfg

    async def fetch(self) -> KpiSnapshot:
        return await self._client.fetch_kpis(self._config.endpoint)

    def fallback(self, exc: Exception) -> KpiSnapshot | None:
        if self._latest is None:
            return None
        return self._latest.model_copy(update={"stale": True})
