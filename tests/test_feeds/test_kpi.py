"""Tests for KpiFeed — stale fallback on failure."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from src.api.exceptions import FetchError
from src.core.config import KpiFeedConfig
from src.core.types import KpiSnapshot
from src.feeds.kpi import KpiFeed


def _client(**kw: object) -> MagicMock:
    client = MagicMock()
    client.fetch_kpis = AsyncMock(**kw)
    return client


class TestKpiFeed:
    async def test_poll_publishes_snapshot(self) -> None:
        snap = KpiSnapshot(responseTime=200)  # type: ignore[call-arg]
        feed = KpiFeed(_client(return_value=snap), KpiFeedConfig())
        assert await feed.poll_once() == snap

    async def test_failure_before_success_publishes_nothing(self) -> None:
        feed = KpiFeed(_client(side_effect=FetchError("down")), KpiFeedConfig())
        received: list[KpiSnapshot] = []
        feed.on_update(received.append)  # type: ignore[arg-type]
        assert await feed.poll_once() is None
        assert received == []

    async def test_failure_marks_previous_stale(self) -> None:
        client = _client(return_value=KpiSnapshot(uptime=99.9))  # type: ignore[call-arg]
        feed = KpiFeed(client, KpiFeedConfig())
        await feed.poll_once()
        client.fetch_kpis.side_effect = FetchError("down")
        snap = await feed.poll_once()
        assert snap is not None
        assert snap.stale is True
        assert snap.uptime_pct == 99.9

    async def test_server_stale_flag_ignored(self) -> None:
        payload = KpiSnapshot.model_validate({"uptime": 99.0, "stale": True})
        feed = KpiFeed(_client(return_value=payload), KpiFeedConfig())
        snap = await feed.poll_once()
        assert snap is not None
        assert snap.stale is False
