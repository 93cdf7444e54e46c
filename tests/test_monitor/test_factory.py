"""Tests for the monitor factory — wiring logic with various config combinations."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
from pydantic import SecretStr

from src.api.client import PrintyxClient
from src.core.config import (
    AlertFeedConfig,
    GateConfig,
    KpiFeedConfig,
    Settings,
    ToastConfig,
    WebhookConfig,
)
from src.core.types import AlertKind, AlertRecord, BreachMetric, Severity
from src.monitor.breach_board import BreachTile
from src.monitor.channels import LogToastChannel, WebhookToastChannel
from src.monitor.factory import create_monitor_stack


# ── Helpers ─────────────────────────────────────────────────────


def _client() -> MagicMock:
    client = MagicMock()
    client.connect = AsyncMock()
    client.close = AsyncMock()
    client.fetch_alerts = AsyncMock(return_value=[])
    client.fetch_breaches = AsyncMock(return_value=[])
    client.fetch_kpis = AsyncMock()
    return client


def _settings(**kw: object) -> Settings:
    return Settings(**kw)  # type: ignore[arg-type]


# ── Config Combinations ────────────────────────────────────────


class TestFactoryWiring:
    def test_log_channel_only_by_default(self) -> None:
        stack = create_monitor_stack(_settings(), client=_client())
        channels = stack.dispatcher.channels
        assert len(channels) == 1
        assert isinstance(channels[0], LogToastChannel)

    def test_webhook_enabled(self) -> None:
        settings = _settings(
            toasts=ToastConfig(
                webhook=WebhookConfig(enabled=True, url=SecretStr("https://hooks.example.com/x"))
            )
        )
        stack = create_monitor_stack(settings, client=_client())
        assert isinstance(stack.dispatcher.channels[-1], WebhookToastChannel)

    def test_active_pollers_default(self) -> None:
        stack = create_monitor_stack(_settings(), client=_client())
        names = [p.name for p in stack.active_pollers]
        assert names == ["alerts", "breaches"]

    def test_kpis_enabled(self) -> None:
        stack = create_monitor_stack(_settings(kpis=KpiFeedConfig(enabled=True)), client=_client())
        assert "kpis" in [p.name for p in stack.active_pollers]

    def test_builds_client_from_settings(self) -> None:
        stack = create_monitor_stack(_settings(), tenant_provider=lambda: "t-9")
        assert stack.client.tenant_id == "t-9"


class TestStackBehaviour:
    async def test_critical_alert_reaches_dispatcher(self) -> None:
        client = _client()
        client.fetch_alerts.return_value = [
            AlertRecord(id="1", kind=AlertKind.ERROR, message="Database connection lost"),
        ]
        stack = create_monitor_stack(_settings(), client=client)
        await stack.alert_feed.poll_once()
        assert stack.notifier.fired_count == 1
        assert stack.dispatcher.sent[0].description == "Database connection lost"

    async def test_bell_and_page_alerts_use_config(self) -> None:
        client = _client()
        client.fetch_alerts.return_value = [AlertRecord(id=str(i), category="sales") for i in range(5)]
        settings = _settings(alerts=AlertFeedConfig(page_limit=2, bell_display_cap=4))
        stack = create_monitor_stack(settings, client=client)
        await stack.alert_feed.poll_once()
        assert len(stack.page_alerts(categories=["sales"]).alerts) == 2
        assert len(stack.bell().items) == 4
        assert stack.bell().unread_count == 5

    async def test_page_alerts_severity_filter(self) -> None:
        client = _client()
        client.fetch_alerts.return_value = [
            AlertRecord(id="1", severity=Severity.HIGH),
            AlertRecord(id="2"),
        ]
        stack = create_monitor_stack(_settings(), client=client)
        await stack.alert_feed.poll_once()
        assert [a.id for a in stack.page_alerts(severities=[Severity.HIGH]).alerts] == ["1"]

    async def test_navigator_wired(self) -> None:
        navigated: list[str] = []
        stack = create_monitor_stack(_settings(), navigator=navigated.append, client=_client())
        tile = BreachTile.from_metric(BreachMetric(type="x", count=1, drill_through_url="/x"))
        stack.breach_monitor.click_tile(tile)
        assert navigated == ["/x"]

    async def test_start_stop(self) -> None:
        client = _client()
        stack = create_monitor_stack(_settings(), client=client)
        async with stack:
            assert stack.alert_feed.running
            assert stack.breach_monitor.feed.running
            assert not stack.kpi_feed.running
        client.connect.assert_awaited_once()
        client.close.assert_awaited_once()
        assert not stack.alert_feed.running


class TestSettingsPropagation:
    async def test_supplied_client_uses_stack_gate_template(self) -> None:
        paths: list[str] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"valid": True})

        settings = _settings(
            gate=GateConfig(endpoint_template="/v2/dod/{transition_type}/{record_id}")
        )
        client = PrintyxClient(settings.api, transport=httpx.MockTransport(_handler))
        stack = create_monitor_stack(settings, client=client)
        async with stack.client:
            result = await stack.client.validate("quote-to-proposal", "Q-1")
        assert result.valid
        assert paths == ["/v2/dod/quote-to-proposal/Q-1"]

    async def test_built_client_uses_stack_endpoints(self) -> None:
        paths: list[str] = []
        settings = _settings(alerts=AlertFeedConfig(endpoint="/tenant/alerts"))
        stack = create_monitor_stack(settings)

        def _handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json=[])

        stack.client._transport = httpx.MockTransport(_handler)
        async with stack.client:
            await stack.client.fetch_alerts()
        assert paths == ["/tenant/alerts"]
