"""Async HTTP client for the Printyx monitoring and validation endpoints."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
import pydantic
import structlog

from src.api.exceptions import ApiNotConnectedError, ApiParseError, FetchError
from src.core.config import (
    AlertFeedConfig,
    ApiConfig,
    BreachFeedConfig,
    GateConfig,
    KpiFeedConfig,
    Settings,
    get_settings,
)
from src.core.types import AlertRecord, BreachMetric, KpiSnapshot, ValidationResult

logger = structlog.stdlib.get_logger()

# Resolves the tenant for each request; tenant lookup itself is opaque here.
TenantProvider = Callable[[], str]

TENANT_HEADER = "x-tenant-id"


def _parse_alerts(raw: Any) -> list[AlertRecord]:
    """Normalise an alerts payload into AlertRecords.

    Entries that are not objects or fail validation (no ``id``) are
    skipped rather than failing the whole batch.
    """
    if not isinstance(raw, list):
        raise ApiParseError(f"Expected a JSON array of alerts, got {type(raw).__name__}")

    records: list[AlertRecord] = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning("alert_entry_skipped", reason="not_an_object")
            continue
        try:
            records.append(AlertRecord.model_validate(entry))
        except pydantic.ValidationError as exc:
            logger.warning(
                "alert_entry_skipped",
                reason="invalid",
                alert_id=entry.get("id"),
                errors=exc.error_count(),
            )
    return records


def _parse_breaches(raw: Any) -> list[BreachMetric]:
    """Normalise a breaches payload into BreachMetrics, keeping server order."""
    if not isinstance(raw, list):
        raise ApiParseError(f"Expected a JSON array of breaches, got {type(raw).__name__}")

    metrics: list[BreachMetric] = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning("breach_entry_skipped", reason="not_an_object")
            continue
        try:
            metrics.append(BreachMetric.model_validate(entry))
        except pydantic.ValidationError as exc:
            logger.warning(
                "breach_entry_skipped",
                reason="invalid",
                breach_type=entry.get("type"),
                errors=exc.error_count(),
            )
    return metrics


def _parse_validation(raw: Any) -> ValidationResult:
    if not isinstance(raw, dict) or not isinstance(raw.get("valid"), bool):
        raise ApiParseError("Validation response missing boolean 'valid'")
    try:
        return ValidationResult.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ApiParseError(f"Malformed validation response: {exc.error_count()} errors") from exc


class PrintyxClient:
    """Read-only async client for alert, breach, KPI and validation endpoints.

    Every request carries the tenant header. The tenant comes from
    *tenant_provider* when given, else from the configured static id.

    Usage::

        async with PrintyxClient() as client:
            alerts = await client.fetch_alerts()
            result = await client.validate("quote-to-proposal", "Q-100")
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        tenant_provider: TenantProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        if settings is None:
            # An explicit ApiConfig never pulls in the global YAML settings.
            settings = Settings() if config is not None else get_settings()
        self._config = config or settings.api
        self.use_settings(settings)
        self._tenant_provider = tenant_provider
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def use_settings(self, settings: Settings) -> None:
        """Take default endpoints and the validation path template from *settings*."""
        self._alerts_cfg: AlertFeedConfig = settings.alerts
        self._breaches_cfg: BreachFeedConfig = settings.breaches
        self._kpis_cfg: KpiFeedConfig = settings.kpis
        self._gate_cfg: GateConfig = settings.gate

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    @property
    def tenant_id(self) -> str:
        if self._tenant_provider is not None:
            return self._tenant_provider() or ""
        return self._config.tenant_id

    async def connect(self) -> None:
        """Create the httpx async client."""
        if self.connected:
            return
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(self._config.timeout_secs),
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _headers(self) -> dict[str, str]:
        headers = {TENANT_HEADER: self.tenant_id, "Accept": "application/json"}
        token = self._config.token.get_secret_value()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get_json(self, path: str) -> Any:
        """GET *path* and decode its JSON body.

        Raises:
            FetchError: network failure or non-2xx status.
            ApiParseError: body is not valid JSON.
        """
        if self._http is None:
            raise ApiNotConnectedError("HTTP client not connected")

        try:
            response = await self._http.get(path, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"GET {path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {path} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ApiParseError(f"GET {path} returned invalid JSON") from exc

    # ── Endpoints ───────────────────────────────────────────────

    async def fetch_alerts(self, endpoint: str | None = None) -> list[AlertRecord]:
        """Fetch the current system alerts."""
        body = await self._get_json(endpoint or self._alerts_cfg.endpoint)
        return _parse_alerts(body)

    async def fetch_breaches(self, endpoint: str | None = None) -> list[BreachMetric]:
        """Fetch SLA breach metrics in server order."""
        body = await self._get_json(endpoint or self._breaches_cfg.endpoint)
        return _parse_breaches(body)

    async def fetch_kpis(self, endpoint: str | None = None) -> KpiSnapshot:
        """Fetch the dashboard KPI scalars."""
        body = await self._get_json(endpoint or self._kpis_cfg.endpoint)
        if not isinstance(body, dict):
            raise ApiParseError("Expected a JSON object of KPI metrics")
        try:
            return KpiSnapshot.model_validate(body)
        except pydantic.ValidationError as exc:
            raise ApiParseError(f"Malformed KPI payload: {exc.error_count()} errors") from exc

    async def validate(self, transition_type: str, record_id: str) -> ValidationResult:
        """Ask the server whether *record_id* may take *transition_type*."""
        path = self._gate_cfg.endpoint_template.format(
            transition_type=quote(str(transition_type), safe=""),
            record_id=quote(record_id, safe=""),
        )
        body = await self._get_json(path)
        return _parse_validation(body)

    async def __aenter__(self) -> PrintyxClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
