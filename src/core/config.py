"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class ApiConfig(BaseModel):
    """Printyx backend API configuration."""

    base_url: str = "http://localhost:5000"
    tenant_id: str = ""
    token: SecretStr = SecretStr("")
    timeout_secs: float = 10.0


class AlertFeedConfig(BaseModel):
    """System alert polling — notification bell and inline page alerts."""

    enabled: bool = True
    endpoint: str = "/api/performance/alerts"
    poll_interval_secs: float = 60.0
    page_limit: int = 3
    bell_display_cap: int = 10


class BreachFeedConfig(BaseModel):
    """SLA breach metric polling."""

    enabled: bool = True
    endpoint: str = "/api/reports/breaches"
    poll_interval_secs: float = 30.0


class KpiFeedConfig(BaseModel):
    """Dashboard summary-bar KPI polling."""

    enabled: bool = False
    endpoint: str = "/api/performance/metrics"
    poll_interval_secs: float = 60.0


class GateConfig(BaseModel):
    """Workflow validation gate configuration."""

    endpoint_template: str = "/api/validate/{transition_type}/{record_id}"
    success_display_secs: float = 3.0


class WebhookConfig(BaseModel):
    """Outbound webhook for critical toasts (Slack/Discord compatible)."""

    enabled: bool = False
    url: SecretStr = SecretStr("")


class ToastConfig(BaseModel):
    """Critical toast delivery configuration."""

    title: str = "System Alert"
    webhook: WebhookConfig = WebhookConfig()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    api: ApiConfig = ApiConfig()
    alerts: AlertFeedConfig = AlertFeedConfig()
    breaches: BreachFeedConfig = BreachFeedConfig()
    kpis: KpiFeedConfig = KpiFeedConfig()
    gate: GateConfig = GateConfig()
    toasts: ToastConfig = ToastConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
