"""Domain types for alert, breach and workflow-validation consumers."""

from __future__ import annotations

import time
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AlertKind(StrEnum):
    """Alert kind — drives icon, styling and urgency."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Severity(StrEnum):
    """Severity shared by alerts and breach metrics."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def _coerce_severity(value: Any) -> Severity | None:
    """Map a wire value to a Severity, or None when absent/unknown."""
    if isinstance(value, Severity):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Severity(value.strip().lower())
    except ValueError:
        return None


# ── Alerts ───────────────────────────────────────────────────────


class AlertRecord(BaseModel):
    """Canonical alert shape every alert source normalises to."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    kind: AlertKind = Field(default=AlertKind.INFO, alias="type")
    category: str = ""
    severity: Severity | None = None
    message: str = ""
    created_at: str | None = Field(default=None, alias="createdAt")
    page: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("kind", mode="before")
    @classmethod
    def _normalise_kind(cls, value: Any) -> AlertKind:
        if isinstance(value, str):
            try:
                return AlertKind(value.strip().lower())
            except ValueError:
                pass
        return AlertKind.INFO

    @field_validator("severity", mode="before")
    @classmethod
    def _normalise_severity(cls, value: Any) -> Severity | None:
        return _coerce_severity(value)

    @field_validator("category", "message", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_critical(self) -> bool:
        """Whether this record warrants a critical toast."""
        return self.severity == Severity.CRITICAL or self.kind == AlertKind.ERROR


class AlertBatch(BaseModel):
    """The records returned by a single alert fetch cycle.

    A batch wholly replaces the previous one. Nothing is merged across
    cycles, so a later batch may carry a different record under a
    previously seen ``id``.
    """

    sequence: int
    alerts: list[AlertRecord] = Field(default_factory=list)
    fetched_at: float = Field(default_factory=time.time)
    failed: bool = False

    @property
    def fingerprint(self) -> tuple[tuple[Any, ...], ...]:
        """Content identity of the batch, independent of its sequence."""
        return tuple(
            (a.id, a.kind, a.category, a.severity, a.message, a.page)
            for a in self.alerts
        )


# ── Breaches ─────────────────────────────────────────────────────


class BreachMetric(BaseModel):
    """One row per monitored SLA rule."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str
    title: str = ""
    description: str = ""
    count: int = Field(default=0, ge=0)
    severity: Severity | None = None
    drill_through_url: str = Field(default="", alias="drillThroughUrl")
    last_updated: str | None = Field(default=None, alias="lastUpdated")

    @field_validator("severity", mode="before")
    @classmethod
    def _normalise_severity(cls, value: Any) -> Severity | None:
        return _coerce_severity(value)

    @property
    def breaching(self) -> bool:
        return self.count > 0


class BreachSnapshot(BaseModel):
    """The metrics returned by a single breach poll, in server order."""

    metrics: list[BreachMetric] = Field(default_factory=list)
    fetched_at: float = Field(default_factory=time.time)
    failed: bool = False


class BreachSummary(BaseModel):
    """Aggregate breach counts across all SLA rules."""

    total_breaches: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    breach_types: int = 0
    last_check: float = Field(default_factory=time.time)


# ── KPIs ─────────────────────────────────────────────────────────


_KPI_CLIENT_FIELDS = frozenset({"fetched_at", "fetchedAt", "stale"})


class KpiSnapshot(BaseModel):
    """Scalar performance KPIs for the dashboard summary bar."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    response_time_ms: float | None = Field(default=None, alias="responseTime")
    throughput_per_min: float | None = Field(default=None, alias="throughput")
    error_rate_pct: float | None = Field(default=None, alias="errorRate")
    uptime_pct: float | None = Field(default=None, alias="uptime")
    memory_usage_pct: float | None = Field(default=None, alias="memoryUsage")
    cpu_usage_pct: float | None = Field(default=None, alias="cpuUsage")
    disk_usage_pct: float | None = Field(default=None, alias="diskUsage")
    active_users: int | None = Field(default=None, alias="activeUsers")
    fetched_at: float = Field(default_factory=time.time)
    stale: bool = False

    @model_validator(mode="before")
    @classmethod
    def _drop_client_fields(cls, data: Any) -> Any:
        # fetched_at and stale are set on this side only, never by the payload.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if k not in _KPI_CLIENT_FIELDS}
        return data


# ── Workflow validation ──────────────────────────────────────────


class TransitionType(StrEnum):
    """Known workflow-stage transitions gated by Definition-of-Done rules."""

    QUOTE_TO_PROPOSAL = "quote-to-proposal"
    PROPOSAL_TO_CONTRACT = "proposal-to-contract"
    PO_TO_WAREHOUSE = "po-to-warehouse"
    SERVICE_COMPLETION = "service-completion"


class GateState(StrEnum):
    """Externally observable validation gate state."""

    HIDDEN = "hidden"
    CHECKING = "checking"
    PASSED = "passed"
    FAILED = "failed"


class ValidationError(BaseModel):
    """A single remediation item returned by the validator."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    field: str
    message: str
    action: str | None = None
    action_link: str | None = Field(default=None, alias="actionLink")


class ValidationResult(BaseModel):
    """Pass/fail outcome of a workflow transition check."""

    valid: bool
    errors: list[ValidationError] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


SYSTEM_VALIDATION_ERROR = ValidationError(
    field="system",
    message="Validation system error",
)
