"""Core module — config, types, logging."""

from src.core.config import Settings, get_settings, load_settings, reset_settings
from src.core.logging import bind_tenant, setup_logging
from src.core.types import (
    AlertBatch,
    AlertKind,
    AlertRecord,
    BreachMetric,
    BreachSnapshot,
    BreachSummary,
    GateState,
    KpiSnapshot,
    Severity,
    TransitionType,
    ValidationError,
    ValidationResult,
)

__all__ = [
    "AlertBatch",
    "AlertKind",
    "AlertRecord",
    "BreachMetric",
    "BreachSnapshot",
    "BreachSummary",
    "GateState",
    "KpiSnapshot",
    "Settings",
    "Severity",
    "TransitionType",
    "ValidationError",
    "ValidationResult",
    "bind_tenant",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
