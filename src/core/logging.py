"""Structured logging for the monitor: structlog over stdlib handlers.

Every line carries ``service`` and, once bound, the tenant id. Poll loops
bind their poller name, so client and parser events logged during a poll
say which feed triggered them. Credential-like keys are masked before
rendering.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from src.core.config import Settings, get_settings

SERVICE_NAME = "printyx-monitor"

# Libraries whose per-request INFO lines would drown out poll logs.
_NOISY_LOGGERS = ("httpx", "httpcore", "aiohttp.access")

_REDACTED = "***"
_SECRET_KEYS = frozenset({"token", "authorization", "webhook_url"})


def redact_secrets(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Mask values of credential-like keys."""
    for key in event_dict.keys() & _SECRET_KEYS:
        if event_dict[key]:
            event_dict[key] = _REDACTED
    return event_dict


def add_service(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def build_processors() -> list[structlog.types.Processor]:
    """Processor chain shared by structlog and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        add_service,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    settings: Settings | None = None,
) -> None:
    """Configure structlog and the root handler.

    Args:
        level: Log level override (e.g. "DEBUG"). Uses config if None.
        fmt: Renderer override ("json" or "console"). Uses config if None.
        settings: Settings to read defaults and the tenant id from.
            Falls back to the global settings.
    """
    settings = settings or get_settings()
    log_level = getattr(logging, (level or settings.logging.level).upper(), logging.INFO)
    log_format = fmt or settings.logging.format

    shared_processors = build_processors()
    renderer: structlog.types.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    bind_tenant(settings.api.tenant_id)


def bind_tenant(tenant_id: str) -> None:
    """Attach the tenant id to every subsequent log line in this context."""
    structlog.contextvars.bind_contextvars(tenant_id=tenant_id or "-")


@contextmanager
def poller_context(name: str) -> Iterator[None]:
    """Tag log lines emitted inside the block with the poller name."""
    with structlog.contextvars.bound_contextvars(poller=name):
        yield
