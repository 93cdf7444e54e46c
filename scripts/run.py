#!/usr/bin/env python3
"""Monitoring entrypoint — polls alerts, breaches and KPIs until interrupted.

Usage::

    # Run with default config
    python scripts/run.py

    # Custom config file and tenant
    python scripts/run.py --config config/settings.yaml --tenant acme

    # Override log level
    python scripts/run.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from collections.abc import Callable

import structlog

from src.core.config import load_settings
from src.core.logging import setup_logging
from src.core.types import AlertBatch, BreachSnapshot
from src.monitor.breach_board import build_breach_board, summarize_breaches
from src.monitor.factory import MonitorStack, create_monitor_stack

logger = structlog.get_logger(__name__)


def _bell_logger(stack: MonitorStack) -> Callable[[AlertBatch], None]:
    def _log_bell(batch: AlertBatch) -> None:
        view = stack.bell()
        logger.info(
            "alerts_updated",
            sequence=batch.sequence,
            failed=batch.failed,
            unread=view.unread_count,
            badge=view.badge_label,
        )

    return _log_bell


def _log_board(snapshot: BreachSnapshot) -> None:
    board = build_breach_board(snapshot)
    summary = summarize_breaches(snapshot.metrics)
    logger.info(
        "breaches_updated",
        all_clear=board.all_clear,
        tiles=[t.type for t in board.tiles],
        total_breaches=summary.total_breaches,
        critical=summary.critical_count,
    )


async def run(args: argparse.Namespace) -> int:
    """Start the monitor stack and run until interrupted."""
    settings = load_settings(args.config)
    if args.tenant:
        settings.api.tenant_id = args.tenant
    setup_logging(level=args.log_level, settings=settings)

    stack = create_monitor_stack(settings)
    if not stack.active_pollers:
        logger.error("no_pollers_enabled")
        print(
            "No pollers enabled. Enable at least one of alerts.enabled, "
            "breaches.enabled or kpis.enabled in config/settings.yaml.",
            file=sys.stderr,
        )
        return 1

    stack.alert_feed.on_update(_bell_logger(stack))
    stack.breach_monitor.feed.on_update(_log_board)

    await stack.start()

    # ── Wait for shutdown signal ─────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    # ── Graceful shutdown ────────────────────────────────────────
    await stack.stop()

    logger.info(
        "monitor_stopped",
        toasts=stack.notifier.fired_count,
        alert_errors=stack.alert_feed.error_count,
        breach_errors=stack.breach_monitor.feed.error_count,
    )
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Poll Printyx system alerts, SLA breaches and KPIs.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--tenant",
        default=None,
        help="Tenant id override for the x-tenant-id header",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
