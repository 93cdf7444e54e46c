#!/usr/bin/env python3
"""One-off Definition-of-Done check for a workflow transition.

Usage::

    python scripts/check_transition.py quote-to-proposal Q-100
    python scripts/check_transition.py proposal-to-contract P-7 --tenant acme
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from src.api.client import PrintyxClient
from src.core.config import load_settings
from src.core.logging import setup_logging
from src.core.types import GateState, TransitionType
from src.workflow.gate import ValidationGate

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    if args.tenant:
        settings.api.tenant_id = args.tenant
    setup_logging(level=args.log_level, fmt="console", settings=settings)

    async with PrintyxClient(settings.api, settings=settings) as client:
        gate = ValidationGate(client, args.transition, args.record_id, config=settings.gate)
        await gate.mount()
        state = gate.state
        errors = gate.errors
        await gate.close()

    print(f"{gate.title}: {gate.style.label or state.value}")
    for err in errors:
        line = f"  - [{err.field}] {err.message}"
        if err.action_link:
            line += f"  ({err.action or 'Fix'}: {err.action_link})"
        print(line)

    return 0 if state == GateState.PASSED else 2


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Validate a record against a workflow transition's DoD rules.",
    )
    parser.add_argument(
        "transition",
        help="Transition type, e.g. " + ", ".join(t.value for t in TransitionType),
    )
    parser.add_argument("record_id", help="Record identifier")
    parser.add_argument("--config", default=None, help="Path to settings YAML")
    parser.add_argument("--tenant", default=None, help="Tenant id override")
    parser.add_argument("--log-level", default=None, help="Log level override")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
