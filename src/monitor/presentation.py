"""Exhaustive enum → presentation tables for alerts, breaches and gates.

Each table is checked against its enum at import time, so adding a
variant without a presentation entry fails loudly instead of silently
falling through to a default.
"""

from __future__ import annotations

from enum import Enum, StrEnum
from typing import NamedTuple

from src.core.types import AlertKind, GateState, Severity


class Icon(StrEnum):
    ALERT_TRIANGLE = "alert-triangle"
    CHECK_CIRCLE = "check-circle"
    INFO = "info"
    SPINNER = "spinner"


class Tone(StrEnum):
    RED = "red"
    ORANGE = "orange"
    AMBER = "amber"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"
    GRAY = "gray"


class BadgeVariant(StrEnum):
    DEFAULT = "default"
    SECONDARY = "secondary"
    DESTRUCTIVE = "destructive"
    OUTLINE = "outline"


class Style(NamedTuple):
    icon: Icon
    tone: Tone


class GateStyle(NamedTuple):
    label: str
    badge: BadgeVariant
    tone: Tone
    description: str


def _check_exhaustive(table: dict, enum_cls: type[Enum]) -> None:
    missing = set(enum_cls) - set(table)
    if missing:
        names = ", ".join(sorted(m.name for m in missing))
        raise RuntimeError(f"{enum_cls.__name__} has no presentation for: {names}")


_KIND_STYLES: dict[AlertKind, Style] = {
    AlertKind.ERROR: Style(Icon.ALERT_TRIANGLE, Tone.RED),
    AlertKind.WARNING: Style(Icon.ALERT_TRIANGLE, Tone.AMBER),
    AlertKind.SUCCESS: Style(Icon.CHECK_CIRCLE, Tone.GREEN),
    AlertKind.INFO: Style(Icon.INFO, Tone.BLUE),
}

# Rank is used for styling only; display order always follows the server.
_SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

_SEVERITY_BADGES: dict[Severity, BadgeVariant] = {
    Severity.CRITICAL: BadgeVariant.DESTRUCTIVE,
    Severity.HIGH: BadgeVariant.DESTRUCTIVE,
    Severity.MEDIUM: BadgeVariant.SECONDARY,
    Severity.LOW: BadgeVariant.OUTLINE,
}

_SEVERITY_TONES: dict[Severity, Tone] = {
    Severity.CRITICAL: Tone.RED,
    Severity.HIGH: Tone.ORANGE,
    Severity.MEDIUM: Tone.YELLOW,
    Severity.LOW: Tone.BLUE,
}

_GATE_STYLES: dict[GateState, GateStyle] = {
    GateState.HIDDEN: GateStyle("", BadgeVariant.SECONDARY, Tone.GRAY, ""),
    GateState.CHECKING: GateStyle(
        "Checking...",
        BadgeVariant.SECONDARY,
        Tone.BLUE,
        "Verifying all requirements are met...",
    ),
    GateState.PASSED: GateStyle(
        "Passed",
        BadgeVariant.DEFAULT,
        Tone.GREEN,
        "All requirements satisfied. Ready to proceed to next stage.",
    ),
    GateState.FAILED: GateStyle(
        "Failed",
        BadgeVariant.DESTRUCTIVE,
        Tone.RED,
        "The following requirements must be completed before proceeding:",
    ),
}

for _table, _enum in (
    (_KIND_STYLES, AlertKind),
    (_SEVERITY_RANK, Severity),
    (_SEVERITY_BADGES, Severity),
    (_SEVERITY_TONES, Severity),
    (_GATE_STYLES, GateState),
):
    _check_exhaustive(_table, _enum)


def kind_style(kind: AlertKind) -> Style:
    return _KIND_STYLES[kind]


def severity_rank(severity: Severity | None) -> int:
    """critical > high > medium > low > unknown (0)."""
    if severity is None:
        return 0
    return _SEVERITY_RANK[severity]


def severity_badge(severity: Severity | None) -> BadgeVariant:
    if severity is None:
        return BadgeVariant.SECONDARY
    return _SEVERITY_BADGES[severity]


def severity_tone(severity: Severity | None) -> Tone:
    if severity is None:
        return Tone.GRAY
    return _SEVERITY_TONES[severity]


def gate_style(state: GateState) -> GateStyle:
    return _GATE_STYLES[state]
