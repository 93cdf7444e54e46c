"""Tests for domain types — wire-name aliases and normalisation."""

from __future__ import annotations

import pydantic
import pytest

from src.core.types import (
    AlertBatch,
    AlertKind,
    AlertRecord,
    BreachMetric,
    KpiSnapshot,
    Severity,
    ValidationResult,
)


class TestAlertRecord:
    def test_wire_names(self) -> None:
        rec = AlertRecord.model_validate({
            "id": "a1",
            "type": "error",
            "category": "system",
            "severity": "critical",
            "message": "DB down",
            "createdAt": "2024-05-01T10:00:00Z",
            "page": "dashboard",
        })
        assert rec.kind == AlertKind.ERROR
        assert rec.severity == Severity.CRITICAL
        assert rec.created_at == "2024-05-01T10:00:00Z"
        assert rec.page == "dashboard"

    def test_numeric_id_stringified(self) -> None:
        rec = AlertRecord.model_validate({"id": 1, "type": "info"})
        assert rec.id == "1"

    def test_unknown_kind_defaults_to_info(self) -> None:
        rec = AlertRecord.model_validate({"id": "a", "type": "mystery"})
        assert rec.kind == AlertKind.INFO

    def test_missing_kind_defaults_to_info(self) -> None:
        rec = AlertRecord.model_validate({"id": "a"})
        assert rec.kind == AlertKind.INFO

    def test_unknown_severity_is_unscoped(self) -> None:
        rec = AlertRecord.model_validate({"id": "a", "severity": "urgent"})
        assert rec.severity is None

    def test_severity_case_insensitive(self) -> None:
        rec = AlertRecord.model_validate({"id": "a", "severity": "HIGH"})
        assert rec.severity == Severity.HIGH

    def test_message_newlines_preserved(self) -> None:
        rec = AlertRecord.model_validate({"id": "a", "message": "line one\nline two"})
        assert rec.message == "line one\nline two"

    def test_missing_id_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            AlertRecord.model_validate({"type": "info"})

    def test_is_critical(self) -> None:
        assert AlertRecord(id="a", severity=Severity.CRITICAL).is_critical
        assert AlertRecord(id="b", kind=AlertKind.ERROR).is_critical
        assert not AlertRecord(id="c", kind=AlertKind.WARNING, severity=Severity.HIGH).is_critical


class TestAlertBatch:
    def test_fingerprint_ignores_sequence(self) -> None:
        alerts = [AlertRecord(id="a", message="x")]
        assert AlertBatch(sequence=1, alerts=alerts).fingerprint == AlertBatch(
            sequence=2, alerts=alerts
        ).fingerprint

    def test_fingerprint_tracks_content(self) -> None:
        one = AlertBatch(sequence=1, alerts=[AlertRecord(id="a", message="x")])
        two = AlertBatch(sequence=2, alerts=[AlertRecord(id="a", message="y")])
        assert one.fingerprint != two.fingerprint


class TestBreachMetric:
    def test_wire_names(self) -> None:
        m = BreachMetric.model_validate({
            "type": "service_sla",
            "title": "Service SLA Breach",
            "count": 4,
            "severity": "critical",
            "description": "Tickets aging > 5 days",
            "drillThroughUrl": "/service-hub?filter=sla_breach",
            "lastUpdated": "2024-05-01T10:00:00Z",
        })
        assert m.drill_through_url == "/service-hub?filter=sla_breach"
        assert m.last_updated == "2024-05-01T10:00:00Z"
        assert m.breaching

    def test_zero_count_not_breaching(self) -> None:
        assert not BreachMetric(type="x", count=0).breaching

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            BreachMetric(type="x", count=-1)

    def test_unknown_severity(self) -> None:
        m = BreachMetric.model_validate({"type": "x", "count": 1, "severity": "extreme"})
        assert m.severity is None


class TestKpiSnapshot:
    def test_wire_names_and_extras(self) -> None:
        snap = KpiSnapshot.model_validate({
            "responseTime": 245,
            "uptime": 99.95,
            "activeUsers": 187,
            "queueDepth": 3,
        })
        assert snap.response_time_ms == 245
        assert snap.uptime_pct == 99.95
        assert snap.active_users == 187
        assert snap.model_extra == {"queueDepth": 3}
        assert snap.stale is False

    def test_payload_cannot_set_client_fields(self) -> None:
        snap = KpiSnapshot.model_validate(
            {"uptime": 99.0, "stale": True, "fetched_at": 1.0, "fetchedAt": 2.0}
        )
        assert snap.stale is False
        assert snap.fetched_at > 2.0
        assert snap.model_extra == {}


class TestValidationResult:
    def test_errors_default_empty(self) -> None:
        assert ValidationResult.model_validate({"valid": True}).errors == []

    def test_null_errors(self) -> None:
        assert ValidationResult.model_validate({"valid": False, "errors": None}).errors == []

    def test_action_link_alias(self) -> None:
        res = ValidationResult.model_validate({
            "valid": False,
            "errors": [{
                "field": "title",
                "message": "Quote title is required",
                "action": "Add quote title",
                "actionLink": "/quotes/Q-1/edit",
            }],
        })
        assert res.errors[0].action_link == "/quotes/Q-1/edit"
