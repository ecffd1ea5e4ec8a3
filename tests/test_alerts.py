"""Tests for alert derivation, recommendations and alert queries."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from faucet_guard.alerts.queries import (
    active_alerts,
    alert_stats,
    by_severity,
    by_type,
    critical_active_alerts,
)
from faucet_guard.alerts.rules import (
    alert_severity,
    dedupe_preserve_order,
    derive_faucet_alerts,
    derive_sample_alerts,
    recommendations,
)
from faucet_guard.data.faucets import get_faucet
from faucet_guard.limits.compliance import evaluate
from faucet_guard.limits.registry import get_parameter_limit
from faucet_guard.models import Alert, BacteriologicalParameters, ChemicalParameters
from faucet_guard.quality.classifier import classify_sample


def _severity(parameter: str, value: float):
    return alert_severity(parameter, evaluate(parameter, value), get_parameter_limit(parameter))


class TestAlertSeverity:
    """Severity mapping per violated parameter."""

    @pytest.mark.parametrize(
        ("parameter", "value", "expected"),
        [
            ("pH", 7.0, None),
            ("escherichiaColi", 1, "critical"),
            ("lead", 0.02, "critical"),
            ("freeChlorine", 0.1, "critical"),
            ("turbidity", 3.0, "high"),
            ("heterotrophicBacteria", 600, "high"),
            ("iron", 0.35, "medium"),
            ("conductivity", 1200, "medium"),
        ],
    )
    def test_mapping(self, parameter: str, value: float, expected) -> None:
        """Critical bacteriology and allowlisted chemistry are critical."""
        assert _severity(parameter, value) == expected


class TestSampleAlerts:
    """One alert per non-compliant parameter of a stored sample."""

    def test_clean_sample_has_no_alerts(self, repo, chemical, bacteriological, now) -> None:
        """Nothing violated, nothing raised."""
        sample = repo.add_sample("faucet-001", chemical, bacteriological, collection_date=now)
        assert derive_sample_alerts(sample, repo.result_for(sample)) == []

    def test_alerts_per_violation(self, repo, clean_chemical, clean_bacteriological, now) -> None:
        """Chemical and bacteriological violations each raise an alert."""
        clean_chemical.update({"pH": 9.3, "iron": 0.35})
        clean_bacteriological["escherichiaColi"] = 2
        sample = repo.add_sample(
            "faucet-003",
            ChemicalParameters.model_validate(clean_chemical),
            BacteriologicalParameters.model_validate(clean_bacteriological),
            collection_date=now,
        )
        alerts = derive_sample_alerts(sample, repo.result_for(sample))
        by_param = {a.parameter: a for a in alerts}

        assert set(by_param) == {"pH", "iron", "escherichiaColi"}
        assert by_param["pH"].severity == "critical"
        assert by_param["pH"].type == "chemical_exceedance"
        assert by_param["iron"].severity == "medium"
        assert by_param["escherichiaColi"].type == "bacteriological_contamination"
        assert all(a.faucet_id == "faucet-003" and a.sample_id == sample.id for a in alerts)
        assert by_param["pH"].id == f"alert-{sample.id}-pH"
        assert by_param["pH"].created_at == sample.analysis_date

    def test_description_quotes_value_and_bound(self, repo, clean_chemical, bacteriological, now) -> None:
        """Descriptions name the measured value and the violated limit."""
        clean_chemical["freeChlorine"] = 0.1
        sample = repo.add_sample(
            "faucet-001", ChemicalParameters.model_validate(clean_chemical), bacteriological, collection_date=now
        )
        (alert,) = derive_sample_alerts(sample, repo.result_for(sample))
        assert "0.1 mg/L" in alert.description
        assert "0.3 mg/L" in alert.description
        assert "mínimo" in alert.description


class TestFaucetAlerts:
    """Equipment and maintenance alerts."""

    def test_out_of_service(self) -> None:
        """Out-of-service faucets raise an equipment alert."""
        alerts = derive_faucet_alerts(get_faucet("faucet-010"), today=date(2024, 8, 1))
        assert [(a.type, a.severity) for a in alerts] == [("equipment_failure", "medium")]

    def test_maintenance_overdue(self) -> None:
        """Past-due maintenance is medium severity."""
        alerts = derive_faucet_alerts(get_faucet("faucet-001"), today=date(2025, 1, 1))
        assert [(a.type, a.severity) for a in alerts] == [("maintenance_due", "medium")]
        assert alerts[0].id == "alert-faucet-001-maintenance"

    def test_maintenance_upcoming(self) -> None:
        """Maintenance within the warning window is low severity."""
        alerts = derive_faucet_alerts(get_faucet("faucet-001"), today=date(2024, 11, 10))
        assert [(a.type, a.severity) for a in alerts] == [("maintenance_due", "low")]

    def test_nothing_due(self) -> None:
        """Far from maintenance and in service: no alerts."""
        assert derive_faucet_alerts(get_faucet("faucet-001"), today=date(2024, 10, 1)) == []

    def test_no_schedule(self) -> None:
        """Faucets without a next maintenance date never raise maintenance alerts."""
        faucet = get_faucet("faucet-001").model_copy(update={"next_maintenance": None})
        assert derive_faucet_alerts(faucet, today=date(2030, 1, 1)) == []


class TestRecommendations:
    """Action items per violated parameter family."""

    def test_clean_sample(self, chemical, bacteriological) -> None:
        """Routine monitoring when nothing is violated."""
        recs = recommendations(classify_sample(chemical, bacteriological))
        assert len(recs) == 1
        assert "rutinario" in recs[0]

    def test_fecal_contamination_is_priority(self, clean_chemical, clean_bacteriological) -> None:
        """Fecal indicators lead with a priority action."""
        clean_bacteriological["escherichiaColi"] = 1
        recs = recommendations(classify_sample(clean_chemical, clean_bacteriological))
        assert recs[0].startswith("Prioridad")

    def test_families(self, clean_chemical, clean_bacteriological) -> None:
        """Each violated family contributes one line."""
        clean_chemical.update({"freeChlorine": 2.5, "lead": 0.05, "pH": 6.0})
        recs = recommendations(classify_sample(clean_chemical, clean_bacteriological))
        assert len(recs) == 3
        assert any("cloro libre" in r for r in recs)
        assert any("metales pesados" in r for r in recs)
        assert any("pH" in r for r in recs)

    def test_dedupe_preserve_order(self) -> None:
        """Duplicates dropped, first occurrence kept."""
        assert dedupe_preserve_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


class TestAlertQueries:
    """Filtering and statistics over alert lists."""

    @pytest.fixture
    def alerts(self) -> list[Alert]:
        created = datetime(2025, 3, 1)

        def make(i: int, type_: str, severity: str, status: str = "active") -> Alert:
            return Alert(
                id=f"a{i}", type=type_, severity=severity, title="t", description="d",
                created_at=created, status=status,
            )

        return [
            make(1, "chemical_exceedance", "critical"),
            make(2, "bacteriological_contamination", "critical", status="resolved"),
            make(3, "bacteriological_contamination", "high", status="acknowledged"),
            make(4, "maintenance_due", "low"),
            make(5, "equipment_failure", "medium", status="resolved"),
            make(6, "chemical_exceedance", "critical", status="acknowledged"),
        ]

    def test_filters(self, alerts) -> None:
        """Severity, type and active filters."""
        assert len(by_severity(alerts, "critical")) == 3
        assert len(by_type(alerts, "bacteriological_contamination")) == 2
        assert [a.id for a in active_alerts(alerts)] == ["a1", "a3", "a4", "a6"]
        assert [a.id for a in critical_active_alerts(alerts)] == ["a1", "a6"]

    def test_stats(self, alerts) -> None:
        """Counts and resolution rate."""
        stats = alert_stats(alerts)
        assert stats["total"] == 6
        assert stats["active"] == 4
        assert stats["critical"] == 2
        assert stats["resolved"] == 2
        assert stats["resolution_rate"] == 33
        assert stats["by_type"] == {"chemical": 2, "bacteriological": 2, "equipment": 1, "maintenance": 1}
        assert stats["by_severity"] == {"low": 1, "medium": 1, "high": 1, "critical": 3}

    def test_empty_stats(self) -> None:
        """No alerts, zero rate."""
        assert alert_stats([])["resolution_rate"] == 0
