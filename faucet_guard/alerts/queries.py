from __future__ import annotations

from typing import Iterable

from faucet_guard.models import Alert
from faucet_guard.utils.rounding import rate_percent


def by_severity(alerts: Iterable[Alert], severity: str) -> list[Alert]:
    return [a for a in alerts if a.severity == severity]


def by_status(alerts: Iterable[Alert], status: str) -> list[Alert]:
    return [a for a in alerts if a.status == status]


def by_type(alerts: Iterable[Alert], alert_type: str) -> list[Alert]:
    return [a for a in alerts if a.type == alert_type]


def active_alerts(alerts: Iterable[Alert]) -> list[Alert]:
    """Everything not yet resolved (acknowledged alerts are still active)."""
    return [a for a in alerts if a.status != "resolved"]


def critical_active_alerts(alerts: Iterable[Alert]) -> list[Alert]:
    return [a for a in active_alerts(alerts) if a.severity == "critical"]


def alert_stats(alerts: Iterable[Alert]) -> dict:
    alerts = list(alerts)
    total = len(alerts)
    resolved = len(by_status(alerts, "resolved"))
    return {
        "total": total,
        "active": len(active_alerts(alerts)),
        "critical": len(critical_active_alerts(alerts)),
        "resolved": resolved,
        "resolution_rate": rate_percent(resolved, total),
        "by_type": {
            "chemical": len(by_type(alerts, "chemical_exceedance")),
            "bacteriological": len(by_type(alerts, "bacteriological_contamination")),
            "equipment": len(by_type(alerts, "equipment_failure")),
            "maintenance": len(by_type(alerts, "maintenance_due")),
        },
        "by_severity": {sev: len(by_severity(alerts, sev)) for sev in ("low", "medium", "high", "critical")},
    }
