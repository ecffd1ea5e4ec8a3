from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Sequence

from faucet_guard.alerts.queries import alert_stats, critical_active_alerts
from faucet_guard.alerts.rules import dedupe_preserve_order, parameter_label, recommendations
from faucet_guard.data.faucets import faucet_stats
from faucet_guard.data.samples import SampleRepository, quality_distribution
from faucet_guard.models import Alert, Faucet, WaterSample
from faucet_guard.quality.classifier import ComplianceStatus, QualityGrade
from faucet_guard.report.labels import quality_text
from faucet_guard.utils.rounding import rate_percent


@dataclass
class QualityReport:
    id: str
    title: str
    period_start: datetime
    period_end: datetime
    faucet_ids: list[str]
    samples_analyzed: int
    compliance_rate: int
    summary: dict[str, int]
    critical_findings: list[Alert]
    recommendations: list[str]
    generated_at: datetime
    generated_by: str
    findings: list[str] = field(default_factory=list)


@dataclass
class DashboardStats:
    total_faucets: int
    active_faucets: int
    samples_this_month: int
    compliance_rate: int
    active_alerts: int
    critical_alerts: int
    last_update: datetime


def _in_scope(samples: Iterable[WaterSample], faucet_ids: Optional[Sequence[str]]) -> list[WaterSample]:
    if not faucet_ids:
        return list(samples)
    wanted = set(faucet_ids)
    return [s for s in samples if s.faucet_id in wanted]


def _sample_finding(sample: WaterSample, violated: list[str]) -> str:
    params = ", ".join(parameter_label(p) for p in violated)
    return (
        f"{sample.sample_code} ({sample.collection_date:%Y-%m-%d}): "
        f"{quality_text(sample.quality_rating)} | {params}"
    )


def build_quality_report(
    repo: SampleRepository,
    alerts: Iterable[Alert],
    start: datetime,
    end: datetime,
    faucet_ids: Optional[Sequence[str]] = None,
    generated_by: str = "faucet-guard",
    now: Optional[datetime] = None,
) -> QualityReport:
    now = now or datetime.now()
    samples = _in_scope(repo.by_date_range(start, end), faucet_ids)

    compliant = sum(1 for s in samples if s.compliance_status is ComplianceStatus.COMPLIANT)

    scoped_alerts = [a for a in alerts if not faucet_ids or a.faucet_id in set(faucet_ids)]
    critical = critical_active_alerts(scoped_alerts)

    recs: list[str] = []
    findings: list[str] = []
    for s in samples:
        if s.quality_rating is QualityGrade.EXCELLENT:
            continue
        result = repo.result_for(s)
        recs.extend(recommendations(result))
        findings.append(_sample_finding(s, result.violated_parameters))

    recs = dedupe_preserve_order(recs)
    if not recs:
        recs = ["No se requieren acciones correctivas; continuar con el programa de muestreo rutinario."]

    return QualityReport(
        id=f"report-{now:%Y%m%d%H%M%S}",
        title=f"Reporte de calidad del agua {start:%Y-%m-%d} a {end:%Y-%m-%d}",
        period_start=start,
        period_end=end,
        faucet_ids=sorted({s.faucet_id for s in samples}) if not faucet_ids else list(faucet_ids),
        samples_analyzed=len(samples),
        compliance_rate=rate_percent(compliant, len(samples)),
        summary=quality_distribution(samples),
        critical_findings=critical,
        recommendations=recs,
        generated_at=now,
        generated_by=generated_by,
        findings=findings,
    )


def dashboard_stats(
    faucets: Sequence[Faucet],
    repo: SampleRepository,
    alerts: Iterable[Alert],
    now: Optional[datetime] = None,
) -> DashboardStats:
    now = now or datetime.now()
    fstats = faucet_stats(faucets)
    sstats = repo.stats(now=now)
    astats = alert_stats(alerts)
    return DashboardStats(
        total_faucets=fstats["total"],
        active_faucets=fstats["active"],
        samples_this_month=sstats["this_month"],
        compliance_rate=sstats["compliance_rate"],
        active_alerts=astats["active"],
        critical_alerts=astats["critical"],
        last_update=now,
    )
