from __future__ import annotations

import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

import typer

from faucet_guard.alerts.rules import (
    dedupe_preserve_order,
    derive_faucet_alerts,
    derive_sample_alerts,
    parameter_label,
    recommendations,
)
from faucet_guard.config import settings
from faucet_guard.data.faucets import FAUCETS, get_faucet
from faucet_guard.data.generator import make_rng
from faucet_guard.data.samples import SampleRepository
from faucet_guard.errors import FaucetGuardError
from faucet_guard.ingest.lab_csv import load_lab_results
from faucet_guard.limits.compliance import evaluate as evaluate_parameter
from faucet_guard.limits.registry import QUALITY_LIMITS, get_parameter_limit
from faucet_guard.models import Alert
from faucet_guard.quality.classifier import classify_sample
from faucet_guard.report.labels import alert_status_text, alert_type_text, quality_text
from faucet_guard.report.pdf_report import build_pdf_report
from faucet_guard.report.plots import plot_parameter_trend, plot_quality_distribution
from faucet_guard.report.summary import build_quality_report, dashboard_stats
from faucet_guard.utils.logging import console, error, info, print_table, styled, warn

app = typer.Typer(add_completion=False)

# Registry key -> column name in SampleRepository.chemical_trend()
TREND_CHARTS = (("pH", "ph"), ("turbidity", "turbidity"), ("freeChlorine", "chlorine"))


# -------------------------
# Helpers
# -------------------------
def _fmt_bound(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:g}"


def _derive_all_alerts(repo: SampleRepository, today) -> list[Alert]:
    alerts: list[Alert] = []
    for sample in repo:
        alerts.extend(derive_sample_alerts(sample, repo.result_for(sample)))
    for faucet in FAUCETS:
        alerts.extend(derive_faucet_alerts(faucet, today=today))
    return alerts


def run_report(
    days: Optional[int] = None,
    out_dir: Optional[str] = None,
    seed: Optional[int] = None,
    faucet_ids: Optional[List[str]] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Callable pipeline behind `report`. Returns path to PDF.
    Raises FaucetGuardError for bad input (unknown faucet ids).
    """
    days = settings.history_days if days is None else days
    out_dir_p = Path(out_dir or settings.output_dir)
    out_dir_p.mkdir(parents=True, exist_ok=True)
    now = now or datetime.now()

    run_log = out_dir_p / "run.log"

    def log(msg: str):
        stamp = time.strftime("%Y-%m-%d %H:%M:%S")
        try:
            with run_log.open("a", encoding="utf-8") as fh:
                fh.write(f"[{stamp}] {msg}\n")
        except OSError:
            pass

    faucet_ids = [get_faucet(fid).id for fid in (faucet_ids or [])]
    log(f"START run_report | days={days} | seed={seed} | faucets={faucet_ids or 'all'}")

    # -------------------------
    # History + alerts
    # -------------------------
    t0 = time.time()
    repo = SampleRepository()
    repo.generate_history(FAUCETS, days=days, rng=make_rng(seed), now=now)
    alerts = _derive_all_alerts(repo, now.date())
    log(f"Generated samples={len(repo)} alerts={len(alerts)} in {time.time()-t0:.2f}s")

    scoped = repo
    if faucet_ids:
        wanted = set(faucet_ids)
        scoped = SampleRepository(s for s in repo if s.faucet_id in wanted)

    report = build_quality_report(repo, alerts, now - timedelta(days=days), now, faucet_ids=faucet_ids, now=now)
    if report.samples_analyzed == 0:
        warn("No samples in the selected period; the report will be mostly empty.")

    stats = dashboard_stats(FAUCETS, repo, alerts, now=now)
    print_table(
        "Dashboard",
        ["Faucets", "Active", "Samples (month)", "Compliance", "Active alerts", "Critical"],
        [[
            stats.total_faucets,
            stats.active_faucets,
            stats.samples_this_month,
            f"{stats.compliance_rate}%",
            stats.active_alerts,
            stats.critical_alerts,
        ]],
    )

    # -------------------------
    # Charts
    # -------------------------
    images: list[str] = []
    dist_img = str(out_dir_p / "quality_distribution.png")
    plot_quality_distribution(report.summary, dist_img, title="Distribución de calidad")
    images.append(dist_img)

    trend = scoped.chemical_trend(now=now)
    for parameter, column in TREND_CHARTS:
        img = str(out_dir_p / f"trend_{parameter}.png")
        plot_parameter_trend(
            trend, parameter, img, title=f"{parameter_label(parameter)} — últimos {settings.trend_days} días",
            column=column,
        )
        images.append(img)
    log(f"Charts written: {len(images)}")

    # -------------------------
    # Build PDF
    # -------------------------
    out_pdf = str(out_dir_p / "faucet_guard_report.pdf")
    build_pdf_report(out_pdf=out_pdf, report=report, images=images)

    log(f"DONE | pdf={out_pdf}")
    return out_pdf


# -------------------------
# Typer CLI
# -------------------------
@app.command()
def limits(
    category: Optional[str] = typer.Option(None, help="physical|chemical|bacteriological"),
):
    """Show the permitted-limits registry."""
    rows = [
        [
            lim.parameter,
            lim.unit,
            lim.category,
            _fmt_bound(lim.min_value),
            _fmt_bound(lim.max_value),
            "yes" if lim.critical_level else "no",
        ]
        for lim in QUALITY_LIMITS
        if category is None or lim.category == category
    ]
    if not rows:
        warn(f"No parameters in category {category!r}.")
        return
    print_table("Permitted limits", ["Parameter", "Unit", "Category", "Min", "Max", "Critical"], rows)


@app.command()
def evaluate(
    parameter: str = typer.Argument(..., help="Registry key, e.g. pH or freeChlorine"),
    value: float = typer.Argument(..., help="Measured value"),
):
    """Evaluate one measurement against its limit."""
    try:
        result = evaluate_parameter(parameter, value)
    except FaucetGuardError as e:
        error(str(e))
        raise typer.Exit(code=1)

    if get_parameter_limit(parameter) is None:
        warn(f"{parameter} has no registered limit; treated as compliant.")
    verdict = "compliant" if result.compliant else "non-compliant"
    console.print(f"{parameter} = {value:g}: {styled(result.status.value)} ({verdict})")


@app.command()
def classify(
    csv_path: str = typer.Argument(..., help="Lab results CSV (long or wide layout)"),
    faucet_id: Optional[str] = typer.Option(None, help="Faucet the sample was collected from"),
):
    """Grade one lab sample and list its violations."""
    try:
        lab = load_lab_results(csv_path)
        if faucet_id:
            repo = SampleRepository()
            sample = repo.add_sample(faucet_id, lab.chemical, lab.bacteriological)
            result = repo.result_for(sample)
            alerts = derive_sample_alerts(sample, result)
        else:
            result = classify_sample(lab.chemical, lab.bacteriological)
            alerts = []
    except FaucetGuardError as e:
        error(str(e))
        raise typer.Exit(code=1)

    console.print(
        f"Grade: {styled(result.grade.value)} ({quality_text(result.grade)}) | "
        f"compliance: {result.compliance_status.value} | "
        f"violations: {result.violations} ({result.critical_violations} critical)"
    )

    violated = result.violated_parameters
    if violated:
        print_table(
            "Violations",
            ["Parameter", "Status"],
            [[p, styled(result.evaluations[p].status.value)] for p in violated],
        )
    if alerts:
        print_table(
            "Alerts",
            ["Severity", "Type", "Status", "Title", "Description"],
            [
                [styled(a.severity), alert_type_text(a.type), alert_status_text(a.status), a.title, a.description]
                for a in alerts
            ],
        )

    for rec in dedupe_preserve_order(recommendations(result)):
        console.print(f"• {rec}")


@app.command()
def report(
    days: int = typer.Option(settings.history_days, help="Days of history to generate and report on"),
    out_dir: str = typer.Option(settings.output_dir, help="Output folder"),
    seed: Optional[int] = typer.Option(None, help="Random seed for the mock history"),
    faucet_id: Optional[List[str]] = typer.Option(None, help="Restrict the report to these faucets"),
):
    """Generate mock history and build the PDF quality report."""
    try:
        out_pdf = run_report(days=days, out_dir=out_dir, seed=seed, faucet_ids=faucet_id)
    except FaucetGuardError as e:
        error(str(e))
        raise typer.Exit(code=1)
    info(f"Report generated: {out_pdf}")


if __name__ == "__main__":
    app()
