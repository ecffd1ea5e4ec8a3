from __future__ import annotations

from pathlib import Path

import pandas as pd
import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from faucet_guard.alerts.rules import parameter_label
from faucet_guard.limits.registry import get_parameter_limit
from faucet_guard.report.labels import QUALITY_COLORS, QUALITY_TEXT


def _empty_chart(out_path: str, title: str, message: str):
    fig = plt.figure(figsize=(6.6, 2.6), dpi=160)
    ax = fig.add_subplot(111)
    ax.set_title(title, fontsize=11)
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=10)
    ax.set_axis_off()
    plt.tight_layout()
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)


def plot_quality_distribution(summary: dict[str, int], out_path: str, title: str):
    """
    Bar chart of sample counts per quality grade, best to worst,
    colored like the dashboard badges.
    """
    out_path = str(out_path)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)

    grades = list(QUALITY_TEXT.keys())
    counts = [summary.get(g, 0) for g in grades]

    fig = plt.figure(figsize=(6.6, 2.6), dpi=160)
    ax = fig.add_subplot(111)

    ax.bar([QUALITY_TEXT[g] for g in grades], counts, color=[QUALITY_COLORS[g] for g in grades])
    ax.set_title(title, fontsize=11, pad=10)
    ax.set_ylabel("Muestras", fontsize=9)
    ax.yaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.tick_params(axis="both", labelsize=8)
    ax.grid(True, axis="y", alpha=0.25)

    plt.tight_layout()
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)


def plot_parameter_trend(df: pd.DataFrame, parameter: str, out_path: str, title: str, column: str = None):
    """
    Line chart of one parameter over time with its regulatory bounds.
    `df` needs a `date` column plus the parameter column (registry key unless `column` is given).
    """
    out_path = str(out_path)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    column = column or parameter

    if df.empty or column not in df.columns:
        _empty_chart(out_path, title, "Sin datos en el periodo")
        return

    d = df[["date", column]].dropna()
    x = pd.to_datetime(d["date"])

    fig = plt.figure(figsize=(6.6, 2.6), dpi=160)
    ax = fig.add_subplot(111)

    ax.plot(x, d[column], linewidth=1.6, marker="o", markersize=2.5)

    limit = get_parameter_limit(parameter)
    unit = ""
    if limit is not None:
        unit = limit.unit
        if limit.max_value is not None:
            ax.axhline(limit.max_value, color="#dc2626", linestyle="--", linewidth=1.0, label="Máximo")
        if limit.min_value is not None:
            ax.axhline(limit.min_value, color="#f59e0b", linestyle="--", linewidth=1.0, label="Mínimo")
        ax.legend(fontsize=7, loc="upper right")

    ax.set_title(title, fontsize=11, pad=10)
    ax.set_xlabel("Fecha", fontsize=9)
    ax.set_ylabel(f"{parameter_label(parameter)} ({unit})" if unit else parameter_label(parameter), fontsize=9)
    locator = mdates.AutoDateLocator(maxticks=6)
    ax.xaxis.set_major_locator(locator)
    ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))

    ax.tick_params(axis="both", labelsize=8)
    ax.grid(True, alpha=0.25)

    plt.tight_layout()
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)
