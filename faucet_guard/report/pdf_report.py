from __future__ import annotations

import os
from datetime import datetime
from typing import Optional

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas
from reportlab.lib.colors import black, HexColor
from reportlab.lib.utils import ImageReader, simpleSplit
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from faucet_guard.config import settings
from faucet_guard.report.labels import QUALITY_COLORS, QUALITY_TEXT, severity_color, severity_text
from faucet_guard.report.summary import QualityReport

COLORS = {
    "compliant": HexColor("#10b981"),
    "watch": HexColor("#f59e0b"),
    "non_compliant": HexColor("#dc2626"),
    "panel": HexColor("#0F1A24"),
    "panel2": HexColor("#13222F"),
    "muted": HexColor("#B6C0CF"),
    "text": HexColor("#F2F5FA"),
    "line": HexColor("#2A2F3A"),
}


def _rate_color(rate: int):
    if rate >= 95:
        return COLORS["compliant"]
    if rate >= 80:
        return COLORS["watch"]
    return COLORS["non_compliant"]


def _now_local_str(tzname: Optional[str] = None) -> str:
    tzname = tzname or settings.timezone
    try:
        return datetime.now(ZoneInfo(tzname)).strftime("%Y-%m-%d %H:%M %Z")
    except (ZoneInfoNotFoundError, ValueError):
        # No tz database on this host: system local time
        pass
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M %Z")


def _draw_lines(c: canvas.Canvas, x: float, y: float, text: str, max_width: float, leading: float = 13) -> float:
    """Draw text split to max_width in the current font; returns the y below the last line."""
    if not text:
        return y
    for line in simpleSplit(text, c._fontname, c._fontsize, max_width):
        c.drawString(x, y, line)
        y -= leading
    return y


def _safe_img_paths(paths: list[str]) -> list[str]:
    return [p for p in (paths or []) if p and os.path.exists(p)]


def _pretty_chart_title(path: str) -> str:
    name = os.path.basename(path).replace(".png", "")
    if name == "quality_distribution":
        return "Distribución de calidad de las muestras"
    if name.startswith("trend_"):
        return f"Tendencia — {name.split('trend_', 1)[1]}"
    return name.replace("_", " ").title()


def _draw_chart(c: canvas.Canvas, path: str, x: float, y: float, width: float, height: float) -> None:
    c.setFont("Helvetica-Bold", 11)
    c.setFillColor(black)
    c.drawString(x, y, _pretty_chart_title(path))
    try:
        c.drawImage(
            ImageReader(path), x, y - 10 - height, width=width, height=height, preserveAspectRatio=True, mask="auto"
        )
    except Exception:
        c.setFont("Helvetica", 10)
        c.drawString(x, y - 24, f"(No se pudo dibujar la imagen: {path})")


def _draw_chart_pages(c: canvas.Canvas, paths: list[str], page_w: float, page_h: float, margin: float) -> None:
    """Two charts per page, stacked."""
    slot_h = 250
    for start in range(0, len(paths), 2):
        c.setFont("Helvetica-Bold", 14)
        c.setFillColor(black)
        c.drawString(margin, page_h - 52, "Gráficas")
        for slot, path in enumerate(paths[start:start + 2]):
            top = page_h - 80 - slot * (slot_h + 28)
            _draw_chart(c, path, margin, top, page_w - 2 * margin, slot_h)
        c.showPage()


def _draw_grade_bars(c: canvas.Canvas, x: float, y: float, width: float, summary: dict[str, int]) -> None:
    """Horizontal stacked bar of the grade distribution with a legend underneath."""
    total = sum(summary.values())
    if total <= 0:
        return
    bar_h = 12
    cursor = x
    for grade, count in summary.items():
        if count <= 0:
            continue
        w = width * count / total
        c.setFillColor(HexColor(QUALITY_COLORS[grade]))
        c.rect(cursor, y, w, bar_h, fill=1, stroke=0)
        cursor += w

    c.setFont("Helvetica", 9)
    lx = x
    for grade, count in summary.items():
        c.setFillColor(HexColor(QUALITY_COLORS[grade]))
        c.rect(lx, y - 16, 7, 7, fill=1, stroke=0)
        c.setFillColor(COLORS["muted"])
        label = f"{QUALITY_TEXT[grade]} {count}"
        c.drawString(lx + 10, y - 15, label)
        lx += c.stringWidth(label, "Helvetica", 9) + 24


def build_pdf_report(
    out_pdf: str,
    report: QualityReport,
    images: list[str],
    campus_name: Optional[str] = None,
):
    os.makedirs(os.path.dirname(out_pdf) or ".", exist_ok=True)
    campus_name = campus_name or settings.campus_name

    c = canvas.Canvas(out_pdf, pagesize=letter)
    W, H = letter
    m = 48

    # ===== Header band =====
    band_h = 118
    c.setFillColor(COLORS["panel"])
    c.rect(0, H - band_h, W, band_h, fill=1, stroke=0)

    c.setFont("Helvetica-Bold", 22)
    c.setFillColor(COLORS["text"])
    c.drawString(m, H - 52, "Faucet Guard")

    c.setFont("Helvetica", 12)
    c.setFillColor(COLORS["muted"])
    c.drawString(m, H - 70, "Reporte de calidad del agua")

    c.setFont("Helvetica", 10.6)
    c.drawString(m, H - 92, f"Campus: {campus_name}")

    right_x = W - m
    c.drawRightString(
        right_x, H - 92, f"Periodo: {report.period_start:%Y-%m-%d} a {report.period_end:%Y-%m-%d}"
    )
    c.drawRightString(right_x, H - 106, f"Generado: {_now_local_str()}")

    # ===== Summary card =====
    panel_y = H - 300
    panel_h = 160
    c.setFillColor(COLORS["panel2"])
    c.roundRect(m, panel_y, W - 2 * m, panel_h, 14, fill=1, stroke=0)

    text_left = m + 18

    c.setFont("Helvetica-Bold", 44)
    c.setFillColor(_rate_color(report.compliance_rate))
    c.drawString(text_left, panel_y + panel_h - 66, f"{report.compliance_rate}%")

    c.setFont("Helvetica", 12)
    c.setFillColor(COLORS["muted"])
    c.drawString(text_left, panel_y + panel_h - 84, "de muestras conformes")

    c.setFont("Helvetica-Bold", 14)
    c.setFillColor(COLORS["text"])
    c.drawString(text_left + 190, panel_y + panel_h - 44, f"{report.samples_analyzed} muestras analizadas")

    c.setFont("Helvetica", 10.6)
    c.setFillColor(COLORS["muted"])
    c.drawString(
        text_left + 190,
        panel_y + panel_h - 62,
        f"{len(report.faucet_ids)} puntos de muestreo | {len(report.critical_findings)} alertas críticas activas",
    )

    _draw_grade_bars(c, text_left, panel_y + 40, W - 2 * m - 36, report.summary)

    # ===== Below card =====
    y = panel_y - 26

    c.setFont("Helvetica-Bold", 12.5)
    c.setFillColor(black)
    c.drawString(m, y, "Hallazgos críticos")
    y -= 16

    c.setFont("Helvetica", 11)
    if report.critical_findings:
        for alert in report.critical_findings[:5]:
            c.setFillColor(HexColor(severity_color(alert.severity)))
            sev = severity_text(alert.severity)
            y = _draw_lines(c, m + 8, y, f"• [{sev}] {alert.title}: {alert.description}", max_width=W - 2 * m - 8)
        c.setFillColor(black)
    else:
        y = _draw_lines(c, m + 8, y, "• No hay alertas críticas activas.", max_width=W - 2 * m - 8)

    y -= 6
    c.setStrokeColor(COLORS["line"])
    c.line(m, y, W - m, y)
    y -= 18

    c.setFont("Helvetica-Bold", 12)
    c.setFillColor(black)
    c.drawString(m, y, "Acciones recomendadas")
    y -= 16

    c.setFont("Helvetica", 10.8)
    for rec in (report.recommendations or [])[:8]:
        y = _draw_lines(c, m + 8, y, f"• {rec}", max_width=W - 2 * m - 8, leading=12)

    c.setFont("Helvetica-Oblique", 8.8)
    c.setFillColor(HexColor("#333333"))
    c.drawString(
        m,
        26,
        "Límites según el Reglamento Técnico del Sector de Agua Potable y Saneamiento Básico (RAS), Título C.",
    )

    c.showPage()

    _draw_chart_pages(c, _safe_img_paths(images), W, H, m)

    # ===== Per-sample findings =====
    if report.findings:
        y = H - m
        c.setFont("Helvetica-Bold", 14)
        c.setFillColor(black)
        c.drawString(m, y, "Muestras con hallazgos")
        y -= 18
        c.setFont("Helvetica", 10)

        maxw = W - 2 * m
        for line in report.findings:
            if y < 78:
                c.showPage()
                y = H - m
                c.setFont("Helvetica-Bold", 14)
                c.setFillColor(black)
                c.drawString(m, y, "Muestras con hallazgos (continuación)")
                y -= 18
                c.setFont("Helvetica", 10)

            y = _draw_lines(c, m, y, f"• {line}", max_width=maxw, leading=12)

    c.save()
