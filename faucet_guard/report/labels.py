"""es-CO display texts and colors shared by charts and the PDF report."""

QUALITY_COLORS = {
    "excellent": "#10b981",
    "good": "#3b82f6",
    "acceptable": "#f59e0b",
    "poor": "#ef4444",
    "unacceptable": "#dc2626",
}

QUALITY_TEXT = {
    "excellent": "Excelente",
    "good": "Buena",
    "acceptable": "Aceptable",
    "poor": "Deficiente",
    "unacceptable": "Inaceptable",
}

SEVERITY_COLORS = {
    "low": "#6b7280",
    "medium": "#f59e0b",
    "high": "#ef4444",
    "critical": "#dc2626",
}

SEVERITY_TEXT = {
    "low": "Baja",
    "medium": "Media",
    "high": "Alta",
    "critical": "Crítica",
}

ALERT_STATUS_TEXT = {
    "active": "Activa",
    "acknowledged": "Reconocida",
    "resolved": "Resuelta",
}

ALERT_TYPE_TEXT = {
    "chemical_exceedance": "Exceso Químico",
    "bacteriological_contamination": "Contaminación Bacteriológica",
    "equipment_failure": "Falla de Equipo",
    "maintenance_due": "Mantenimiento Requerido",
}


def _key(value) -> str:
    # Accept both plain strings and str-valued enums
    return getattr(value, "value", value)


def quality_text(grade) -> str:
    return QUALITY_TEXT[_key(grade)]


def quality_color(grade) -> str:
    return QUALITY_COLORS[_key(grade)]


def severity_text(severity: str) -> str:
    return SEVERITY_TEXT[severity]


def severity_color(severity: str) -> str:
    return SEVERITY_COLORS[severity]


def alert_type_text(alert_type: str) -> str:
    return ALERT_TYPE_TEXT[alert_type]


def alert_status_text(status: str) -> str:
    return ALERT_STATUS_TEXT[status]