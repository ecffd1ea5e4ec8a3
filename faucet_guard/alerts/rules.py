from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from faucet_guard.config import settings
from faucet_guard.limits.compliance import EvaluationResult, ParameterStatus
from faucet_guard.limits.registry import ParameterLimit, get_parameter_limit
from faucet_guard.models import Alert, Faucet, WaterSample
from faucet_guard.quality.classifier import CRITICAL_CHEMICAL_PARAMETERS, QualityResult

# Display names used in alert titles
PARAMETER_LABELS = {
    "turbidity": "Turbidez",
    "color": "Color",
    "odor": "Olor",
    "taste": "Sabor",
    "temperature": "Temperatura",
    "pH": "pH",
    "conductivity": "Conductividad",
    "totalDissolvedSolids": "Sólidos disueltos totales",
    "totalHardness": "Dureza total",
    "chloride": "Cloruros",
    "sulfate": "Sulfatos",
    "nitrate": "Nitratos",
    "nitrite": "Nitritos",
    "ammonia": "Amoníaco",
    "iron": "Hierro",
    "manganese": "Manganeso",
    "copper": "Cobre",
    "zinc": "Zinc",
    "lead": "Plomo",
    "cadmium": "Cadmio",
    "chromium": "Cromo",
    "mercury": "Mercurio",
    "arsenic": "Arsénico",
    "freeChlorine": "Cloro libre",
    "totalChlorine": "Cloro total",
    "totalColiforms": "Coliformes totales",
    "fecalColiforms": "Coliformes fecales",
    "escherichiaColi": "E. coli",
    "enterococci": "Enterococos",
    "pseudomonasAeruginosa": "Pseudomonas aeruginosa",
    "heterotrophicBacteria": "Bacterias heterótrofas",
}


def parameter_label(parameter: str) -> str:
    return PARAMETER_LABELS.get(parameter, parameter)


def alert_severity(parameter: str, result: EvaluationResult, limit: Optional[ParameterLimit]) -> Optional[str]:
    """Severity for one evaluated parameter; None when it is compliant."""
    if result.compliant:
        return None
    bacteriological = limit is not None and limit.category == "bacteriological"
    if result.status is ParameterStatus.CRITICAL:
        if bacteriological or parameter in CRITICAL_CHEMICAL_PARAMETERS:
            return "critical"
        return "high"
    if bacteriological:
        return "high"
    return "medium"


def _violation_text(parameter: str, value: float, limit: ParameterLimit) -> str:
    label = parameter_label(parameter)
    if limit.max_value is not None and value > limit.max_value:
        return (
            f"{label} medido ({value:g} {limit.unit}) supera el límite máximo permitido "
            f"({limit.max_value:g} {limit.unit})."
        )
    return (
        f"{label} medido ({value:g} {limit.unit}) está por debajo del mínimo requerido "
        f"({limit.min_value:g} {limit.unit})."
    )


def derive_sample_alerts(
    sample: WaterSample,
    result: QualityResult,
    created_at: Optional[datetime] = None,
) -> list[Alert]:
    created_at = created_at or sample.analysis_date
    values = {
        **sample.chemical_parameters.as_parameters(),
        **sample.bacteriological_parameters.as_parameters(),
    }

    alerts: list[Alert] = []
    for parameter, evaluation in result.evaluations.items():
        limit = get_parameter_limit(parameter)
        severity = alert_severity(parameter, evaluation, limit)
        if severity is None or limit is None:
            continue

        bacteriological = limit.category == "bacteriological"
        alerts.append(
            Alert(
                id=f"alert-{sample.id}-{parameter}",
                type="bacteriological_contamination" if bacteriological else "chemical_exceedance",
                severity=severity,
                title=f"{parameter_label(parameter)} fuera de límites permitidos",
                description=_violation_text(parameter, values[parameter], limit),
                faucet_id=sample.faucet_id,
                sample_id=sample.id,
                parameter=parameter,
                created_at=created_at,
            )
        )
    return alerts


def derive_faucet_alerts(faucet: Faucet, today: Optional[date] = None) -> list[Alert]:
    today = today or date.today()
    created_at = datetime.combine(today, datetime.min.time())
    alerts: list[Alert] = []

    if faucet.status == "out_of_service":
        alerts.append(
            Alert(
                id=f"alert-{faucet.id}-equipment",
                type="equipment_failure",
                severity="medium",
                title="Punto de muestreo fuera de servicio",
                description=f"{faucet.name} presenta falla técnica y está fuera de servicio.",
                faucet_id=faucet.id,
                created_at=created_at,
            )
        )

    if faucet.next_maintenance is not None:
        days_left = (faucet.next_maintenance - today).days
        if days_left < 0:
            alerts.append(
                Alert(
                    id=f"alert-{faucet.id}-maintenance",
                    type="maintenance_due",
                    severity="medium",
                    title="Mantenimiento programado vencido",
                    description=f"{faucet.name} tiene mantenimiento vencido desde hace {-days_left} días.",
                    faucet_id=faucet.id,
                    created_at=created_at,
                )
            )
        elif days_left <= settings.maintenance_warning_days:
            alerts.append(
                Alert(
                    id=f"alert-{faucet.id}-maintenance",
                    type="maintenance_due",
                    severity="low",
                    title="Mantenimiento preventivo próximo",
                    description=f"{faucet.name} requiere mantenimiento preventivo en los próximos {days_left} días.",
                    faucet_id=faucet.id,
                    created_at=created_at,
                )
            )
    return alerts


# -------------------------
# Recommended actions
# -------------------------
_FECAL_INDICATORS = {"fecalColiforms", "escherichiaColi", "enterococci"}
_HEAVY_METALS = {"lead", "cadmium", "chromium", "mercury", "arsenic"}
_NITROGEN = {"nitrate", "nitrite", "ammonia"}
_AESTHETIC = {"color", "odor", "taste", "temperature", "iron", "manganese", "copper", "zinc"}
_MINERAL = {"conductivity", "totalDissolvedSolids", "totalHardness", "chloride", "sulfate"}


def recommendations(result: QualityResult) -> list[str]:
    violated = set(result.violated_parameters)
    recs: list[str] = []

    if violated & _FECAL_INDICATORS:
        recs.append(
            "Prioridad: retirar el punto de servicio, realizar desinfección de choque y volver a muestrear antes de reabrir."
        )
    if violated & {"totalColiforms", "pseudomonasAeruginosa"}:
        recs.append(
            "Prioridad: desinfectar y purgar la línea; inspeccionar accesorios y tanques en busca de biopelícula."
        )
    elif "heterotrophicBacteria" in violated:
        recs.append("Purgar el punto y revisar el desinfectante residual; volver a muestrear en 7 días.")

    if "freeChlorine" in violated:
        recs.append("Ajustar la dosificación para mantener el cloro libre residual entre 0.3 y 2.0 mg/L.")
    if "totalChlorine" in violated:
        recs.append("Revisar subproductos de desinfección y la dosificación de cloro total en el suministro.")

    if violated & _HEAVY_METALS:
        recs.append(
            "Prioridad: suspender el consumo; inspeccionar tuberías y soldaduras por lixiviación de metales pesados."
        )
    if violated & _NITROGEN:
        recs.append("Investigar posible contaminación del suministro por fertilizantes o aguas residuales.")
    if "pH" in violated:
        recs.append("Verificar la corrección de pH en el tratamiento y recalibrar los medidores de campo.")
    if "turbidity" in violated:
        recs.append("Revisar filtros y purgar la red; la turbidez alta protege a los microorganismos del desinfectante.")
    if violated & _MINERAL:
        recs.append("Hacer seguimiento al contenido mineral; evaluar ablandamiento o mezcla de fuentes si persiste.")
    if violated & _AESTHETIC:
        recs.append("Purgar la línea e inspeccionar corrosión en tuberías; parámetros organolépticos fuera de rango.")

    if not recs:
        recs.append("No se requieren acciones correctivas; continuar con el programa de muestreo rutinario.")
    return recs


def dedupe_preserve_order(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))
