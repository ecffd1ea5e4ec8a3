# Permitted limits per the Colombian technical regulation for drinking water
# and basic sanitation (RAS), Title C - Water treatment systems.
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping, Optional

Category = Literal["physical", "chemical", "bacteriological"]


@dataclass(frozen=True)
class ParameterLimit:
    parameter: str
    unit: str
    category: Category
    critical_level: bool
    min_value: Optional[float] = None
    max_value: Optional[float] = None


QUALITY_LIMITS: tuple[ParameterLimit, ...] = (
    # Physical
    ParameterLimit("turbidity", "NTU", "physical", True, max_value=2),
    ParameterLimit("color", "UPC", "physical", False, max_value=15),
    ParameterLimit("odor", "Umbral", "physical", False, max_value=3),
    ParameterLimit("taste", "Umbral", "physical", False, max_value=3),
    ParameterLimit("temperature", "°C", "physical", False, max_value=30),

    # Basic chemistry
    ParameterLimit("pH", "pH units", "chemical", True, min_value=6.5, max_value=9.0),
    ParameterLimit("conductivity", "μS/cm", "chemical", False, max_value=1000),
    ParameterLimit("totalDissolvedSolids", "mg/L", "chemical", False, max_value=500),
    ParameterLimit("totalHardness", "mg/L CaCO3", "chemical", False, max_value=300),

    # Major ions
    ParameterLimit("chloride", "mg/L", "chemical", False, max_value=250),
    ParameterLimit("sulfate", "mg/L", "chemical", False, max_value=250),
    ParameterLimit("nitrate", "mg/L", "chemical", True, max_value=10),
    ParameterLimit("nitrite", "mg/L", "chemical", True, max_value=0.1),
    ParameterLimit("ammonia", "mg/L", "chemical", False, max_value=0.5),

    # Metals
    ParameterLimit("iron", "mg/L", "chemical", False, max_value=0.3),
    ParameterLimit("manganese", "mg/L", "chemical", False, max_value=0.1),
    ParameterLimit("copper", "mg/L", "chemical", False, max_value=1.0),
    ParameterLimit("zinc", "mg/L", "chemical", False, max_value=3.0),
    ParameterLimit("lead", "mg/L", "chemical", True, max_value=0.01),
    ParameterLimit("cadmium", "mg/L", "chemical", True, max_value=0.003),
    ParameterLimit("chromium", "mg/L", "chemical", True, max_value=0.05),
    ParameterLimit("mercury", "mg/L", "chemical", True, max_value=0.001),
    ParameterLimit("arsenic", "mg/L", "chemical", True, max_value=0.01),

    # Residual disinfectant
    ParameterLimit("freeChlorine", "mg/L", "chemical", True, min_value=0.3, max_value=2.0),
    ParameterLimit("totalChlorine", "mg/L", "chemical", False, max_value=5.0),

    # Bacteriological
    ParameterLimit("totalColiforms", "UFC/100mL", "bacteriological", True, max_value=0),
    ParameterLimit("fecalColiforms", "UFC/100mL", "bacteriological", True, max_value=0),
    ParameterLimit("escherichiaColi", "UFC/100mL", "bacteriological", True, max_value=0),
    ParameterLimit("enterococci", "UFC/100mL", "bacteriological", True, max_value=0),
    ParameterLimit("pseudomonasAeruginosa", "UFC/100mL", "bacteriological", True, max_value=0),
    ParameterLimit("heterotrophicBacteria", "UFC/mL", "bacteriological", False, max_value=500),
)


def _build_index(limits: tuple[ParameterLimit, ...]) -> Mapping[str, ParameterLimit]:
    index: dict[str, ParameterLimit] = {}
    for limit in limits:
        if limit.parameter in index:
            raise ValueError(f"Duplicate parameter in limits registry: {limit.parameter!r}")
        index[limit.parameter] = limit
    return MappingProxyType(index)


_LIMITS_BY_PARAMETER = _build_index(QUALITY_LIMITS)


def get_parameter_limit(parameter: str) -> Optional[ParameterLimit]:
    return _LIMITS_BY_PARAMETER.get(parameter)


def limits_by_category(category: str) -> list[ParameterLimit]:
    return [limit for limit in QUALITY_LIMITS if limit.category == category]


def registered_parameters() -> tuple[str, ...]:
    return tuple(_LIMITS_BY_PARAMETER.keys())


PARAMETER_CATEGORIES = MappingProxyType({
    "physical": MappingProxyType({
        "name": "Parámetros Físicos",
        "description": "Características físicas del agua como turbidez, color, olor y sabor",
        "color": "#3b82f6",
    }),
    "chemical": MappingProxyType({
        "name": "Parámetros Químicos",
        "description": "Composición química del agua incluyendo pH, iones y metales",
        "color": "#10b981",
    }),
    "bacteriological": MappingProxyType({
        "name": "Parámetros Bacteriológicos",
        "description": "Presencia de microorganismos indicadores de contaminación",
        "color": "#f59e0b",
    }),
})
