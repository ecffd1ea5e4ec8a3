from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from faucet_guard.limits.compliance import check_measurement
from faucet_guard.quality.classifier import ComplianceStatus, QualityGrade


# -------------------------
# Measurement groups
# -------------------------
class _MeasurementGroup(BaseModel):
    """
    Flat group of required numeric measurements.
    Field aliases are the limits-registry keys (e.g. `free_chlorine` -> "freeChlorine").
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _numeric(cls, v, info):
        return check_measurement(info.field_name, v)

    @classmethod
    def parameter_names(cls) -> tuple[str, ...]:
        return tuple(f.alias or name for name, f in cls.model_fields.items())

    def as_parameters(self) -> dict[str, float]:
        """Registry key -> value, in declaration order."""
        return self.model_dump(by_alias=True)


class ChemicalParameters(_MeasurementGroup):
    # Physical
    turbidity: float  # NTU
    color: float  # UPC
    odor: float
    taste: float
    temperature: float  # °C

    # Basic chemistry
    ph: float = Field(alias="pH")
    conductivity: float  # μS/cm
    total_dissolved_solids: float  # mg/L
    total_hardness: float  # mg/L CaCO3

    # Major ions (mg/L)
    chloride: float
    sulfate: float
    nitrate: float
    nitrite: float
    ammonia: float

    # Metals (mg/L)
    iron: float
    manganese: float
    copper: float
    zinc: float
    lead: float
    cadmium: float
    chromium: float
    mercury: float
    arsenic: float

    # Residual disinfectant (mg/L)
    free_chlorine: float
    total_chlorine: float


class BacteriologicalParameters(_MeasurementGroup):
    total_coliforms: float  # UFC/100mL
    fecal_coliforms: float  # UFC/100mL
    escherichia_coli: float  # UFC/100mL
    enterococci: float  # UFC/100mL
    pseudomonas_aeruginosa: float  # UFC/100mL
    heterotrophic_bacteria: float  # UFC/mL


# -------------------------
# Campus entities
# -------------------------
FaucetType = Literal["drinking_fountain", "tap", "water_cooler"]
FaucetStatus = Literal["active", "out_of_service", "maintenance"]


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    latitude: float
    longitude: float
    building: str
    floor: str
    description: Optional[str] = None


class Faucet(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    code: str
    name: str
    location: Location
    type: FaucetType
    status: FaucetStatus
    installation_date: date
    last_maintenance: Optional[date] = None
    next_maintenance: Optional[date] = None


SampleStatus = Literal["pending", "in_analysis", "completed", "rejected"]


class WaterSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    sample_code: str
    faucet_id: str
    collection_date: datetime
    collection_time: str
    collected_by: str
    analysis_date: datetime
    laboratory_id: str

    chemical_parameters: ChemicalParameters
    bacteriological_parameters: BacteriologicalParameters

    status: SampleStatus = "completed"
    observations: Optional[str] = None
    quality_rating: QualityGrade
    compliance_status: ComplianceStatus


# -------------------------
# Alerts
# -------------------------
AlertType = Literal[
    "chemical_exceedance", "bacteriological_contamination", "equipment_failure", "maintenance_due"
]
AlertSeverity = Literal["low", "medium", "high", "critical"]
AlertStatus = Literal["active", "acknowledged", "resolved"]


class Alert(BaseModel):
    id: str
    type: AlertType
    severity: AlertSeverity
    title: str
    description: str
    faucet_id: Optional[str] = None
    sample_id: Optional[str] = None
    parameter: Optional[str] = None
    created_at: datetime
    resolved_at: Optional[datetime] = None
    status: AlertStatus = "active"
    assigned_to: Optional[str] = None
