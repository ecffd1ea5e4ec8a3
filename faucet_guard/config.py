import os
from typing import Optional

from pydantic import BaseModel


class Settings(BaseModel):
    campus_name: str = "Campus Universitario"
    laboratory_id: str = "lab-001"

    # None -> a fresh, nondeterministic generator on every run
    random_seed: Optional[int] = None

    # Mock history generation
    history_days: int = 90
    samples_per_faucet: tuple[int, int] = (8, 12)
    out_of_limits_probability: float = 0.05
    bacteriological_compliance_probability: float = 0.9

    # Alerts
    maintenance_warning_days: int = 7

    # Reporting
    trend_days: int = 30
    output_dir: str = "data/outputs"
    timezone: str = os.getenv("FG_TZ") or "America/Bogota"


settings = Settings()
