from __future__ import annotations

from typing import Optional

import numpy as np

from faucet_guard.config import settings
from faucet_guard.models import BacteriologicalParameters, ChemicalParameters, Faucet

# Typical drinking-water ranges: registry key -> (low, high)
CHEMICAL_BASE_RANGES: dict[str, tuple[float, float]] = {
    "turbidity": (0.5, 1.5),
    "color": (2, 10),
    "odor": (1, 2),
    "taste": (1, 2),
    "temperature": (18, 26),
    "pH": (6.8, 8.2),
    "conductivity": (150, 450),
    "totalDissolvedSolids": (100, 300),
    "totalHardness": (80, 200),
    "chloride": (10, 50),
    "sulfate": (15, 50),
    "nitrate": (0.5, 2.5),
    "nitrite": (0.01, 0.04),
    "ammonia": (0.05, 0.2),
    "iron": (0.02, 0.1),
    "manganese": (0.005, 0.025),
    "copper": (0.1, 0.3),
    "zinc": (0.05, 0.2),
    "lead": (0.001, 0.004),
    "cadmium": (0.0001, 0.0006),
    "chromium": (0.005, 0.015),
    "mercury": (0.0001, 0.0003),
    "arsenic": (0.001, 0.003),
    "freeChlorine": (0.4, 1.6),
    "totalChlorine": (0.5, 2.0),
}

OUT_OF_LIMITS_CANDIDATES = ("turbidity", "pH", "nitrate", "freeChlorine")

COLLECTORS = ("Ana García", "Carlos Rodríguez", "María López", "Juan Pérez")


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(settings.random_seed if seed is None else seed)


def _uniform(rng: np.random.Generator, low: float, high: float) -> float:
    return float(low + rng.random() * (high - low))


def generate_chemical_parameters(faucet: Optional[Faucet], rng: np.random.Generator) -> ChemicalParameters:
    values = {name: _uniform(rng, lo, hi) for name, (lo, hi) in CHEMICAL_BASE_RANGES.items()}

    # Laboratory taps run slightly more mineralized
    if faucet is not None and faucet.type == "tap" and faucet.location.building == "Ciencias":
        values["conductivity"] *= 1.1
        values["totalDissolvedSolids"] *= 1.1

    if rng.random() < settings.out_of_limits_probability:
        issue = OUT_OF_LIMITS_CANDIDATES[int(rng.integers(len(OUT_OF_LIMITS_CANDIDATES)))]
        if issue == "turbidity":
            values["turbidity"] = _uniform(rng, 2.5, 4.5)
        elif issue == "pH":
            values["pH"] = 6.2 if rng.random() < 0.5 else 9.3
        elif issue == "nitrate":
            values["nitrate"] = _uniform(rng, 12, 17)
        else:
            values["freeChlorine"] = 0.1 if rng.random() < 0.5 else 2.5

    return ChemicalParameters.model_validate(values)


def generate_bacteriological_parameters(rng: np.random.Generator) -> BacteriologicalParameters:
    if rng.random() < settings.bacteriological_compliance_probability:
        values = {
            "totalColiforms": 0,
            "fecalColiforms": 0,
            "escherichiaColi": 0,
            "enterococci": 0,
            "pseudomonasAeruginosa": 0,
            "heterotrophicBacteria": int(rng.integers(0, 100)),
        }
    else:
        values = {
            "totalColiforms": int(rng.integers(0, 10)),
            "fecalColiforms": int(rng.integers(0, 5)),
            "escherichiaColi": int(rng.integers(0, 3)),
            "enterococci": int(rng.integers(0, 2)),
            "pseudomonasAeruginosa": int(rng.integers(0, 2)),
            "heterotrophicBacteria": 200 + int(rng.integers(0, 400)),
        }
    return BacteriologicalParameters.model_validate(values)


def random_collection_time(rng: np.random.Generator) -> str:
    return f"{8 + int(rng.integers(0, 8))}:{int(rng.integers(0, 60)):02d}"


def random_collector(rng: np.random.Generator) -> str:
    return COLLECTORS[int(rng.integers(len(COLLECTORS)))]
