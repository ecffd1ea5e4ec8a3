"""Shared pytest fixtures for faucet_guard tests."""

from __future__ import annotations

from datetime import datetime

import matplotlib
import pytest

matplotlib.use("Agg")

from faucet_guard.data.samples import SampleRepository  # noqa: E402
from faucet_guard.models import BacteriologicalParameters, ChemicalParameters  # noqa: E402

# ============================================================================
# Measurement Fixtures
# ============================================================================


@pytest.fixture
def clean_chemical() -> dict[str, float]:
    """Chemical values comfortably inside every limit."""
    return {
        "turbidity": 1.0,
        "color": 5.0,
        "odor": 1.0,
        "taste": 1.0,
        "temperature": 20.0,
        "pH": 7.2,
        "conductivity": 300.0,
        "totalDissolvedSolids": 200.0,
        "totalHardness": 120.0,
        "chloride": 30.0,
        "sulfate": 25.0,
        "nitrate": 1.5,
        "nitrite": 0.02,
        "ammonia": 0.1,
        "iron": 0.05,
        "manganese": 0.01,
        "copper": 0.2,
        "zinc": 0.1,
        "lead": 0.002,
        "cadmium": 0.0003,
        "chromium": 0.01,
        "mercury": 0.0002,
        "arsenic": 0.002,
        "freeChlorine": 1.0,
        "totalChlorine": 1.2,
    }


@pytest.fixture
def clean_bacteriological() -> dict[str, float]:
    """No indicator organisms and a low heterotrophic count."""
    return {
        "totalColiforms": 0,
        "fecalColiforms": 0,
        "escherichiaColi": 0,
        "enterococci": 0,
        "pseudomonasAeruginosa": 0,
        "heterotrophicBacteria": 40,
    }


@pytest.fixture
def chemical(clean_chemical: dict[str, float]) -> ChemicalParameters:
    return ChemicalParameters.model_validate(clean_chemical)


@pytest.fixture
def bacteriological(clean_bacteriological: dict[str, float]) -> BacteriologicalParameters:
    return BacteriologicalParameters.model_validate(clean_bacteriological)


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference time so date windows are deterministic."""
    return datetime(2025, 3, 15, 12, 0, 0)


@pytest.fixture
def repo() -> SampleRepository:
    return SampleRepository()


@pytest.fixture
def history(now: datetime) -> SampleRepository:
    """Seeded mock history over the last 60 days."""
    from faucet_guard.data.generator import make_rng

    r = SampleRepository()
    r.generate_history(days=60, rng=make_rng(42), now=now)
    return r
