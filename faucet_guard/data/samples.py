from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from faucet_guard.config import settings
from faucet_guard.data.faucets import FAUCETS, get_faucet
from faucet_guard.data.generator import (
    generate_bacteriological_parameters,
    generate_chemical_parameters,
    make_rng,
    random_collection_time,
    random_collector,
)
from faucet_guard.errors import DuplicateSampleError
from faucet_guard.models import BacteriologicalParameters, ChemicalParameters, Faucet, WaterSample
from faucet_guard.quality.classifier import (
    ComplianceStatus,
    QualityGrade,
    QualityResult,
    classify_sample,
)
from faucet_guard.utils.logging import info
from faucet_guard.utils.rounding import rate_percent

NON_COMPLIANT_OBSERVATION = "Muestra no conforme - requiere acciones correctivas"

TREND_CHEMICAL = {"pH": "ph", "turbidity": "turbidity", "freeChlorine": "chlorine", "conductivity": "conductivity"}
TREND_BACTERIOLOGICAL = (
    "totalColiforms", "fecalColiforms", "escherichiaColi", "enterococci", "pseudomonasAeruginosa",
)
DEFAULT_STATS_PARAMETERS = ("pH", "turbidity", "freeChlorine", "conductivity", "totalHardness", "nitrate")


def _ymd(d: datetime) -> str:
    return d.strftime("%Y%m%d")


class SampleRepository:
    """
    Append-only, in-memory sample collection kept sorted newest first.
    Grade and compliance are stamped once, when a sample is added.
    Sample ids are unique within a repository; generated ids come from a
    counter that is never reused.
    Single writer; no locking.
    """

    def __init__(self, samples: Iterable[WaterSample] = ()):
        self._samples: list[WaterSample] = []
        self._results: dict[str, QualityResult] = {}
        self._by_id: dict[str, WaterSample] = {}
        self._seq = 0
        for sample in samples:
            self._register(sample)
        self._sort()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    @property
    def samples(self) -> tuple[WaterSample, ...]:
        return tuple(self._samples)

    def _sort(self) -> None:
        self._samples.sort(key=lambda s: s.collection_date, reverse=True)

    def _register(self, sample: WaterSample) -> None:
        if sample.id in self._by_id:
            raise DuplicateSampleError(sample.id)
        self._by_id[sample.id] = sample
        self._samples.append(sample)

    def _next_id(self, faucet: Faucet) -> tuple[str, int]:
        while True:
            self._seq += 1
            candidate = f"sample-{faucet.id}-{self._seq:03d}"
            if candidate not in self._by_id:
                return candidate, self._seq

    # -------------------------
    # Ingestion
    # -------------------------
    def add_sample(
        self,
        faucet_id: str,
        chemical: ChemicalParameters,
        bacteriological: BacteriologicalParameters,
        *,
        collection_date: Optional[datetime] = None,
        analysis_date: Optional[datetime] = None,
        collection_time: Optional[str] = None,
        collected_by: str = "Carga de reporte",
        laboratory_id: Optional[str] = None,
        observations: Optional[str] = None,
        sample_id: Optional[str] = None,
        sample_code: Optional[str] = None,
    ) -> WaterSample:
        faucet = get_faucet(faucet_id)

        collection_date = collection_date or datetime.now()
        analysis_date = analysis_date or collection_date + timedelta(days=1)

        result = classify_sample(chemical, bacteriological)
        if observations is None and result.grade is QualityGrade.UNACCEPTABLE:
            observations = NON_COMPLIANT_OBSERVATION

        if sample_id is not None and sample_id in self._by_id:
            raise DuplicateSampleError(sample_id)
        generated_id, seq = self._next_id(faucet)
        sample = WaterSample(
            id=sample_id or generated_id,
            sample_code=sample_code or f"{faucet.code}-{_ymd(collection_date)}-{seq:02d}",
            faucet_id=faucet.id,
            collection_date=collection_date,
            collection_time=collection_time or collection_date.strftime("%H:%M"),
            collected_by=collected_by,
            analysis_date=analysis_date,
            laboratory_id=laboratory_id or settings.laboratory_id,
            chemical_parameters=chemical,
            bacteriological_parameters=bacteriological,
            status="completed",
            observations=observations,
            quality_rating=result.grade,
            compliance_status=result.compliance_status,
        )

        self._register(sample)
        self._results[sample.id] = result
        self._sort()
        return sample

    def result_for(self, sample: WaterSample) -> QualityResult:
        """Per-parameter evaluation; cached only for samples stored in this repository."""
        if self._by_id.get(sample.id) != sample:
            return classify_sample(sample.chemical_parameters, sample.bacteriological_parameters)
        result = self._results.get(sample.id)
        if result is None:
            result = classify_sample(sample.chemical_parameters, sample.bacteriological_parameters)
            self._results[sample.id] = result
        return result

    def generate_history(
        self,
        faucets: Sequence[Faucet] = FAUCETS,
        days: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """Fill the repository with mock samples for every active faucet. Returns count added."""
        days = settings.history_days if days is None else days
        rng = rng if rng is not None else make_rng()
        now = now or datetime.now()
        lo, hi = settings.samples_per_faucet

        added = 0
        for faucet in faucets:
            if faucet.status != "active":
                continue
            count = int(rng.integers(lo, hi + 1))
            for _ in range(count):
                collected = now - timedelta(days=int(rng.integers(0, days)))
                analysed = collected + timedelta(days=1 + int(rng.integers(0, 3)))
                self.add_sample(
                    faucet.id,
                    generate_chemical_parameters(faucet, rng),
                    generate_bacteriological_parameters(rng),
                    collection_date=collected,
                    analysis_date=analysed,
                    collection_time=random_collection_time(rng),
                    collected_by=random_collector(rng),
                )
                added += 1

        info(f"Generated {added:,} mock samples over the last {days} days.")
        return added

    # -------------------------
    # Queries
    # -------------------------
    def by_faucet(self, faucet_id: str) -> list[WaterSample]:
        return [s for s in self._samples if s.faucet_id == faucet_id]

    def by_date_range(self, start: datetime, end: datetime) -> list[WaterSample]:
        return [s for s in self._samples if start <= s.collection_date <= end]

    def by_compliance(self, status: ComplianceStatus | str) -> list[WaterSample]:
        status = ComplianceStatus(status)
        return [s for s in self._samples if s.compliance_status is status]

    def latest_for_faucet(self, faucet_id: str) -> Optional[WaterSample]:
        samples = self.by_faucet(faucet_id)
        return samples[0] if samples else None

    # -------------------------
    # Statistics
    # -------------------------
    def stats(self, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        total = len(self._samples)
        compliant = len(self.by_compliance(ComplianceStatus.COMPLIANT))
        return {
            "total": total,
            "compliant": compliant,
            "non_compliant": len(self.by_compliance(ComplianceStatus.NON_COMPLIANT)),
            "compliance_rate": rate_percent(compliant, total),
            "quality_distribution": quality_distribution(self._samples),
            "this_month": sum(1 for s in self._samples if s.collection_date >= month_start),
        }

    def bacteriological_stats(self) -> dict:
        total = len(self._samples)
        compliant = len(self.by_compliance(ComplianceStatus.COMPLIANT))
        bact = [s.bacteriological_parameters for s in self._samples]
        return {
            "total": total,
            "compliant": compliant,
            "non_compliant": total - compliant,
            "compliance_rate": rate_percent(compliant, total),
            "avg_total_coliforms": float(np.mean([b.total_coliforms for b in bact])) if bact else 0.0,
            "avg_escherichia_coli": float(np.mean([b.escherichia_coli for b in bact])) if bact else 0.0,
            "contaminated": sum(1 for b in bact if b.escherichia_coli > 0),
        }

    # -------------------------
    # pandas views
    # -------------------------
    def to_frame(self) -> pd.DataFrame:
        """One row per sample; measurement columns are registry keys."""
        rows = []
        for s in self._samples:
            row = {
                "sample_id": s.id,
                "sample_code": s.sample_code,
                "faucet_id": s.faucet_id,
                "collection_date": s.collection_date,
                "quality_rating": s.quality_rating.value,
                "compliance_status": s.compliance_status.value,
            }
            row.update(s.chemical_parameters.as_parameters())
            row.update(s.bacteriological_parameters.as_parameters())
            rows.append(row)
        return pd.DataFrame(rows)

    def _recent_frame(self, days: int, now: Optional[datetime]) -> pd.DataFrame:
        df = self.to_frame()
        if df.empty:
            return df
        cutoff = (now or datetime.now()) - timedelta(days=days)
        df = df[df["collection_date"] >= cutoff].sort_values("collection_date")
        df["date"] = pd.to_datetime(df["collection_date"]).dt.strftime("%Y-%m-%d")
        return df.reset_index(drop=True)

    def chemical_trend(self, days: Optional[int] = None, now: Optional[datetime] = None) -> pd.DataFrame:
        df = self._recent_frame(settings.trend_days if days is None else days, now)
        if df.empty:
            return pd.DataFrame(columns=["date", *TREND_CHEMICAL.values()])
        return df[["date", *TREND_CHEMICAL]].rename(columns=TREND_CHEMICAL)

    def bacteriological_trend(self, days: Optional[int] = None, now: Optional[datetime] = None) -> pd.DataFrame:
        df = self._recent_frame(settings.trend_days if days is None else days, now)
        if df.empty:
            return pd.DataFrame(columns=["date", *TREND_BACTERIOLOGICAL])
        return df[["date", *TREND_BACTERIOLOGICAL]]

    def parameter_stats(self, parameters: Sequence[str] = DEFAULT_STATS_PARAMETERS) -> pd.DataFrame:
        df = self.to_frame()
        columns = ["parameter", "average", "minimum", "maximum", "sample_count"]
        if df.empty:
            return pd.DataFrame(columns=columns)
        rows = []
        for param in parameters:
            values = df[param].dropna()
            rows.append({
                "parameter": param,
                "average": float(values.mean()),
                "minimum": float(values.min()),
                "maximum": float(values.max()),
                "sample_count": int(values.size),
            })
        return pd.DataFrame(rows, columns=columns)


def quality_distribution(samples: Iterable[WaterSample]) -> dict[str, int]:
    counts = {grade.value: 0 for grade in QualityGrade}
    for s in samples:
        counts[s.quality_rating.value] += 1
    return counts
