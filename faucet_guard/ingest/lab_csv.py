from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from faucet_guard.errors import InvalidMeasurementError
from faucet_guard.models import BacteriologicalParameters, ChemicalParameters
from faucet_guard.utils.logging import info, warn


@dataclass
class LabResults:
    chemical: ChemicalParameters
    bacteriological: BacteriologicalParameters
    ignored: list[str] = field(default_factory=list)


# Common laboratory names (case-insensitive) -> registry key
PARAMETER_ALIASES: dict[str, str] = {
    "turbiedad": "turbidity",
    "turbidez": "turbidity",
    "color aparente": "color",
    "olor": "odor",
    "sabor": "taste",
    "temperatura": "temperature",
    "ph": "pH",
    "conductividad": "conductivity",
    "sólidos disueltos totales": "totalDissolvedSolids",
    "solidos disueltos totales": "totalDissolvedSolids",
    "tds": "totalDissolvedSolids",
    "dureza total": "totalHardness",
    "cloruros": "chloride",
    "sulfatos": "sulfate",
    "nitratos": "nitrate",
    "nitritos": "nitrite",
    "amoníaco": "ammonia",
    "amoniaco": "ammonia",
    "hierro": "iron",
    "hierro total": "iron",
    "manganeso": "manganese",
    "cobre": "copper",
    "plomo": "lead",
    "cadmio": "cadmium",
    "cromo": "chromium",
    "mercurio": "mercury",
    "arsénico": "arsenic",
    "arsenico": "arsenic",
    "cloro libre": "freeChlorine",
    "cloro residual libre": "freeChlorine",
    "free chlorine": "freeChlorine",
    "cloro total": "totalChlorine",
    "coliformes totales": "totalColiforms",
    "coliformes fecales": "fecalColiforms",
    "e. coli": "escherichiaColi",
    "e.coli": "escherichiaColi",
    "escherichia coli": "escherichiaColi",
    "enterococos": "enterococci",
    "pseudomonas aeruginosa": "pseudomonasAeruginosa",
    "bacterias heterótrofas": "heterotrophicBacteria",
    "bacterias heterotrofas": "heterotrophicBacteria",
    "heterótrofos": "heterotrophicBacteria",
}

PARAMETER_CANDIDATES = ["parameter", "parámetro", "parametro", "analito", "ensayo"]
VALUE_CANDIDATES = ["value", "valor", "resultado", "result"]

# Below-detection / absence markers reported by labs
NOT_DETECTED = {"nd", "n.d.", "ausente", "ausencia", "absent", "not detected", "no detectado"}

_KNOWN_KEYS = set(ChemicalParameters.parameter_names()) | set(BacteriologicalParameters.parameter_names())
_KEY_BY_LOWER = {k.lower(): k for k in _KNOWN_KEYS}


def resolve_parameter(name: str) -> Optional[str]:
    """Map a lab column/row name onto a registry key, or None if unrecognized."""
    n = re.sub(r"\s+", " ", str(name).strip().lower())
    # Drop a trailing unit in parentheses: "Turbiedad (NTU)"
    n = re.sub(r"\s*\(.*\)$", "", n)
    if n in _KEY_BY_LOWER:
        return _KEY_BY_LOWER[n]
    return PARAMETER_ALIASES.get(n)


_NUMBER = re.compile(r"^([-+]?[\d.,]*\d)(e[-+]?\d+)?")


def _normalize_separators(number: str, raw) -> str:
    """
    '1.050,5' and '1,050.5' -> '1050.5'; '0,8' -> '0.8'.
    With both separators the last one is the decimal mark and the other must
    group thousands. A lone separator that repeats is ambiguous.
    """
    if "." in number and "," in number:
        decimal = "," if number.rfind(",") > number.rfind(".") else "."
        group = "." if decimal == "," else ","
        integer, _, fraction = number.rpartition(decimal)
        if not re.fullmatch(rf"[-+]?\d{{1,3}}(\{group}\d{{3}})+", integer):
            raise InvalidMeasurementError(f"Ambiguous digit grouping in measurement value: {raw!r}")
        return integer.replace(group, "") + "." + fraction

    if number.count(",") > 1 or number.count(".") > 1:
        raise InvalidMeasurementError(f"Ambiguous digit grouping in measurement value: {raw!r}")
    return number.replace(",", ".")


def coerce_value(raw) -> float:
    """
    Turn values like '0,8', '1.050,5', '245 µS/cm', 'ND' or '<1' into floats.
    Below-detection results count as zero.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    s = str(raw).strip().lower()
    if s in NOT_DETECTED or s.startswith("<"):
        return 0.0
    m = _NUMBER.match(s)
    if not m:
        raise InvalidMeasurementError(f"Cannot parse measurement value: {raw!r}")
    return float(_normalize_separators(m.group(1), raw) + (m.group(2) or ""))


def _find_col(df: pd.DataFrame, candidates: list[str]) -> Optional[str]:
    cols_lower = {str(c).strip().lower(): str(c) for c in df.columns}
    for cand in candidates:
        if cand in cols_lower:
            return cols_lower[cand]
    return None


def _try_read_csv(path: str) -> pd.DataFrame:
    """Lab exports vary in separator and encoding; try a few safe options."""
    try:
        return pd.read_csv(path, sep=None, engine="python", dtype=str)
    except Exception:
        pass

    for enc in ("utf-8-sig", "latin1"):
        try:
            return pd.read_csv(path, sep=None, engine="python", dtype=str, encoding=enc)
        except Exception:
            continue

    return pd.read_csv(path, dtype=str)


def _collect_long(df: pd.DataFrame, pcol: str, vcol: str) -> tuple[dict[str, float], list[str]]:
    values: dict[str, float] = {}
    ignored: list[str] = []
    for raw_name, raw_value in zip(df[pcol], df[vcol]):
        if pd.isna(raw_name) or pd.isna(raw_value):
            continue
        key = resolve_parameter(raw_name)
        if key is None:
            ignored.append(str(raw_name))
            continue
        values[key] = coerce_value(raw_value)
    return values, ignored


def _collect_wide(df: pd.DataFrame) -> tuple[dict[str, float], list[str]]:
    if len(df) > 1:
        warn(f"Wide-format lab file has {len(df)} rows; using the first one.")
    row = df.iloc[0]
    values: dict[str, float] = {}
    ignored: list[str] = []
    for col in df.columns:
        key = resolve_parameter(col)
        if key is None:
            ignored.append(str(col))
            continue
        if pd.isna(row[col]):
            continue
        values[key] = coerce_value(row[col])
    return values, ignored


def parse_lab_frame(df: pd.DataFrame) -> LabResults:
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]

    pcol = _find_col(df, PARAMETER_CANDIDATES)
    vcol = _find_col(df, VALUE_CANDIDATES)
    if pcol and vcol:
        values, ignored = _collect_long(df, pcol, vcol)
    else:
        if df.empty:
            raise InvalidMeasurementError("Lab file contains no rows.")
        values, ignored = _collect_wide(df)

    if ignored:
        warn(f"Ignoring unrecognized parameters: {ignored}")

    chem_keys = ChemicalParameters.parameter_names()
    bact_keys = BacteriologicalParameters.parameter_names()
    missing = [k for k in (*chem_keys, *bact_keys) if k not in values]
    if missing:
        raise InvalidMeasurementError(f"Missing required parameters: {missing}")

    return LabResults(
        chemical=ChemicalParameters.model_validate({k: values[k] for k in chem_keys}),
        bacteriological=BacteriologicalParameters.model_validate({k: values[k] for k in bact_keys}),
        ignored=ignored,
    )


def load_lab_results(path: str) -> LabResults:
    """
    Reads a lab results CSV in either layout:
      - long: one row per parameter, with parameter/value columns
      - wide: one row, one column per parameter
    Every chemical and bacteriological parameter is required.
    """
    info(f"Loading lab results: {path}")
    results = parse_lab_frame(_try_read_csv(path))
    info(f"Loaded {len(results.chemical.as_parameters()) + len(results.bacteriological.as_parameters())} parameters.")
    return results
