from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Mapping

from faucet_guard.errors import InvalidMeasurementError
from faucet_guard.limits.registry import get_parameter_limit


class ParameterStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class EvaluationResult:
    compliant: bool
    status: ParameterStatus


_COMPLIANT = EvaluationResult(compliant=True, status=ParameterStatus.NORMAL)


def check_measurement(parameter: str, value: object) -> float:
    """Reject anything that is not a finite real number (bools included)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidMeasurementError(
            f"{parameter}: expected a numeric value, got {type(value).__name__} ({value!r})"
        )
    value = float(value)
    if not math.isfinite(value):
        raise InvalidMeasurementError(f"{parameter}: value must be finite, got {value!r}")
    return value


def evaluate(parameter: str, value: float) -> EvaluationResult:
    """
    Classify one measured value against its registry limit.
    Parameters without a limit definition are always compliant.
    Bounds are inclusive: only values strictly beyond them violate.
    """
    value = check_measurement(parameter, value)

    limit = get_parameter_limit(parameter)
    if limit is None:
        return _COMPLIANT

    compliant = True
    if limit.max_value is not None and value > limit.max_value:
        compliant = False
    if limit.min_value is not None and value < limit.min_value:
        compliant = False

    if compliant:
        return _COMPLIANT

    status = ParameterStatus.CRITICAL if limit.critical_level else ParameterStatus.WARNING
    return EvaluationResult(compliant=False, status=status)


def evaluate_many(values: Mapping[str, float]) -> dict[str, EvaluationResult]:
    return {name: evaluate(name, value) for name, value in values.items()}
