from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Protocol, Union, runtime_checkable

from faucet_guard.limits.compliance import EvaluationResult, ParameterStatus, evaluate


class QualityGrade(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"
    UNACCEPTABLE = "unacceptable"


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non_compliant"
    PENDING = "pending"


# Best to worst
GRADE_ORDER: tuple[QualityGrade, ...] = tuple(QualityGrade)

# A violation of any of these chemical parameters alone makes the sample unacceptable.
CRITICAL_CHEMICAL_PARAMETERS = frozenset({
    "pH", "nitrate", "nitrite", "lead", "cadmium", "chromium", "mercury", "arsenic", "freeChlorine",
})


@runtime_checkable
class SupportsParameters(Protocol):
    def as_parameters(self) -> Mapping[str, float]: ...


# Plain mappings or the measurement models; None stands for a missing group
MeasurementGroup = Union[Mapping[str, float], SupportsParameters, None]


@dataclass
class QualityResult:
    grade: QualityGrade
    compliance_status: ComplianceStatus
    violations: int
    critical_violations: int
    evaluations: dict[str, EvaluationResult] = field(default_factory=dict)

    @property
    def violated_parameters(self) -> list[str]:
        return [name for name, r in self.evaluations.items() if not r.compliant]


def _parameter_pairs(group: MeasurementGroup) -> Mapping[str, float]:
    if group is None:
        return {}
    if isinstance(group, SupportsParameters):
        return group.as_parameters()
    return group


def is_critical_chemical(parameter: str, result: EvaluationResult) -> bool:
    return parameter in CRITICAL_CHEMICAL_PARAMETERS or result.status is ParameterStatus.CRITICAL


def _grade(violations: int, critical_violations: int) -> QualityGrade:
    if critical_violations > 0:
        return QualityGrade.UNACCEPTABLE
    if violations > 3:
        return QualityGrade.POOR
    if violations > 1:
        return QualityGrade.ACCEPTABLE
    if violations == 1:
        return QualityGrade.GOOD
    return QualityGrade.EXCELLENT


def compliance_from_grade(grade: QualityGrade) -> ComplianceStatus:
    # Only the worst grade is non-compliant; "poor" still reports compliant.
    if grade is QualityGrade.UNACCEPTABLE:
        return ComplianceStatus.NON_COMPLIANT
    return ComplianceStatus.COMPLIANT


def classify_sample(chemical: MeasurementGroup, bacteriological: MeasurementGroup) -> QualityResult:
    violations = 0
    critical_violations = 0
    evaluations: dict[str, EvaluationResult] = {}

    for param, value in _parameter_pairs(chemical).items():
        result = evaluate(param, value)
        evaluations[param] = result
        if not result.compliant:
            violations += 1
            if is_critical_chemical(param, result):
                critical_violations += 1

    # Every bacteriological violation counts as critical
    for param, value in _parameter_pairs(bacteriological).items():
        result = evaluate(param, value)
        evaluations[param] = result
        if not result.compliant:
            violations += 1
            critical_violations += 1

    grade = _grade(violations, critical_violations)
    return QualityResult(
        grade=grade,
        compliance_status=compliance_from_grade(grade),
        violations=violations,
        critical_violations=critical_violations,
        evaluations=evaluations,
    )


def determine_quality_rating(chemical: MeasurementGroup, bacteriological: MeasurementGroup) -> QualityGrade:
    return classify_sample(chemical, bacteriological).grade
