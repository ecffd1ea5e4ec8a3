"""Tests for sample-level quality grading."""

from __future__ import annotations

import pytest

from faucet_guard.limits.compliance import ParameterStatus
from faucet_guard.quality.classifier import (
    GRADE_ORDER,
    ComplianceStatus,
    QualityGrade,
    SupportsParameters,
    classify_sample,
    compliance_from_grade,
    determine_quality_rating,
)


def _rank(grade: QualityGrade) -> int:
    return GRADE_ORDER.index(grade)


class TestScenarios:
    """Reference scenarios for the grading rules."""

    def test_all_clean_is_excellent(self, chemical, bacteriological) -> None:
        """Nothing violated: excellent and compliant."""
        result = classify_sample(chemical, bacteriological)
        assert result.grade is QualityGrade.EXCELLENT
        assert result.compliance_status is ComplianceStatus.COMPLIANT
        assert result.violations == 0
        assert result.critical_violations == 0
        assert len(result.evaluations) == 31

    def test_ph_out_of_range_is_unacceptable(self, clean_chemical, clean_bacteriological) -> None:
        """A single critical chemical violation sinks the sample."""
        clean_chemical["pH"] = 9.3
        result = classify_sample(clean_chemical, clean_bacteriological)
        assert result.critical_violations == 1
        assert result.grade is QualityGrade.UNACCEPTABLE
        assert result.compliance_status is ComplianceStatus.NON_COMPLIANT
        assert result.violated_parameters == ["pH"]

    def test_single_non_critical_is_good(self, clean_chemical, clean_bacteriological) -> None:
        """Iron slightly high: one violation, graded good."""
        clean_chemical["iron"] = 0.35
        result = classify_sample(clean_chemical, clean_bacteriological)
        assert (result.violations, result.critical_violations) == (1, 0)
        assert result.grade is QualityGrade.GOOD
        assert result.compliance_status is ComplianceStatus.COMPLIANT

    def test_bacteriological_contamination_is_unacceptable(self, clean_chemical, clean_bacteriological) -> None:
        """E. coli and total coliforms both count as critical."""
        clean_bacteriological.update(escherichiaColi=1, totalColiforms=2)
        result = classify_sample(clean_chemical, clean_bacteriological)
        assert result.violations == 2
        assert result.critical_violations == 2
        assert result.grade is QualityGrade.UNACCEPTABLE

    def test_four_minor_violations_are_poor_but_compliant(self, clean_chemical, clean_bacteriological) -> None:
        """Poor samples still report compliant."""
        clean_chemical.update(color=20, iron=0.5, manganese=0.2, copper=2.0)
        result = classify_sample(clean_chemical, clean_bacteriological)
        assert result.violations == 4
        assert result.critical_violations == 0
        assert result.grade is QualityGrade.POOR
        assert result.compliance_status is ComplianceStatus.COMPLIANT


class TestGradeThresholds:
    """Violation-count boundaries and criticality rules."""

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"color": 20, "iron": 0.5}, QualityGrade.ACCEPTABLE),
            ({"color": 20, "iron": 0.5, "zinc": 4}, QualityGrade.ACCEPTABLE),
            ({"color": 20, "iron": 0.5, "zinc": 4, "sulfate": 300, "chloride": 300}, QualityGrade.POOR),
        ],
    )
    def test_counts(self, clean_chemical, clean_bacteriological, overrides, expected) -> None:
        """2-3 violations acceptable, more than 3 poor."""
        clean_chemical.update(overrides)
        assert determine_quality_rating(clean_chemical, clean_bacteriological) is expected

    def test_registry_critical_chemical_counts_as_critical(self, clean_chemical, clean_bacteriological) -> None:
        """Turbidity is flagged critical in the registry."""
        clean_chemical["turbidity"] = 3.0
        result = classify_sample(clean_chemical, clean_bacteriological)
        assert result.evaluations["turbidity"].status is ParameterStatus.CRITICAL
        assert result.critical_violations == 1
        assert result.grade is QualityGrade.UNACCEPTABLE

    def test_heterotrophic_violation_is_critical_at_sample_level(self, clean_chemical, clean_bacteriological) -> None:
        """Any bacteriological violation counts as critical for grading."""
        clean_bacteriological["heterotrophicBacteria"] = 600
        result = classify_sample(clean_chemical, clean_bacteriological)
        assert result.evaluations["heterotrophicBacteria"].status is ParameterStatus.WARNING
        assert result.critical_violations == 1
        assert result.grade is QualityGrade.UNACCEPTABLE

    def test_compliance_from_grade(self) -> None:
        """Only unacceptable maps to non-compliant."""
        assert [compliance_from_grade(g) for g in GRADE_ORDER] == [
            ComplianceStatus.COMPLIANT,
            ComplianceStatus.COMPLIANT,
            ComplianceStatus.COMPLIANT,
            ComplianceStatus.COMPLIANT,
            ComplianceStatus.NON_COMPLIANT,
        ]


class TestClassifierProperties:
    """Edge cases and structural properties."""

    def test_empty_measurement_sets(self) -> None:
        """No measurements: excellent."""
        assert classify_sample({}, {}).grade is QualityGrade.EXCELLENT
        assert classify_sample(None, None).grade is QualityGrade.EXCELLENT

    def test_unknown_parameters_ignored(self) -> None:
        """Parameters outside the registry never count."""
        result = classify_sample({"fluoride": 99.0}, {"legionella": 5})
        assert result.violations == 0
        assert result.grade is QualityGrade.EXCELLENT

    def test_idempotent(self, clean_chemical, clean_bacteriological) -> None:
        """Same input, same result."""
        clean_chemical["iron"] = 0.35
        assert classify_sample(clean_chemical, clean_bacteriological) == classify_sample(
            clean_chemical, clean_bacteriological
        )

    def test_adding_violations_never_improves_grade(self, clean_chemical, clean_bacteriological) -> None:
        """Grades only get worse as violations accumulate."""
        steps = [("color", 20), ("iron", 0.5), ("zinc", 4), ("sulfate", 300), ("nitrate", 12)]
        previous = _rank(determine_quality_rating(clean_chemical, clean_bacteriological))
        for name, value in steps:
            clean_chemical[name] = value
            current = _rank(determine_quality_rating(clean_chemical, clean_bacteriological))
            assert current >= previous
            previous = current
        assert previous == _rank(QualityGrade.UNACCEPTABLE)

    def test_models_and_mappings_agree(self, chemical, bacteriological, clean_chemical, clean_bacteriological) -> None:
        """Typed models and plain mappings grade the same."""
        assert classify_sample(chemical, bacteriological) == classify_sample(clean_chemical, clean_bacteriological)

    def test_any_object_exposing_parameters_is_accepted(self, clean_chemical, clean_bacteriological) -> None:
        """Groups only need an as_parameters() method."""

        class LabRow:
            def __init__(self, values: dict[str, float]):
                self._values = values

            def as_parameters(self) -> dict[str, float]:
                return dict(self._values)

        clean_chemical["lead"] = 0.05
        result = classify_sample(LabRow(clean_chemical), LabRow(clean_bacteriological))
        assert result.violated_parameters == ["lead"]
        assert isinstance(LabRow({}), SupportsParameters)
