"""Tests for the typer command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from faucet_guard.main import app

runner = CliRunner()


@pytest.fixture
def lab_csv(tmp_path: Path, clean_chemical, clean_bacteriological) -> Path:
    """Long-layout lab file with one iron exceedance."""
    values = {**clean_chemical, **clean_bacteriological, "iron": 0.35}
    path = tmp_path / "lab.csv"
    path.write_text("parameter,value\n" + "\n".join(f"{k},{v}" for k, v in values.items()) + "\n", encoding="utf-8")
    return path


class TestLimitsCommand:
    """`limits` lists the registry."""

    def test_all(self) -> None:
        """Every category is shown by default."""
        result = runner.invoke(app, ["limits"])
        assert result.exit_code == 0
        assert "turbidity" in result.output
        assert "enterococci" in result.output

    def test_category(self) -> None:
        """Category filter."""
        result = runner.invoke(app, ["limits", "--category", "physical"])
        assert result.exit_code == 0
        assert "color" in result.output
        assert "nitrate" not in result.output


class TestEvaluateCommand:
    """`evaluate` prints one parameter's status."""

    def test_normal(self) -> None:
        """In-range value."""
        result = runner.invoke(app, ["evaluate", "pH", "7.2"])
        assert result.exit_code == 0
        assert "normal" in result.output

    def test_critical(self) -> None:
        """Out-of-range critical parameter."""
        result = runner.invoke(app, ["evaluate", "pH", "9.3"])
        assert result.exit_code == 0
        assert "critical" in result.output
        assert "non-compliant" in result.output

    def test_nan_rejected(self) -> None:
        """Non-finite input exits with an error."""
        result = runner.invoke(app, ["evaluate", "pH", "nan"])
        assert result.exit_code == 1


class TestClassifyCommand:
    """`classify` grades a lab file."""

    def test_grade_and_alerts(self, lab_csv: Path) -> None:
        """Iron exceedance grades good and raises a medium alert."""
        result = runner.invoke(app, ["classify", str(lab_csv), "--faucet-id", "faucet-001"])
        assert result.exit_code == 0
        assert "good" in result.output
        assert "iron" in result.output
        assert "medium" in result.output

    def test_unknown_faucet(self, lab_csv: Path) -> None:
        """Unknown faucet ids exit with an error."""
        result = runner.invoke(app, ["classify", str(lab_csv), "--faucet-id", "faucet-999"])
        assert result.exit_code == 1
        assert "faucet-999" in result.output

    def test_missing_parameters(self, tmp_path: Path) -> None:
        """Incomplete lab files are rejected."""
        path = tmp_path / "partial.csv"
        path.write_text("parameter,value\npH,7.0\n", encoding="utf-8")
        result = runner.invoke(app, ["classify", str(path)])
        assert result.exit_code == 1
        assert "Missing required parameters" in result.output
