"""
Tests for design validation checks.
"""

import pytest

from propeller_core.geometry.airfoil_config import AirfoilPolar, CustomAirfoil
from propeller_core.geometry.propeller import PropellerParams
from propeller_core.validation.checks import Severity, validate_params


@pytest.fixture
def design():
    return PropellerParams.create_default()


class TestValidateParams:
    """Test validate_params findings."""

    def test_default_is_valid(self, design):
        """The default design has no findings."""
        result = validate_params(design)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_bad_dimensions(self, design):
        """Non-positive sizes and too few blades are errors."""
        design.diameter = 0.0
        design.hub_radius = 0.0
        design.num_blades = 1
        result = validate_params(design)
        assert not result.is_valid
        for code in ["DIM001", "DIM002", "DIM003", "DIM004"]:
            assert code in result.codes

    def test_hub_too_large(self, design):
        """A hub reaching the tip is an error."""
        design.hub_radius = 0.3
        result = validate_params(design)
        assert "DIM003" in result.codes

    def test_unknown_units(self, design):
        """Unknown units only warn."""
        design.units = "furlongs"
        result = validate_params(design)
        assert result.is_valid
        assert "DIM010" in result.codes

    def test_length_mismatch(self, design):
        """Distribution length mismatches are errors."""
        design.pitch_distribution = design.pitch_distribution[:10]
        result = validate_params(design)
        assert not result.is_valid
        assert "DIST001" in result.codes

    def test_negative_chord(self, design):
        """Negative chords are located by index."""
        design.chord_distribution[4] = -0.01
        result = validate_params(design)
        errors = [m for m in result.errors if m.code == "DIST002"]
        assert len(errors) == 1
        assert errors[0].location == "chordDistribution[4]"

    def test_empty_distributions(self):
        """Empty distributions are informational."""
        result = validate_params(PropellerParams())
        assert result.is_valid
        assert "DIST010" in result.codes
        assert all(m.severity == Severity.INFO for m in result.messages)

    def test_partial_distributions(self):
        """Partial distributions are informational."""
        result = validate_params(PropellerParams(chord_distribution=[0.05, 0.03]))
        assert result.is_valid
        assert "DIST011" in result.codes

    def test_unresolvable_airfoil(self, design):
        """Unresolvable airfoils are errors."""
        design.airfoil = CustomAirfoil(name="mystery")
        result = validate_params(design)
        assert not result.is_valid
        assert "AIRF001" in result.codes

    def test_thin_polar(self, design):
        """Single-row polars are flagged."""
        design.airfoil = CustomAirfoil(
            name="naca4412",
            polar=AirfoilPolar(aoa=[0.0], cl=[0.4], cd=[0.01]),
        )
        result = validate_params(design)
        assert "AIRF020" in result.codes

    def test_message_str(self, design):
        """Messages print with their severity."""
        design.diameter = -1.0
        message = validate_params(design).errors[0]
        assert str(message).startswith("[ERROR]")
