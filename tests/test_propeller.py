"""
Tests for the propeller design record.
"""

import re

import pytest

from propeller_core.geometry.airfoil_config import CustomAirfoil, Naca4Airfoil
from propeller_core.geometry.distribution import NUM_STATIONS
from propeller_core.geometry.propeller import PropellerParams, generate_design_id


class TestDesignId:
    """Test design id generation."""

    def test_format(self):
        """Ids are prop_<millis>_<7 chars>."""
        assert re.match(r"^prop_\d+_[0-9a-z]{7}$", generate_design_id())

    def test_unique(self):
        """Ids do not repeat."""
        assert len({generate_design_id() for _ in range(50)}) == 50


class TestPropellerParams:
    """Test PropellerParams construction and copies."""

    def test_create_default(self):
        """The default design has synthesized distributions."""
        params = PropellerParams.create_default(name="Test Prop")
        assert params.name == "Test Prop"
        assert params.diameter == 0.5
        assert params.num_blades == 3
        assert params.has_distributions
        assert params.distribution_lengths() == {
            "chord": NUM_STATIONS, "pitch": NUM_STATIONS, "skew": NUM_STATIONS,
            "rake": NUM_STATIONS, "thickness": NUM_STATIONS,
        }
        assert params.chord_distribution[0] == pytest.approx(0.06)
        assert params.chord_distribution[-1] == pytest.approx(0.03)
        assert params.thickness_distribution[-1] == pytest.approx(0.08)
        assert params.airfoil == Naca4Airfoil("2412")

    def test_bare_design_has_no_distributions(self):
        """A bare design carries no distributions."""
        params = PropellerParams()
        assert not params.has_distributions
        assert params.tip_radius == pytest.approx(0.25)

    def test_with_default_distributions(self):
        """Missing distributions are filled on a copy."""
        params = PropellerParams(chord_distribution=[0.05, 0.03])
        filled = params.with_default_distributions()

        assert filled.chord_distribution == [0.05, 0.03]
        assert len(filled.pitch_distribution) == NUM_STATIONS
        assert filled.id == params.id
        # Caller copy untouched
        assert params.pitch_distribution == []

    def test_copy_is_deep(self):
        """copy() does not share distribution lists."""
        params = PropellerParams.create_default()
        clone = params.copy()
        clone.chord_distribution[0] = 1.0
        assert params.chord_distribution[0] == pytest.approx(0.06)


class TestSerialization:
    """Test the camelCase design record."""

    def test_roundtrip(self):
        """Designs survive to_dict / from_dict."""
        params = PropellerParams.create_default()
        assert PropellerParams.from_dict(params.to_dict()) == params

    def test_record_keys(self):
        """Records use camelCase keys."""
        record = PropellerParams.create_default().to_dict()
        for key in ["id", "name", "diameter", "numBlades", "hubRadius",
                    "chordDistribution", "pitchDistribution", "skewDistribution",
                    "rakeDistribution", "thicknessDistribution", "airfoil", "units"]:
            assert key in record
        assert record["airfoil"] == {"type": "naca4", "code": "2412"}

    def test_missing_fields(self):
        """Missing record fields take defaults."""
        params = PropellerParams.from_dict({"diameter": 0.3, "numBlades": 2})
        assert params.id.startswith("prop_")
        assert params.chord_distribution == []
        assert params.airfoil == Naca4Airfoil("2412")

    def test_custom_airfoil_record(self):
        """Custom airfoils survive the record."""
        params = PropellerParams(airfoil=CustomAirfoil(name="naca4412"))
        restored = PropellerParams.from_dict(params.to_dict())
        assert restored.airfoil == CustomAirfoil(name="naca4412")
