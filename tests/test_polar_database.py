"""
Tests for the airfoil polar database.
"""

import json

import pytest
from numpy.testing import assert_array_equal

from propeller_core.analysis.polar_database import PolarDatabase, interpolate_polar


DATA = {
    "metadata": {"source": "test"},
    "airfoils": {
        "clark_y": {
            "name": "Clark Y",
            "type": "flat-bottom",
            "thickness": 0.117,
            "camber": 0.035,
            "polars": {
                "Re_100000": {"reynolds": 100000, "data": [
                    {"alpha": 5, "cl": 0.9, "cd": 0.015, "cm": -0.08},
                    {"alpha": 0, "cl": 0.4, "cd": 0.010, "cm": -0.08},
                ]},
                "Re_500000": {"data": [
                    {"alpha": 0, "cl": 0.45, "cd": 0.008},
                    {"alpha": 5, "cl": 1.0, "cd": 0.011},
                ]},
            },
        },
        "naca_2412": {"type": "naca4", "thickness": 0.12, "camber": 0.02, "polars": {}},
    },
}


@pytest.fixture
def db():
    return PolarDatabase(DATA)


class TestPolarDatabase:
    """Test lookups."""

    def test_membership(self, db):
        """Membership and length reflect the airfoil table."""
        assert len(db) == 2
        assert "clark_y" in db
        assert "eppler_387" not in db

    def test_list_airfoils(self, db):
        """Summaries list name and thickness."""
        summary = {a["id"]: a for a in db.list_airfoils()}
        assert summary["naca_2412"]["name"] == "naca 2412"
        assert summary["clark_y"]["thickness"] == pytest.approx(0.117)

    def test_reynolds_numbers(self, db):
        """Reynolds numbers are listed in ascending order."""
        # Key is parsed when the entry has no explicit reynolds field
        assert db.reynolds_numbers("clark_y") == [100000, 500000]
        assert db.reynolds_numbers("missing") == []

    def test_nearest_reynolds(self, db):
        """The table nearest the requested Reynolds number is used."""
        low = db.get_polar("clark_y", 150000)
        high = db.get_polar("clark_y", 400000)
        assert low.lookup(0.0)[0] == pytest.approx(0.4)
        assert high.lookup(0.0)[0] == pytest.approx(0.45)

    def test_polar_sorted_with_moment(self, db):
        """Polars are sorted and carry Cm when present."""
        polar = db.get_polar("clark_y", 100000)
        assert_array_equal(polar.aoa, [0.0, 5.0])
        assert_array_equal(polar.cm, [-0.08, -0.08])
        assert db.get_polar("clark_y", 500000).cm is None

    def test_missing(self, db):
        """Missing airfoils or tables return None."""
        assert db.get_polar("missing", 1e5) is None
        assert db.get_polar("naca_2412", 1e5) is None

    def test_interpolate(self, db):
        """Coefficients are interpolated by angle of attack."""
        polar = db.get_polar("clark_y", 100000)
        assert interpolate_polar(polar, 2.5) == pytest.approx((0.65, 0.0125))

    def test_from_json(self, tmp_path):
        """Databases load from JSON files."""
        path = tmp_path / "polars.json"
        path.write_text(json.dumps(DATA), encoding="utf-8")
        db = PolarDatabase.from_json(path)
        assert len(db) == 2
        assert db.metadata == {"source": "test"}
