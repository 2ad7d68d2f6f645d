"""
Tests for radial distributions and interpolation.
"""

import pytest
import numpy as np
from numpy.testing import assert_array_almost_equal

from propeller_core.geometry.distribution import (
    NUM_STATIONS, interp_1d, radius_stations, linear_distribution,
    default_distributions, RadialDistributionModel,
)
from propeller_core.geometry.propeller import PropellerParams


class TestInterp1d:
    """Test clamped linear interpolation."""

    def test_exact_at_knots(self):
        """Known points are returned exactly."""
        x = [0.0, 1.0, 3.0]
        y = [2.0, 4.0, -1.0]
        for xi, yi in zip(x, y):
            assert interp_1d(x, y, xi) == yi

    def test_linear_between_knots(self):
        """Values between knots are interpolated linearly."""
        assert interp_1d([0.0, 2.0], [0.0, 1.0], 0.5) == pytest.approx(0.25)

    def test_clamped_outside(self):
        """Queries outside the table hold the edge values."""
        assert interp_1d([0.0, 1.0], [2.0, 4.0], -5.0) == 2.0
        assert interp_1d([0.0, 1.0], [2.0, 4.0], 5.0) == 4.0

    def test_scalar_and_array(self):
        """Scalar queries return floats and arrays return arrays."""
        assert isinstance(interp_1d([0, 1], [0, 1], 0.5), float)
        result = interp_1d([0, 1], [0, 1], np.array([0.25, 0.75]))
        assert_array_almost_equal(result, [0.25, 0.75])


class TestStations:
    """Test station grid and defaults."""

    def test_midpoint_stations(self):
        """Stations sit at the midpoints of uniform radial strips."""
        stations = radius_stations(0.5, 0.05, 10)
        dr = (0.25 - 0.05) / 10
        assert len(stations) == 10
        assert stations[0] == pytest.approx(0.05 + 0.5 * dr)
        assert stations[-1] == pytest.approx(0.25 - 0.5 * dr)

    def test_linear_distribution(self):
        """Linear ramps include both endpoints."""
        values = linear_distribution(0.0, 1.0, 5, 10.0, 20.0)
        assert values == pytest.approx([10.0, 12.5, 15.0, 17.5, 20.0])
        assert linear_distribution(0.0, 1.0, 1, 3.0, 9.0) == [3.0]

    def test_default_distributions(self):
        """Defaults cover every distribution with the synthesized values."""
        dists = default_distributions(0.5, 0.025)
        assert set(dists) == {"chord", "pitch", "skew", "rake", "thickness"}
        assert all(len(v) == NUM_STATIONS for v in dists.values())
        assert dists["chord"][0] == pytest.approx(0.075)
        assert dists["chord"][-1] == pytest.approx(0.03)
        assert dists["pitch"][0] == pytest.approx(0.24)
        assert dists["pitch"][-1] == pytest.approx(0.36)
        assert dists["thickness"] == [0.12] * NUM_STATIONS


class TestRadialDistributionModel:
    """Test the distribution snapshot."""

    @pytest.fixture
    def model(self):
        params = PropellerParams.create_default()
        return RadialDistributionModel.from_params(params)

    def test_full_length_tables_line_up_with_stations(self, model):
        """A table with one value per station maps onto the stations exactly."""
        params = PropellerParams.create_default()
        assert_array_almost_equal(model.station_values("chord"), params.chord_distribution)

    def test_edge_values_held(self, model):
        """Radii outside the table hold the root and tip values."""
        params = PropellerParams.create_default()
        assert model.chord_at(0.0) == pytest.approx(params.chord_distribution[0])
        assert model.chord_at(10.0) == pytest.approx(params.chord_distribution[-1])

    def test_station_width(self, model):
        """Station width is the radial span over the station count."""
        assert model.station_width == pytest.approx((0.25 - 0.025) / NUM_STATIONS)

    def test_short_table_is_interpolated(self):
        """Short tables are spread over the whole span."""
        params = PropellerParams(
            diameter=0.4,
            hub_radius=0.02,
            chord_distribution=[0.04, 0.02],
        ).with_default_distributions()
        model = RadialDistributionModel.from_params(params)
        chords = model.station_values("chord")
        assert len(chords) == NUM_STATIONS
        assert np.all(np.diff(chords) <= 0)
        assert chords[0] <= 0.04
        assert chords[-1] >= 0.02

    def test_single_value_is_constant(self):
        """A single-value table is constant over the span."""
        params = PropellerParams(rake_distribution=[0.01]).with_default_distributions()
        model = RadialDistributionModel.from_params(params)
        assert_array_almost_equal(model.station_values("rake"), [0.01] * NUM_STATIONS)
