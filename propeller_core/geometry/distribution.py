"""
Radial distribution model.

Shared station discretization and piecewise-linear interpolation used by
both the BEMT solver and the blade geometry builder.

Stations sit at the mid-points of equal radial increments between hub
and tip:  r_i = r_hub + ((i + 0.5) / N) * (R - r_hub)
"""

from dataclasses import dataclass, field
from typing import Dict, Union
import numpy as np
from numpy.typing import NDArray


NUM_STATIONS = 20

# Default distribution synthesis (fractions of diameter)
DEFAULT_CHORD_FRACTION = 0.15
DEFAULT_CHORD_TIP_RATIO = 0.4
DEFAULT_PITCH_FRACTION = 0.6
DEFAULT_PITCH_ROOT_RATIO = 0.8
DEFAULT_PITCH_TIP_RATIO = 1.2
DEFAULT_THICKNESS = 0.12

DISTRIBUTION_NAMES = ("chord", "pitch", "skew", "rake", "thickness")


def interp_1d(x_known, y_known, x) -> Union[float, NDArray[np.float64]]:
    """
    Piecewise-linear interpolation clamped at the domain edges.

    Exact at the knots; queries below the first / above the last knot
    return the first / last y value.

    Args:
        x_known: Knot positions, ascending
        y_known: Values at the knots
        x: Query position(s)

    Returns:
        Interpolated value(s), float for scalar queries
    """
    x_known = np.asarray(x_known, dtype=float)
    y_known = np.asarray(y_known, dtype=float)
    result = np.interp(x, x_known, y_known)
    if np.ndim(result) == 0:
        return float(result)
    return result


def radius_stations(
    diameter: float,
    hub_radius: float,
    num_stations: int = NUM_STATIONS
) -> NDArray[np.float64]:
    """
    Mid-point radial stations between hub and tip.

    Args:
        diameter: Rotor diameter [m]
        hub_radius: Hub radius [m]
        num_stations: Number of stations N

    Returns:
        Array (N,) of station radii [m], ascending
    """
    tip_radius = diameter / 2.0
    fractions = (np.arange(num_stations) + 0.5) / num_stations
    return hub_radius + fractions * (tip_radius - hub_radius)


def linear_distribution(
    r1: float,
    r2: float,
    n: int,
    v1: float,
    v2: float
) -> list:
    """n values varying linearly from v1 at r1 to v2 at r2."""
    if n == 1:
        return [float(v1)]
    t = np.arange(n) / (n - 1)
    return (v1 + (v2 - v1) * t).tolist()


def default_distributions(
    diameter: float,
    hub_radius: float,
    num_stations: int = NUM_STATIONS
) -> Dict[str, list]:
    """
    Synthesized distributions for a bare design.

    Chord tapers linearly from 0.15*D to 0.4x that value, pitch runs from
    0.8x to 1.2x of 0.6*D, skew and rake are zero and thickness is a
    constant 12%.
    """
    tip_radius = diameter / 2.0
    chord = DEFAULT_CHORD_FRACTION * diameter
    pitch = DEFAULT_PITCH_FRACTION * diameter

    return {
        "chord": linear_distribution(
            hub_radius, tip_radius, num_stations, chord, chord * DEFAULT_CHORD_TIP_RATIO
        ),
        "pitch": linear_distribution(
            hub_radius, tip_radius, num_stations,
            pitch * DEFAULT_PITCH_ROOT_RATIO, pitch * DEFAULT_PITCH_TIP_RATIO
        ),
        "skew": [0.0] * num_stations,
        "rake": [0.0] * num_stations,
        "thickness": [DEFAULT_THICKNESS] * num_stations,
    }


@dataclass(frozen=True)
class RadialDistributionModel:
    """
    Snapshot of a design's radial distributions on the station grid.

    Each distribution is placed on its own mid-point grid spanning hub to
    tip, so a distribution with N values lines up exactly with the N
    solver stations; shorter or longer tables are interpolated.

    Attributes:
        diameter: Rotor diameter [m]
        hub_radius: Hub radius [m]
        num_stations: Number of solver/geometry stations
        values: Distribution name -> knot values
    """
    diameter: float
    hub_radius: float
    num_stations: int = NUM_STATIONS
    values: Dict[str, NDArray[np.float64]] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params, num_stations: int = NUM_STATIONS) -> "RadialDistributionModel":
        """
        Build from a PropellerParams with materialized distributions.

        Args:
            params: Design parameters (distributions must be non-empty)
            num_stations: Number of stations
        """
        values = {
            name: np.array(getattr(params, f"{name}_distribution"), dtype=float)
            for name in DISTRIBUTION_NAMES
        }
        return cls(
            diameter=params.diameter,
            hub_radius=params.hub_radius,
            num_stations=num_stations,
            values=values,
        )

    @property
    def tip_radius(self) -> float:
        return self.diameter / 2.0

    @property
    def stations(self) -> NDArray[np.float64]:
        """Station radii [m]."""
        return radius_stations(self.diameter, self.hub_radius, self.num_stations)

    @property
    def station_width(self) -> float:
        """Uniform radial width dr of each station [m]."""
        return (self.tip_radius - self.hub_radius) / self.num_stations

    def knots(self, name: str) -> NDArray[np.float64]:
        """Radii at which the named distribution's values are defined."""
        return radius_stations(self.diameter, self.hub_radius, len(self.values[name]))

    def value_at(self, name: str, r) -> Union[float, NDArray[np.float64]]:
        """Interpolate a distribution at radius r (edge values held)."""
        return interp_1d(self.knots(name), self.values[name], r)

    def station_values(self, name: str) -> NDArray[np.float64]:
        """Distribution sampled at every station."""
        return np.asarray(self.value_at(name, self.stations), dtype=float)

    def chord_at(self, r):
        return self.value_at("chord", r)

    def pitch_at(self, r):
        return self.value_at("pitch", r)

    def skew_at(self, r):
        return self.value_at("skew", r)

    def rake_at(self, r):
        return self.value_at("rake", r)

    def thickness_at(self, r):
        return self.value_at("thickness", r)
