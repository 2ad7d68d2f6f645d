"""
Propeller domain model.

PropellerParams is the top-level design record: rotor dimensions, blade
count, the five radial distributions and the airfoil section. Solver and
geometry builder each take an owned copy at construction time.
"""

from dataclasses import dataclass, field, replace
from typing import List
import copy
import random
import string
import time

from .airfoil_config import AirfoilConfig, Naca4Airfoil, airfoil_config_from_dict
from .distribution import DISTRIBUTION_NAMES, NUM_STATIONS, default_distributions


UNITS = ("metric", "imperial")

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_design_id() -> str:
    """Fresh design identifier: prop_<epoch ms>_<7 base-36 chars>."""
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(7))
    return f"prop_{int(time.time() * 1000)}_{suffix}"


@dataclass
class PropellerParams:
    """
    Complete propeller design parameters.

    Distributions hold one value per radial station, hub to tip. Empty
    distributions are synthesized on first use (see
    with_default_distributions).

    Attributes:
        diameter: Rotor diameter [m]
        num_blades: Number of blades
        hub_radius: Hub radius [m]
        chord_distribution: Local chord [m]
        pitch_distribution: Local geometric pitch [m]
        skew_distribution: In-plane section offset [m]
        rake_distribution: Axial section offset [m]
        thickness_distribution: Thickness-to-chord ratio
        airfoil: Airfoil section config
        units: "metric" or "imperial"
        id: Design identifier
        name: Design name
    """
    diameter: float = 0.5
    num_blades: int = 3
    hub_radius: float = 0.025
    chord_distribution: List[float] = field(default_factory=list)
    pitch_distribution: List[float] = field(default_factory=list)
    skew_distribution: List[float] = field(default_factory=list)
    rake_distribution: List[float] = field(default_factory=list)
    thickness_distribution: List[float] = field(default_factory=list)
    airfoil: AirfoilConfig = field(default_factory=lambda: Naca4Airfoil("2412"))
    units: str = "metric"
    id: str = field(default_factory=generate_design_id)
    name: str = "New Propeller"

    @property
    def tip_radius(self) -> float:
        return self.diameter / 2.0

    @property
    def has_distributions(self) -> bool:
        """True if every distribution is populated."""
        return all(getattr(self, f"{n}_distribution") for n in DISTRIBUTION_NAMES)

    def distribution_lengths(self) -> dict:
        return {n: len(getattr(self, f"{n}_distribution")) for n in DISTRIBUTION_NAMES}

    def copy(self) -> "PropellerParams":
        """Deep copy owned by the caller."""
        return copy.deepcopy(self)

    def with_default_distributions(self, num_stations: int = NUM_STATIONS) -> "PropellerParams":
        """
        Copy with every empty distribution synthesized.

        Populated distributions are kept as given.

        Args:
            num_stations: Length of synthesized distributions

        Returns:
            New PropellerParams
        """
        defaults = default_distributions(self.diameter, self.hub_radius, num_stations)
        changes = {}
        for name in DISTRIBUTION_NAMES:
            attr = f"{name}_distribution"
            current = getattr(self, attr)
            changes[attr] = list(current) if current else defaults[name]
        return replace(self.copy(), **changes)

    @classmethod
    def create_default(cls, name: str = "New Propeller") -> "PropellerParams":
        """
        Create a 0.5 m, 3-blade starting design with 20 stations.

        Chord tapers from 12% to 6% of the diameter, pitch is half the
        diameter and thickness falls from 12% to 8%.
        """
        diameter = 0.5
        chord, pitch, skew, rake, thickness = [], [], [], [], []

        for i in range(NUM_STATIONS):
            t = i / (NUM_STATIONS - 1)
            chord.append(0.12 * diameter * (1 - t * 0.5))
            pitch.append(0.5 * diameter)
            skew.append(0.0)
            rake.append(0.0)
            thickness.append(0.12 - t * 0.04)

        return cls(
            diameter=diameter,
            num_blades=3,
            hub_radius=0.025,
            chord_distribution=chord,
            pitch_distribution=pitch,
            skew_distribution=skew,
            rake_distribution=rake,
            thickness_distribution=thickness,
            airfoil=Naca4Airfoil("2412"),
            units="metric",
            name=name,
        )

    def to_dict(self) -> dict:
        """Serialize to the design record (camelCase keys)."""
        return {
            "id": self.id,
            "name": self.name,
            "diameter": self.diameter,
            "numBlades": self.num_blades,
            "hubRadius": self.hub_radius,
            "chordDistribution": list(self.chord_distribution),
            "pitchDistribution": list(self.pitch_distribution),
            "skewDistribution": list(self.skew_distribution),
            "rakeDistribution": list(self.rake_distribution),
            "thicknessDistribution": list(self.thickness_distribution),
            "airfoil": self.airfoil.to_dict(),
            "units": self.units,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PropellerParams":
        """
        Deserialize from a design record.

        A missing id is regenerated; missing distributions stay empty.
        """
        return cls(
            diameter=float(data["diameter"]),
            num_blades=int(data["numBlades"]),
            hub_radius=float(data.get("hubRadius", 0.025)),
            chord_distribution=[float(v) for v in data.get("chordDistribution", [])],
            pitch_distribution=[float(v) for v in data.get("pitchDistribution", [])],
            skew_distribution=[float(v) for v in data.get("skewDistribution", [])],
            rake_distribution=[float(v) for v in data.get("rakeDistribution", [])],
            thickness_distribution=[float(v) for v in data.get("thicknessDistribution", [])],
            airfoil=airfoil_config_from_dict(data.get("airfoil", {"type": "naca4", "code": "2412"})),
            units=data.get("units", "metric"),
            id=data.get("id") or generate_design_id(),
            name=data.get("name", "Imported Propeller"),
        )
