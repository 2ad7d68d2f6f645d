"""
Airfoil configuration records.

An airfoil config is a tagged union with one record per variant:
- Naca4Airfoil: 4-digit code
- Naca5Airfoil: 5-digit code
- CustomAirfoil: coordinate list, named preset and/or polar data

generate() resolves any config to a closed section point loop.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
import numpy as np
from numpy.typing import NDArray

from .airfoil import (
    UnknownAirfoilType,
    _validate_code,
    as_points,
    generate_custom,
    generate_naca4,
    generate_naca5,
)
from .airfoil_presets import get_preset, interpolate_airfoil, preset_key


@dataclass(frozen=True)
class AirfoilPolar:
    """
    Tabulated section aerodynamics, sorted ascending by angle of attack.

    Attributes:
        aoa: Angle of attack [deg]
        cl: Lift coefficient
        cd: Drag coefficient
        cm: Optional moment coefficient
    """
    aoa: NDArray[np.float64]
    cl: NDArray[np.float64]
    cd: NDArray[np.float64]
    cm: Optional[NDArray[np.float64]] = None

    def __post_init__(self):
        aoa = np.asarray(self.aoa, dtype=float)
        cl = np.asarray(self.cl, dtype=float)
        cd = np.asarray(self.cd, dtype=float)
        cm = None if self.cm is None else np.asarray(self.cm, dtype=float)

        if len(cl) != len(aoa) or len(cd) != len(aoa):
            raise ValueError(
                f"Polar arrays must have equal length (aoa={len(aoa)}, cl={len(cl)}, cd={len(cd)})"
            )
        if cm is not None and len(cm) != len(aoa):
            raise ValueError(f"Polar cm has {len(cm)} entries, expected {len(aoa)}")

        order = np.argsort(aoa, kind="stable")
        object.__setattr__(self, "aoa", aoa[order])
        object.__setattr__(self, "cl", cl[order])
        object.__setattr__(self, "cd", cd[order])
        object.__setattr__(self, "cm", None if cm is None else cm[order])

    def __len__(self) -> int:
        return len(self.aoa)

    @property
    def is_usable(self) -> bool:
        """At least two rows are needed for interpolation."""
        return len(self.aoa) >= 2

    def lookup(self, aoa_deg: float):
        """Interpolated (cl, cd) at an angle of attack, clamped at the ends."""
        cl = float(np.interp(aoa_deg, self.aoa, self.cl))
        cd = float(np.interp(aoa_deg, self.aoa, self.cd))
        return cl, cd

    def to_dict(self) -> dict:
        data = {
            "aoa": self.aoa.tolist(),
            "cl": self.cl.tolist(),
            "cd": self.cd.tolist(),
        }
        if self.cm is not None:
            data["cm"] = self.cm.tolist()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "AirfoilPolar":
        return cls(
            aoa=data["aoa"],
            cl=data["cl"],
            cd=data["cd"],
            cm=data.get("cm"),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, AirfoilPolar):
            return NotImplemented
        if (self.cm is None) != (other.cm is None):
            return False
        same = (
            np.array_equal(self.aoa, other.aoa)
            and np.array_equal(self.cl, other.cl)
            and np.array_equal(self.cd, other.cd)
        )
        if self.cm is not None:
            same = same and np.array_equal(self.cm, other.cm)
        return bool(same)


@dataclass(frozen=True)
class Naca4Airfoil:
    """NACA 4-digit section, e.g. Naca4Airfoil("2412")."""
    code: str
    type: str = field(default="naca4", init=False)

    def __post_init__(self):
        _validate_code(self.code, 4)

    @property
    def polar(self) -> Optional[AirfoilPolar]:
        return None

    def to_dict(self) -> dict:
        return {"type": self.type, "code": self.code}


@dataclass(frozen=True)
class Naca5Airfoil:
    """NACA 5-digit section, e.g. Naca5Airfoil("23012")."""
    code: str
    type: str = field(default="naca5", init=False)

    def __post_init__(self):
        _validate_code(self.code, 5)

    @property
    def polar(self) -> Optional[AirfoilPolar]:
        return None

    def to_dict(self) -> dict:
        return {"type": self.type, "code": self.code}


@dataclass(frozen=True)
class CustomAirfoil:
    """
    User-defined or named section.

    Attributes:
        name: Preset or database identifier (e.g. "naca4412", "clark_y")
        coordinates: Explicit (x, y) section points
        polar: Measured/computed polar for the solver
    """
    name: Optional[str] = None
    coordinates: Optional[tuple] = None
    polar: Optional[AirfoilPolar] = None
    type: str = field(default="custom", init=False)

    def __post_init__(self):
        if self.coordinates is not None:
            coords = tuple(tuple(float(v) for v in p) for p in as_points(self.coordinates))
            object.__setattr__(self, "coordinates", coords)

    def to_dict(self) -> dict:
        data = {"type": self.type}
        if self.name is not None:
            data["name"] = self.name
        if self.coordinates is not None:
            data["coordinates"] = [{"x": x, "y": y} for x, y in self.coordinates]
        if self.polar is not None:
            data["polarData"] = self.polar.to_dict()
        return data


AirfoilConfig = Union[Naca4Airfoil, Naca5Airfoil, CustomAirfoil]


def airfoil_config_from_dict(data: dict) -> AirfoilConfig:
    """
    Build an airfoil config from its record form.

    Raises:
        InvalidCode: If a NACA code is malformed
        UnknownAirfoilType: If the type tag is not recognised
    """
    kind = data.get("type")
    if kind == "naca4":
        return Naca4Airfoil(code=data.get("code"))
    if kind == "naca5":
        return Naca5Airfoil(code=data.get("code"))
    if kind == "custom":
        polar = data.get("polarData")
        return CustomAirfoil(
            name=data.get("name"),
            coordinates=data.get("coordinates"),
            polar=AirfoilPolar.from_dict(polar) if polar else None,
        )
    raise UnknownAirfoilType(f"Unknown airfoil type: {kind!r}")


def _naca_from_name(name: str) -> Optional[str]:
    key = preset_key(name)
    if not key.startswith("naca"):
        return None
    digits = key[4:]
    return digits if digits.isdigit() and len(digits) in (4, 5) else None


def generate(config: AirfoilConfig, num_points: int = 100) -> NDArray[np.float64]:
    """
    Produce the section point loop for an airfoil config.

    Custom configs resolve, in order, to their explicit coordinates, a
    tabulated preset of the same name, or a NACA designation embedded in
    the name ("naca2412", "NACA 23012").

    Args:
        config: Airfoil config record
        num_points: Points per surface for generated sections

    Returns:
        Freshly allocated (n, 2) array

    Raises:
        UnknownAirfoilType: If the config cannot be resolved
    """
    if isinstance(config, Naca4Airfoil):
        return generate_naca4(config.code, num_points)
    if isinstance(config, Naca5Airfoil):
        return generate_naca5(config.code, num_points)
    if isinstance(config, CustomAirfoil):
        if config.coordinates is not None:
            return generate_custom(config.coordinates)
        if config.name:
            preset = get_preset(config.name)
            if preset is not None:
                return interpolate_airfoil(preset, num_points)
            digits = _naca_from_name(config.name)
            if digits is not None:
                if len(digits) == 4:
                    return generate_naca4(digits, num_points)
                return generate_naca5(digits, num_points)
            raise UnknownAirfoilType(f"Unknown airfoil preset: {config.name!r}")
        raise UnknownAirfoilType("Custom airfoil requires coordinates or a preset name")
    raise UnknownAirfoilType(f"Unknown airfoil type: {type(config).__name__}")
