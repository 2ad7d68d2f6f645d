"""Geometry module for propeller core."""

from .airfoil import (
    AirfoilError,
    InvalidCode,
    InsufficientPoints,
    UnknownAirfoilType,
    generate_naca4,
    generate_naca5,
    generate_custom,
    parse_selig_format,
    parse_lednicer_format,
    parse_csv,
    detect_and_parse,
    normalize,
    scale_to_chord,
    get_thickness,
)
from .airfoil_config import (
    AirfoilPolar,
    Naca4Airfoil,
    Naca5Airfoil,
    CustomAirfoil,
    AirfoilConfig,
    airfoil_config_from_dict,
    generate,
)
from .airfoil_presets import AIRFOIL_PRESETS, get_preset, list_presets, interpolate_airfoil
from .distribution import RadialDistributionModel, interp_1d
from .propeller import PropellerParams
from .blade_geometry import BladeGeometryBuilder, BladeMesh

__all__ = [
    "AirfoilError",
    "InvalidCode",
    "InsufficientPoints",
    "UnknownAirfoilType",
    "generate_naca4",
    "generate_naca5",
    "generate_custom",
    "parse_selig_format",
    "parse_lednicer_format",
    "parse_csv",
    "detect_and_parse",
    "normalize",
    "scale_to_chord",
    "get_thickness",
    "AirfoilPolar",
    "Naca4Airfoil",
    "Naca5Airfoil",
    "CustomAirfoil",
    "AirfoilConfig",
    "airfoil_config_from_dict",
    "generate",
    "AIRFOIL_PRESETS",
    "get_preset",
    "list_presets",
    "interpolate_airfoil",
    "RadialDistributionModel",
    "interp_1d",
    "PropellerParams",
    "BladeGeometryBuilder",
    "BladeMesh",
]
