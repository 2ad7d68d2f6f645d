"""
JSON schema versioning and validation.

Implements semantic versioning for export format compatibility and the
shape checks of the design record.
"""

import re
from typing import Tuple
from dataclasses import dataclass
from enum import Enum


# Current schema version
SCHEMA_VERSION = "1.0.0"

# Version tag of the export wrapper ({"version", "exportedAt", "params"})
EXPORT_FORMAT_VERSION = "1.0"

REQUIRED_PARAM_FIELDS = ("diameter", "numBlades")
NUMERIC_PARAM_FIELDS = ("diameter", "numBlades", "hubRadius")
DISTRIBUTION_FIELDS = (
    "chordDistribution",
    "pitchDistribution",
    "skewDistribution",
    "rakeDistribution",
    "thicknessDistribution",
)


class VersionCompatibility(Enum):
    """Compatibility status between versions."""
    COMPATIBLE = "compatible"
    WARN_NEWER_MINOR = "warn_newer_minor"
    REJECT_MAJOR = "reject_major"


@dataclass
class VersionInfo:
    """Parsed semantic version."""
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, version_str: str) -> "VersionInfo":
        """Parse a semver string."""
        match = re.match(r"^(\d+)\.(\d+)\.(\d+)", str(version_str))
        if not match:
            raise ValueError(f"Invalid version format: {version_str}")
        return cls(
            major=int(match.group(1)),
            minor=int(match.group(2)),
            patch=int(match.group(3)),
        )


def check_version_compatibility(
    file_version: str,
    current_version: str = SCHEMA_VERSION
) -> Tuple[VersionCompatibility, str]:
    """
    Check compatibility between file schema version and current version.

    Rules:
    - Same major version: compatible
    - Newer minor version: warn but allow
    - Different major version: reject

    Args:
        file_version: Version string from imported file
        current_version: Current schema version

    Returns:
        Tuple of (compatibility status, message)
    """
    try:
        file_v = VersionInfo.parse(file_version)
        current_v = VersionInfo.parse(current_version)
    except ValueError as e:
        return VersionCompatibility.REJECT_MAJOR, str(e)

    if file_v.major != current_v.major:
        return (
            VersionCompatibility.REJECT_MAJOR,
            f"Incompatible major version: file is {file_v.major}.x.x, app supports {current_v.major}.x.x"
        )

    if file_v.minor > current_v.minor:
        return (
            VersionCompatibility.WARN_NEWER_MINOR,
            f"File is from newer version ({file_version}), some features may not load correctly"
        )

    return VersionCompatibility.COMPATIBLE, "Version compatible"


def is_wrapped_record(data) -> bool:
    """Export wrapper: carries a format version and the parameter record."""
    return isinstance(data, dict) and bool(data.get("version")) and isinstance(data.get("params"), dict)


def is_bare_record(data) -> bool:
    """Bare parameter record: detected by diameter and numBlades."""
    return isinstance(data, dict) and all(f in data for f in REQUIRED_PARAM_FIELDS)


def validate_params_record(params: dict) -> Tuple[bool, list]:
    """
    Validate the shape of a parameter record.

    Args:
        params: Parameter record dictionary

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    for name in REQUIRED_PARAM_FIELDS:
        if name not in params:
            errors.append(f"Missing required field: {name}")

    for name in NUMERIC_PARAM_FIELDS:
        if name in params and not isinstance(params[name], (int, float)):
            errors.append(f"Invalid type for {name}: expected number")

    for name in DISTRIBUTION_FIELDS:
        if name not in params:
            continue
        values = params[name]
        if not isinstance(values, list):
            errors.append(f"Invalid type for {name}: expected list")
        elif not all(isinstance(v, (int, float)) for v in values):
            errors.append(f"{name} must contain only numbers")

    airfoil = params.get("airfoil")
    if airfoil is not None:
        if not isinstance(airfoil, dict):
            errors.append("Invalid type for airfoil: expected object")
        elif "type" not in airfoil:
            errors.append("Missing airfoil type")

    return len(errors) == 0, errors


def validate_schema(data: dict) -> Tuple[bool, list]:
    """
    Validate imported JSON data: a wrapped export or a bare record.

    Args:
        data: Dictionary loaded from JSON

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if is_wrapped_record(data):
        if "schema_version" in data:
            compat, msg = check_version_compatibility(data["schema_version"])
            if compat == VersionCompatibility.REJECT_MAJOR:
                return False, [msg]
        return validate_params_record(data["params"])

    if is_bare_record(data):
        return validate_params_record(data)

    return False, ["Unrecognized design format: expected an export wrapper or a parameter record"]


COORDINATE_SYSTEM = {
    "description": "Rotor frame, output order (x, z, y)",
    "x_axis": "in the rotor plane, blade 0 reference direction",
    "y_axis": "rotor axis (rake direction)",
    "z_axis": "in the rotor plane, completes the frame",
    "origin": "rotor center on the blade root plane",
}
