"""
Design validation checks.

Upstream validation of propeller parameters before solving or meshing,
with actionable messages for users. The solver and geometry builder do
not trap degenerate geometry themselves.
"""

from dataclasses import dataclass, field
from typing import List
from enum import Enum

from ..geometry.airfoil import AirfoilError, get_thickness
from ..geometry.airfoil_config import generate
from ..geometry.distribution import DISTRIBUTION_NAMES
from ..geometry.propeller import PropellerParams, UNITS


MIN_THICKNESS = 0.02
MAX_THICKNESS = 0.4


class Severity(Enum):
    """Validation message severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding."""
    severity: Severity
    code: str
    message: str
    location: str = ""  # Optional location hint (e.g., "chordDistribution[3]")

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        loc = f" ({self.location})" if self.location else ""
        return f"{prefix}{loc} {self.message}"


@dataclass
class ValidationResult:
    """Complete validation result for a design."""
    is_valid: bool
    messages: List[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationMessage]:
        """Get only error-level messages."""
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationMessage]:
        """Get only warning-level messages."""
        return [m for m in self.messages if m.severity == Severity.WARNING]

    @property
    def info(self) -> List[ValidationMessage]:
        """Get only info-level messages."""
        return [m for m in self.messages if m.severity == Severity.INFO]

    @property
    def codes(self) -> List[str]:
        return [m.code for m in self.messages]

    def add(self, severity: Severity, code: str, message: str, location: str = ""):
        """Add a validation message."""
        self.messages.append(ValidationMessage(severity, code, message, location))
        if severity == Severity.ERROR:
            self.is_valid = False


def validate_params(params: PropellerParams) -> ValidationResult:
    """
    Perform comprehensive validation of a propeller design.

    Checks include:
    - Dimension sanity (positive values, hub inside the disc, blade count)
    - Distribution consistency (equal lengths, positive chord)
    - Airfoil definition (generatable section, plausible thickness, polar size)

    Args:
        params: The design to validate

    Returns:
        ValidationResult with all findings
    """
    result = ValidationResult(is_valid=True)

    _validate_dimensions(params, result)
    _validate_distributions(params, result)
    _validate_airfoil(params, result)

    return result


def _validate_dimensions(params: PropellerParams, result: ValidationResult):
    """Validate rotor dimensions."""
    if params.diameter <= 0:
        result.add(Severity.ERROR, "DIM001",
                   f"Diameter must be positive (got {params.diameter})",
                   "diameter")

    if params.hub_radius <= 0:
        result.add(Severity.ERROR, "DIM002",
                   f"Hub radius must be positive (got {params.hub_radius})",
                   "hubRadius")

    if params.diameter <= 2 * params.hub_radius:
        result.add(Severity.ERROR, "DIM003",
                   f"Diameter ({params.diameter}) must exceed twice the hub radius ({params.hub_radius})",
                   "hubRadius")

    if params.num_blades < 2:
        result.add(Severity.ERROR, "DIM004",
                   f"Blade count must be at least 2 (got {params.num_blades})",
                   "numBlades")

    if params.units not in UNITS:
        result.add(Severity.WARNING, "DIM010",
                   f"Unknown unit system {params.units!r}, assuming metric",
                   "units")


def _validate_distributions(params: PropellerParams, result: ValidationResult):
    """Validate radial distributions."""
    lengths = params.distribution_lengths()
    populated = {name: n for name, n in lengths.items() if n > 0}

    if not populated:
        result.add(Severity.INFO, "DIST010",
                   "No distributions given, defaults will be synthesized")
        return

    if len(set(populated.values())) > 1:
        detail = ", ".join(f"{name}={n}" for name, n in populated.items())
        result.add(Severity.ERROR, "DIST001",
                   f"Distributions must have equal length ({detail})")

    for i, chord in enumerate(params.chord_distribution):
        if chord <= 0:
            result.add(Severity.ERROR, "DIST002",
                       f"Chord must be positive (got {chord})",
                       f"chordDistribution[{i}]")
            break

    if any(n == 1 for n in populated.values()):
        result.add(Severity.WARNING, "DIST003",
                   "Single-station distributions are held constant along the blade")

    missing = [name for name in DISTRIBUTION_NAMES if lengths[name] == 0]
    if missing:
        result.add(Severity.INFO, "DIST011",
                   f"Defaults will be synthesized for: {', '.join(missing)}")

    for i, t in enumerate(params.thickness_distribution):
        if not MIN_THICKNESS < t < MAX_THICKNESS:
            result.add(Severity.WARNING, "DIST020",
                       f"Unusual thickness ratio {t:.3f}",
                       f"thicknessDistribution[{i}]")
            break


def _validate_airfoil(params: PropellerParams, result: ValidationResult):
    """Validate the airfoil section and polar."""
    try:
        section = generate(params.airfoil, 50)
    except AirfoilError as e:
        result.add(Severity.ERROR, "AIRF001", str(e), "airfoil")
        return

    thickness = get_thickness(section)
    if not MIN_THICKNESS < thickness < MAX_THICKNESS:
        result.add(Severity.WARNING, "AIRF010",
                   f"Section thickness {thickness:.3f} is outside the usual range",
                   "airfoil")

    polar = getattr(params.airfoil, "polar", None)
    if polar is not None and not polar.is_usable:
        result.add(Severity.WARNING, "AIRF020",
                   f"Polar has {len(polar)} rows, thin-airfoil model will be used",
                   "airfoil.polarData")
