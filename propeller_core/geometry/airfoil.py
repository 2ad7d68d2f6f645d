"""
Airfoil section generation and utilities.

Produces closed 2D airfoil point loops in chord-fraction space:
- NACA 4-digit and 5-digit parametric families
- Tabulated presets (see airfoil_presets)
- Custom coordinate lists and Selig/Lednicer/CSV text files

Parametric sections use cosine spacing x_i = (1 - cos(i*beta)) / 2,
beta = pi / (n - 1), and are traced leading edge -> upper surface ->
trailing edge -> lower surface -> leading edge, giving 2n - 1 points.
"""

from typing import Sequence, Tuple, Union
import numpy as np
from numpy.typing import NDArray, ArrayLike


# NACA thickness polynomial coefficients (finite trailing edge)
NACA_THICKNESS_COEFFS = (0.2969, -0.1260, -0.3516, 0.2843, -0.1015)

# NACA 5-digit camber location code -> camber position fraction
NACA5_CAMBER_POSITIONS = {
    0: 0.05, 1: 0.10, 2: 0.15, 3: 0.20, 4: 0.25,
    5: 0.30, 6: 0.35, 7: 0.40, 8: 0.45, 9: 0.50,
}

CUSTOM_X_LIMITS = (0.0, 1.0)
CUSTOM_Y_LIMITS = (-0.5, 0.5)


class AirfoilError(ValueError):
    """Base class for airfoil definition errors."""
    pass


class InvalidCode(AirfoilError):
    """Raised when a NACA designation is malformed."""
    pass


class InsufficientPoints(AirfoilError):
    """Raised when a custom section has fewer than 3 points."""
    pass


class UnknownAirfoilType(AirfoilError):
    """Raised when an airfoil config cannot be resolved to a section."""
    pass


def _validate_code(code: str, length: int) -> str:
    if not isinstance(code, str) or len(code) != length:
        raise InvalidCode(f"Invalid NACA {length}-digit code: {code!r}")
    if not code.isdigit():
        raise InvalidCode(f"NACA code must contain only digits: {code!r}")
    return code


def cosine_spacing(num_points: int) -> NDArray[np.float64]:
    """
    Chordwise stations clustered at leading and trailing edge.

    Args:
        num_points: Number of stations from x=0 to x=1 (inclusive)

    Returns:
        Array (num_points,) of x in [0, 1]
    """
    if num_points < 2:
        raise ValueError(f"num_points must be at least 2 (got {num_points})")
    beta = np.pi / (num_points - 1)
    return (1.0 - np.cos(np.arange(num_points) * beta)) / 2.0


def naca_thickness(x: NDArray[np.float64], t: float) -> NDArray[np.float64]:
    """Half-thickness distribution yt(x) for thickness ratio t."""
    a0, a1, a2, a3, a4 = NACA_THICKNESS_COEFFS
    return 5.0 * t * (
        a0 * np.sqrt(x)
        + a1 * x
        + a2 * x**2
        + a3 * x**3
        + a4 * x**4
    )


def parabolic_camber(
    x: NDArray[np.float64],
    m: float,
    p: float
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Two-segment parabolic camber line and its slope.

    Args:
        x: Chordwise stations
        m: Maximum camber (chord fraction)
        p: Position of maximum camber (chord fraction)

    Returns:
        Tuple of (yc, dyc/dx); zero camber when p == 0 or m == 0
    """
    if p == 0 or m == 0:
        return np.zeros_like(x), np.zeros_like(x)

    fore = x < p
    yc = np.where(
        fore,
        (m / p**2) * (2 * p * x - x**2),
        (m / (1 - p)**2) * ((1 - 2 * p) + 2 * p * x - x**2),
    )
    dyc_dx = np.where(
        fore,
        (2 * m / p**2) * (p - x),
        (2 * m / (1 - p)**2) * (p - x),
    )
    return yc, dyc_dx


def _build_section(
    x: NDArray[np.float64],
    yt: NDArray[np.float64],
    yc: NDArray[np.float64],
    dyc_dx: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Offset thickness normal to the camber line and trace the loop."""
    theta = np.arctan(dyc_dx)
    sin_t = np.sin(theta)
    cos_t = np.cos(theta)

    upper = np.column_stack([x - yt * sin_t, yc + yt * cos_t])
    lower = np.column_stack([x + yt * sin_t, yc - yt * cos_t])

    # Trailing edge point is shared; lower surface walks back to the LE
    return np.vstack([upper, lower[-2::-1]])


def generate_naca4(code: str, num_points: int = 100) -> NDArray[np.float64]:
    """
    Generate a NACA 4-digit section.

    Code "MPTT": max camber M/100, camber position P/10, thickness TT/100.

    Args:
        code: 4-character digit string, e.g. "2412"
        num_points: Points per surface

    Returns:
        Array (2*num_points - 1, 2) of (x, y)

    Raises:
        InvalidCode: If the code is not exactly 4 digits
    """
    code = _validate_code(code, 4)

    m = int(code[0]) / 100
    p = int(code[1]) / 10
    t = int(code[2:]) / 100

    x = cosine_spacing(num_points)
    yt = naca_thickness(x, t)
    yc, dyc_dx = parabolic_camber(x, m, p)

    return _build_section(x, yt, yc, dyc_dx)


def generate_naca5(code: str, num_points: int = 100) -> NDArray[np.float64]:
    """
    Generate a NACA 5-digit section.

    The second digit sets the camber magnitude (0.1 per unit, 0 = no
    camber), the third digit selects the camber position from
    NACA5_CAMBER_POSITIONS, the last two digits are thickness in percent.

    Args:
        code: 5-character digit string, e.g. "23012"
        num_points: Points per surface

    Returns:
        Array (2*num_points - 1, 2) of (x, y)

    Raises:
        InvalidCode: If the code is not exactly 5 digits
    """
    code = _validate_code(code, 5)

    camber_digit = int(code[1])
    position_digit = int(code[2])
    t = int(code[3:]) / 100

    if camber_digit == 0 or position_digit not in NACA5_CAMBER_POSITIONS:
        m, p = 0.0, 0.0
    else:
        m = 0.1 * camber_digit
        p = NACA5_CAMBER_POSITIONS[position_digit]

    x = cosine_spacing(num_points)
    yt = naca_thickness(x, t)
    yc, dyc_dx = parabolic_camber(x, m, p)

    return _build_section(x, yt, yc, dyc_dx)


def as_points(coordinates: Union[ArrayLike, Sequence[dict]]) -> NDArray[np.float64]:
    """
    Convert coordinates to an (n, 2) float array.

    Accepts (x, y) pairs or {"x": .., "y": ..} mappings.
    """
    coords = list(coordinates)
    if coords and isinstance(coords[0], dict):
        coords = [(c["x"], c["y"]) for c in coords]
    points = np.array(coords, dtype=float)
    if points.size == 0:
        return np.zeros((0, 2))
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Expected (n, 2) coordinates, got shape {points.shape}")
    return points


def generate_custom(coordinates) -> NDArray[np.float64]:
    """
    Accept a user-supplied section.

    Coordinates are bounded (x to [0, 1], y to [-0.5, 0.5]) but not
    resampled.

    Raises:
        InsufficientPoints: If fewer than 3 points are supplied
    """
    points = as_points(coordinates)
    if len(points) < 3:
        raise InsufficientPoints(
            f"Custom airfoil must have at least 3 points (got {len(points)})"
        )

    result = points.copy()
    result[:, 0] = np.clip(result[:, 0], *CUSTOM_X_LIMITS)
    result[:, 1] = np.clip(result[:, 1], *CUSTOM_Y_LIMITS)
    return result


# ---------------------------------------------------------------------------
# Text formats
# ---------------------------------------------------------------------------

def _numeric_pair(line: str, sep=None) -> Union[Tuple[float, float], None]:
    """Parse the first two fields of a line, None for headers/garbage."""
    parts = [p.strip() for p in line.strip().split(sep) if p.strip()]
    if len(parts) < 2:
        return None
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        return None


def parse_selig_format(content: str) -> NDArray[np.float64]:
    """
    Parse a Selig format airfoil file.

    Selig files hold one continuous trace (TE -> upper -> LE -> lower -> TE)
    after a name line. Header and non-numeric lines are skipped.
    """
    points = []
    for line in content.splitlines():
        if not line.strip():
            continue
        pair = _numeric_pair(line)
        if pair is not None:
            points.append(pair)
    return as_points(points)


def parse_lednicer_format(content: str) -> NDArray[np.float64]:
    """
    Parse a Lednicer format airfoil file.

    Lednicer files list the upper surface and then the lower surface,
    each from LE to TE. The lower trace starts at the (0, 0) sentinel
    row that follows the upper trace; the sentinel itself is dropped.
    The lower trace is reversed and appended to the upper one.

    The point count line (e.g. "17. 17.") is recognised by both values
    exceeding 1 and skipped.
    """
    upper = []
    lower = []
    in_upper = True

    for line in content.splitlines():
        if not line.strip():
            continue
        pair = _numeric_pair(line)
        if pair is None:
            continue
        x, y = pair
        if x > 1.0 and y > 1.0:
            continue
        if in_upper:
            if x == 0 and y == 0 and upper:
                in_upper = False
            else:
                upper.append(pair)
        else:
            lower.append(pair)

    lower.reverse()
    return as_points(upper + lower)


def parse_csv(content: str) -> NDArray[np.float64]:
    """Parse comma separated x,y rows; header rows are skipped."""
    points = []
    for line in content.splitlines():
        if not line.strip():
            continue
        pair = _numeric_pair(line, sep=",")
        if pair is not None:
            points.append(pair)
    return as_points(points)


def detect_and_parse(content: str) -> NDArray[np.float64]:
    """
    Parse airfoil text in whichever supported format it is written.

    Comma separated data is read as CSV. Whitespace separated data with a
    (0, 0) row after the first data row, where x restarts from 0, is read
    as Lednicer; anything else as Selig.
    """
    data_lines = [l for l in content.splitlines() if l.strip()]
    if any("," in l and _numeric_pair(l, sep=",") for l in data_lines):
        return parse_csv(content)

    pairs = [p for p in (_numeric_pair(l) for l in data_lines) if p is not None]
    pairs = [p for p in pairs if not (p[0] > 1.0 and p[1] > 1.0)]
    if len(pairs) > 2 and pairs[0][0] <= 0.5:
        # Lednicer traces start at the leading edge, Selig at the trailing edge
        if any(x == 0 and y == 0 for x, y in pairs[1:]):
            return parse_lednicer_format(content)
    return parse_selig_format(content)


# ---------------------------------------------------------------------------
# Geometric utilities
# ---------------------------------------------------------------------------

def normalize(points) -> NDArray[np.float64]:
    """
    Rescale a section so x spans exactly [0, 1].

    x is shifted by min(x) and both axes are scaled by 1 / (x range).
    Empty input returns an empty array.
    """
    points = as_points(points)
    if len(points) == 0:
        return np.zeros((0, 2))

    min_x = points[:, 0].min()
    max_x = points[:, 0].max()
    scale = 1.0 / (max_x - min_x)

    result = np.empty_like(points)
    result[:, 0] = (points[:, 0] - min_x) * scale
    result[:, 1] = points[:, 1] * scale
    return result


def scale_to_chord(points, chord: float) -> NDArray[np.float64]:
    """Uniformly scale a chord-fraction section to a physical chord."""
    return as_points(points) * chord


def get_thickness(points) -> float:
    """Maximum thickness-to-chord ratio: 2 * max|y| of the normalized section."""
    normalized = normalize(points)
    if len(normalized) == 0:
        return 0.0
    return float(2.0 * np.abs(normalized[:, 1]).max())
