"""
Tabulated airfoil presets.

Read-only table of named sections given as coordinate lists in Selig
order (TE -> upper -> LE -> lower -> TE). Presets are resampled onto
the same cosine spacing as the parametric generators.
"""

from types import MappingProxyType
from typing import List, Optional
import numpy as np
from numpy.typing import NDArray

from .airfoil import as_points, cosine_spacing
from .distribution import interp_1d


_STATIONS = (0.0, 0.0125, 0.025, 0.05, 0.075, 0.1, 0.15, 0.2, 0.25,
             0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 0.95, 1.0)


def _selig_loop(upper, lower) -> tuple:
    """Assemble TE->upper->LE->lower->TE from surface tables given LE->TE."""
    up = [(x, y) for x, y in zip(_STATIONS, upper)]
    lo = [(x, y) for x, y in zip(_STATIONS, lower)]
    return tuple(up[::-1] + lo[1:])


_NACA0012_HALF = (0.0, 0.01894, 0.02615, 0.03555, 0.04200, 0.04683,
                  0.05345, 0.05737, 0.05941, 0.06002, 0.05803, 0.05294,
                  0.04563, 0.03664, 0.02623, 0.01448, 0.00807, 0.00126)

_NACA0015_HALF = (0.0, 0.02367, 0.03268, 0.04443, 0.05250, 0.05853,
                  0.06682, 0.07172, 0.07427, 0.07502, 0.07254, 0.06617,
                  0.05704, 0.04580, 0.03279, 0.01810, 0.01008, 0.00158)

_NACA4412_UPPER = (0.0, 0.0244, 0.0339, 0.0473, 0.0576, 0.0659,
                   0.0789, 0.0880, 0.0941, 0.0976, 0.0980, 0.0919,
                   0.0814, 0.0669, 0.0489, 0.0271, 0.0147, 0.0013)

_NACA4412_LOWER = (0.0, -0.0143, -0.0195, -0.0249, -0.0274, -0.0286,
                   -0.0288, -0.0274, -0.0250, -0.0226, -0.0180, -0.0140,
                   -0.0100, -0.0065, -0.0039, -0.0022, -0.0016, -0.0013)


AIRFOIL_PRESETS = MappingProxyType({
    "naca0012": _selig_loop(_NACA0012_HALF, [-y for y in _NACA0012_HALF]),
    "naca0015": _selig_loop(_NACA0015_HALF, [-y for y in _NACA0015_HALF]),
    "naca4412": _selig_loop(_NACA4412_UPPER, _NACA4412_LOWER),
})


def preset_key(name: str) -> str:
    """Canonical preset key: lower case without spaces, '_' or '-'."""
    return "".join(ch for ch in name.lower() if ch not in " _-")


def list_presets() -> List[str]:
    """Names of the available presets."""
    return sorted(AIRFOIL_PRESETS)


def get_preset(name: str) -> Optional[NDArray[np.float64]]:
    """Tabulated coordinates of a preset, or None if unknown."""
    coords = AIRFOIL_PRESETS.get(preset_key(name))
    if coords is None:
        return None
    return as_points(coords)


def interpolate_airfoil(points, num_points: int = 100) -> NDArray[np.float64]:
    """
    Resample tabulated coordinates onto cosine spacing.

    Points with y >= 0 form the upper surface and points with y <= 0 the
    lower surface (leading edge points belong to both). Each subset is
    interpolated separately, clamped at its ends, and the result uses the
    parametric generators' ordering with 2*num_points - 1 points.

    Args:
        points: Tabulated (x, y) coordinates in any order
        num_points: Points per surface

    Returns:
        Array (2*num_points - 1, 2)
    """
    points = as_points(points)
    upper = points[points[:, 1] >= 0]
    lower = points[points[:, 1] <= 0]
    if len(upper) == 0 or len(lower) == 0:
        raise ValueError("Tabulated airfoil needs points on both sides of y=0")

    upper = upper[np.argsort(upper[:, 0], kind="stable")]
    lower = lower[np.argsort(lower[:, 0], kind="stable")]

    x = cosine_spacing(num_points)
    y_upper = interp_1d(upper[:, 0], upper[:, 1], x)
    y_lower = interp_1d(lower[:, 0], lower[:, 1], x)

    upper_pts = np.column_stack([x, y_upper])
    lower_pts = np.column_stack([x, y_lower])
    return np.vstack([upper_pts, lower_pts[-2::-1]])
