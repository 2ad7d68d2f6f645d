"""
Airfoil polar database lookup.

Keyed store of airfoil metadata and polars tabulated at several Reynolds
numbers. The solver only needs get_polar(name, reynolds); the store is
built from an already-loaded mapping of the form

    {
      "metadata": {...},
      "airfoils": {
        "<id>": {
          "name": ..., "type": ..., "description": ...,
          "thickness": ..., "camber": ...,
          "polars": {
            "Re_<n>": {"reynolds": n, "data": [{"alpha", "cl", "cd", "cm"?}, ...]}
          }
        }
      }
    }
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple
import json
import logging

from ..geometry.airfoil_config import AirfoilPolar

logger = logging.getLogger(__name__)


def _reynolds_from_key(key: str, entry: dict) -> int:
    if "reynolds" in entry:
        return int(entry["reynolds"])
    return int(key.replace("Re_", ""))


class PolarDatabase:
    """
    Read-only polar lookup by airfoil id and nearest Reynolds number.
    """

    def __init__(self, data: dict):
        self.metadata: dict = dict(data.get("metadata", {}))
        self._airfoils: Dict[str, dict] = dict(data.get("airfoils", {}))

    @classmethod
    def from_json(cls, path: Path) -> "PolarDatabase":
        """Load a database file."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        db = cls(data)
        logger.info("Loaded %d airfoils from %s", len(db), path)
        return db

    def __len__(self) -> int:
        return len(self._airfoils)

    def __contains__(self, name: str) -> bool:
        return name in self._airfoils

    def get_airfoil(self, name: str) -> Optional[dict]:
        """Raw airfoil entry, or None if unknown."""
        return self._airfoils.get(name)

    def list_airfoils(self) -> List[dict]:
        """Summary of every airfoil: id, display name, type, thickness, camber."""
        return [
            {
                "id": airfoil_id,
                "name": airfoil_id.replace("_", " ", 1),
                "type": entry.get("type", ""),
                "thickness": entry.get("thickness", 0.0),
                "camber": entry.get("camber", 0.0),
            }
            for airfoil_id, entry in self._airfoils.items()
        ]

    def reynolds_numbers(self, name: str) -> List[int]:
        """Tabulated Reynolds numbers of an airfoil, ascending."""
        entry = self.get_airfoil(name)
        if entry is None:
            return []
        return sorted(_reynolds_from_key(k, v) for k, v in entry.get("polars", {}).items())

    def get_polar(self, name: str, reynolds: float) -> Optional[AirfoilPolar]:
        """
        Polar at the tabulated Reynolds number closest to the request.

        Args:
            name: Airfoil id
            reynolds: Requested Reynolds number

        Returns:
            AirfoilPolar, or None for unknown airfoils / empty polar sets
        """
        entry = self.get_airfoil(name)
        if entry is None:
            return None

        polars = entry.get("polars", {})
        candidates: List[Tuple[int, dict]] = [
            (_reynolds_from_key(k, v), v) for k, v in polars.items()
        ]
        if not candidates:
            return None

        closest_re, polar = min(candidates, key=lambda c: abs(c[0] - reynolds))
        logger.debug("Polar %s: Re=%.0f -> tabulated Re=%d", name, reynolds, closest_re)

        rows = polar.get("data", [])
        has_cm = bool(rows) and all("cm" in row for row in rows)
        return AirfoilPolar(
            aoa=[row["alpha"] for row in rows],
            cl=[row["cl"] for row in rows],
            cd=[row["cd"] for row in rows],
            cm=[row["cm"] for row in rows] if has_cm else None,
        )


def interpolate_polar(polar: AirfoilPolar, aoa: float) -> Tuple[float, float]:
    """(cl, cd) at aoa [deg], held at the end values outside the table."""
    return polar.lookup(aoa)
