"""
Export functionality for propeller designs.

Exports to versioned JSON, ASCII STL, Wavefront OBJ and a CSV table of
performance curves.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
import csv
import json
import logging

from .schema import SCHEMA_VERSION, EXPORT_FORMAT_VERSION, COORDINATE_SYSTEM
from ..analysis.bemt import PerformanceCurves
from ..geometry.blade_geometry import BladeGeometryBuilder
from ..geometry.propeller import PropellerParams
from .. import __version__ as CORE_VERSION

logger = logging.getLogger(__name__)


def design_to_record(
    params: PropellerParams,
    app_version: Optional[str] = None,
    exported_at: Optional[str] = None,
) -> dict:
    """
    Wrap a design in the export record.

    The record carries:
    - Format version and export timestamp
    - Schema and app version for compatibility checking
    - Coordinate system of generated geometry
    - The parameter record itself

    Args:
        params: Design to export
        app_version: Optional app version string (defaults to core version)
        exported_at: ISO-8601 timestamp (defaults to now, UTC)
    """
    if app_version is None:
        app_version = CORE_VERSION
    if exported_at is None:
        exported_at = datetime.now(timezone.utc).isoformat()

    return {
        "version": EXPORT_FORMAT_VERSION,
        "exportedAt": exported_at,
        "schema_version": SCHEMA_VERSION,
        "app_version": app_version,
        "coordinate_system": COORDINATE_SYSTEM,
        "params": params.to_dict(),
    }


def _prepare(path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def export_json(
    params: PropellerParams,
    path: Path,
    app_version: Optional[str] = None,
    indent: int = 2
) -> None:
    """
    Export a propeller design to JSON format.

    Args:
        params: The design to export
        path: Output file path
        app_version: Optional app version string (defaults to core version)
        indent: JSON indentation level
    """
    record = design_to_record(params, app_version)
    path = _prepare(path)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(record, f, indent=indent)

    logger.info("Exported design %s to %s", params.id, path)


def export_stl(params: PropellerParams, path: Path, include_hub: bool = False) -> None:
    """
    Export the blade surface (optionally with hub) as ASCII STL.

    Args:
        params: The design to mesh
        path: Output file path
        include_hub: Merge the hub into the exported solid
    """
    builder = BladeGeometryBuilder(params)
    if include_hub:
        mesh = builder.generate_complete_propeller()
    else:
        mesh = builder.generate_blade_surface()

    path = _prepare(path)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(mesh.to_stl())

    logger.info("Exported STL (%d faces) to %s", mesh.num_faces, path)


def export_obj(params: PropellerParams, path: Path, include_hub: bool = False) -> None:
    """Export the blade surface (optionally with hub) as Wavefront OBJ."""
    builder = BladeGeometryBuilder(params)
    if include_hub:
        mesh = builder.generate_complete_propeller()
    else:
        mesh = builder.generate_blade_surface()

    path = _prepare(path)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(mesh.to_obj(builder.obj_header()))

    logger.info("Exported OBJ (%d vertices) to %s", mesh.num_vertices, path)


def export_performance_csv(curves: PerformanceCurves, path: Path) -> None:
    """
    Export performance curves as CSV, one row per RPM value.

    Columns: rpm, thrust, torque, power, efficiency, ct, cq, cp, J
    """
    path = _prepare(path)

    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(["rpm", "thrust", "torque", "power", "efficiency", "ct", "cq", "cp", "J"])
        for i in range(len(curves)):
            writer.writerow([
                f"{curves.rpm[i]:.1f}",
                f"{curves.thrust[i]:.6f}",
                f"{curves.torque[i]:.6f}",
                f"{curves.power[i]:.6f}",
                f"{curves.efficiency[i]:.3f}",
                f"{curves.ct[i]:.6f}",
                f"{curves.cq[i]:.6f}",
                f"{curves.cp[i]:.6f}",
                f"{curves.advance_ratio[i]:.6f}",
            ])
