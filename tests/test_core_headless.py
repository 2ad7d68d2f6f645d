"""Headless core logic tests (no GUI dependency)."""

from propeller_core.analysis.bemt import BEMTSolver, OperatingConditions
from propeller_core.geometry.blade_geometry import BladeGeometryBuilder
from propeller_core.geometry.propeller import PropellerParams
from propeller_core.io.export import export_json


def test_core_logic_runs_headless(tmp_path):
    """Design, solve, mesh and export without any front end."""
    design = PropellerParams.create_default(name="Headless Core")
    export_path = tmp_path / "headless_core.json"

    export_json(design, export_path)
    result = BEMTSolver(design, OperatingConditions(velocity=10.0, rpm=4000.0)).solve()
    mesh = BladeGeometryBuilder(design).generate_complete_propeller()

    assert export_path.exists()
    assert result.thrust > 0
    assert mesh.num_faces > 0
