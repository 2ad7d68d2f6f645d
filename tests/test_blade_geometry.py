"""
Tests for 3D blade surface construction and mesh output.
"""

import pytest
import numpy as np
from numpy.testing import assert_array_almost_equal, assert_array_equal

from propeller_core.geometry.airfoil import UnknownAirfoilType
from propeller_core.geometry.airfoil_config import CustomAirfoil, Naca4Airfoil
from propeller_core.geometry.blade_geometry import BladeGeometryBuilder, BladeMesh, grid_faces
from propeller_core.geometry.propeller import PropellerParams


@pytest.fixture
def params():
    return PropellerParams(
        diameter=0.254,
        num_blades=2,
        hub_radius=0.018,
        airfoil=Naca4Airfoil("2412"),
    )


@pytest.fixture
def builder(params):
    return BladeGeometryBuilder(params)


class TestGridFaces:
    """Test grid triangulation."""

    def test_counts(self):
        """Each grid cell gives two triangles."""
        faces = grid_faces(3, 4)
        assert faces.shape == (2 * 2 * 3, 3)

    def test_cell_pattern(self):
        """Cells split along the same diagonal."""
        faces = grid_faces(2, 3)
        assert_array_equal(faces[0], [0, 3, 1])
        assert_array_equal(faces[1], [1, 3, 4])


class TestBladeSurface:
    """Test blade surface construction."""

    def test_sections_cached(self, builder):
        """One section is cached per station."""
        assert len(builder.sections) == 20
        assert builder.points_per_section == 39

    def test_counts(self, builder):
        """Vertex and face counts scale with blades, stations and points."""
        mesh = builder.generate_blade_surface()
        assert mesh.num_vertices == 2 * 20 * 39
        assert mesh.num_faces == 2 * 2 * 19 * 38

    def test_blades_share_triangulation(self, builder):
        """Every blade uses the same triangulation, offset by blade."""
        mesh = builder.generate_blade_surface()
        per_blade = mesh.num_faces // 2
        offset = 20 * 39
        assert_array_equal(mesh.faces[per_blade:], mesh.faces[:per_blade] + offset)

    def test_leading_edge_on_reference_axis(self, builder):
        """Leading edge points sit on the blade reference axis."""
        vertices = builder.blade_vertices(0.0)
        stations = builder.stations
        ppr = builder.points_per_section
        for i, r in enumerate(stations):
            assert_array_almost_equal(vertices[i * ppr], [r, 0.0, 0.0])

    def test_second_blade_rotated(self, builder):
        """The second blade is rotated by half a turn."""
        mesh = builder.generate_blade_surface()
        r0 = builder.stations[0]
        assert_array_almost_equal(mesh.vertices[20 * 39], [-r0, 0.0, 0.0])

    def test_rake_shifts_axially(self, params):
        """Rake shifts the section along the rotor axis."""
        params.rake_distribution = [0.01] * 20
        vertices = BladeGeometryBuilder(params).blade_vertices(0.0)
        assert vertices[0, 1] == pytest.approx(0.01)

    def test_skew_shifts_in_plane(self, params):
        """Skew moves the section along the blade tangent by skew/D."""
        params.skew_distribution = [0.0254] * 20
        builder = BladeGeometryBuilder(params)
        vertices = builder.blade_vertices(0.0)
        ppr = builder.points_per_section
        for i, r in enumerate(builder.stations):
            assert_array_almost_equal(vertices[i * ppr], [r, 0.0, -0.1])

    def test_pitch_twist_at_trailing_edge(self, params):
        """Trailing edge points are rotated by pitch_angle * x_local * D / r."""
        params.pitch_distribution = [0.2] * 20
        builder = BladeGeometryBuilder(params)
        vertices = builder.blade_vertices(0.0)
        ppr = builder.points_per_section
        te = ppr // 2

        for i, r in enumerate(builder.stations):
            x_local, y_local = builder.sections[i][te]
            assert x_local > 0
            theta = 0.2 / (2 * np.pi * r) * x_local * 0.254 / r
            expected = [
                r * np.cos(theta) - x_local * np.sin(theta),
                y_local,
                r * np.sin(theta) + x_local * np.cos(theta),
            ]
            assert_array_almost_equal(vertices[i * ppr + te], expected)

    def test_params_snapshot(self, params):
        """Later edits to the design do not reach the builder."""
        builder = BladeGeometryBuilder(params)
        before = builder.generate_blade_surface().vertices

        params.diameter = 2.0
        params.chord_distribution = [1.0] * 20

        assert_array_equal(builder.generate_blade_surface().vertices, before)

    def test_unresolvable_airfoil(self, params):
        """Unresolvable airfoils fail at construction."""
        params.airfoil = CustomAirfoil(name="mystery")
        with pytest.raises(UnknownAirfoilType):
            BladeGeometryBuilder(params)


class TestHub:
    """Test hub body construction."""

    def test_counts(self, builder):
        """Hub vertex and face counts for a given segment count."""
        hub = builder.generate_hub(32)
        assert hub.num_vertices == 66
        assert hub.num_faces == 128

    def test_dimensions(self, builder):
        """Hub base and top radii and axial placement."""
        hub = builder.generate_hub(16)
        r_hub = 0.018
        base = hub.vertices[:16]
        top = hub.vertices[16:32]
        assert_array_almost_equal(np.hypot(base[:, 0], base[:, 2]), [r_hub] * 16)
        assert_array_almost_equal(np.hypot(top[:, 0], top[:, 2]), [0.8 * r_hub] * 16)
        assert_array_almost_equal(base[:, 1], [-0.8 * r_hub] * 16)
        assert_array_almost_equal(top[:, 1], [0.0] * 16)

    def test_outward_normals(self, builder):
        """Hub faces wind outward."""
        hub = builder.generate_hub(16)
        normals = hub.face_normals()
        assert_array_almost_equal(np.linalg.norm(normals, axis=1), np.ones(hub.num_faces))
        # Side face of segment 0 points away from the axis, caps point along it
        assert normals[0, 0] > 0
        assert normals[2, 1] < 0
        assert normals[3, 1] > 0

    def test_complete_propeller(self, builder):
        """The complete mesh combines blades and hub."""
        blades = builder.generate_blade_surface()
        hub = builder.generate_hub()
        full = builder.generate_complete_propeller()
        assert full.num_vertices == blades.num_vertices + hub.num_vertices
        assert full.num_faces == blades.num_faces + hub.num_faces
        assert full.faces.max() < full.num_vertices


class TestSerialization:
    """Test STL / OBJ text output."""

    @pytest.fixture
    def triangle(self):
        return BladeMesh(
            vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
            faces=np.array([[0, 1, 2]]),
        )

    def test_stl_structure(self, triangle):
        """ASCII STL has solid, facet and vertex records."""
        text = triangle.to_stl("tri")
        lines = text.splitlines()
        assert lines[0] == "solid tri"
        assert lines[-1] == "endsolid tri"
        assert lines[1].split()[:2] == ["facet", "normal"]
        assert [float(v) for v in lines[1].split()[2:]] == pytest.approx([0.0, 0.0, 1.0])
        assert sum(1 for l in lines if l.strip().startswith("vertex")) == 3

    def test_obj_one_based(self, triangle):
        """OBJ faces use 1-based indices."""
        text = triangle.to_obj(["hello"])
        lines = text.splitlines()
        assert lines[0] == "# hello"
        assert "v 1.000000 0.000000 0.000000" in lines
        assert "f 1 2 3" in lines

    def test_builder_stl(self, builder):
        """Builder STL holds one facet per blade face."""
        text = builder.generate_stl()
        assert text.startswith("solid propeller")
        assert text.count("facet normal") == builder.generate_blade_surface().num_faces

    def test_builder_obj_header(self, builder):
        """Builder OBJ carries the design header."""
        lines = builder.generate_obj().splitlines()
        assert lines[0] == "# Propeller geometry generated by propeller_core"
        assert lines[1] == "# Diameter: 0.254 m"
        assert lines[2] == "# Blades: 2"
        assert sum(1 for l in lines if l.startswith("v ")) == 2 * 20 * 39
        assert sum(1 for l in lines if l.startswith("f ")) == 2 * 2 * 19 * 38
