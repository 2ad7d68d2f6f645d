"""
Blade geometry module.

Builds the triangulated 3D propeller surface from the radial
distributions and per-station airfoil sections:

- One chord-scaled section per radial station (cached at construction)
- Section points placed with pitch twist, skew and rake, replicated for
  each blade at 2*pi*b/B about the rotor axis
- A truncated-cone hub behind the blade root plane
- ASCII STL and OBJ serialization

Output coordinates are (x, z, y) of the rotor frame, i.e. the rotor axis
is the second component.
"""

from dataclasses import dataclass, field
from typing import List, Sequence
import logging
import math
import numpy as np
from numpy.typing import NDArray

from .airfoil_config import generate
from .airfoil import scale_to_chord
from .distribution import NUM_STATIONS, RadialDistributionModel
from .propeller import PropellerParams

logger = logging.getLogger(__name__)

# Points per surface of the cached station sections
SECTION_RESOLUTION = 20

HUB_TOP_RATIO = 0.8     # top radius / hub radius
HUB_LENGTH_RATIO = 0.8  # hub length / hub radius


@dataclass
class BladeMesh:
    """
    Indexed triangle mesh.

    Attributes:
        vertices: Array (V, 3) of vertex positions [m]
        faces: Array (F, 3) of 0-based vertex indices
    """
    vertices: NDArray[np.float64] = field(default_factory=lambda: np.zeros((0, 3)))
    faces: NDArray[np.int_] = field(default_factory=lambda: np.zeros((0, 3), dtype=int))

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    def merge(self, other: "BladeMesh") -> "BladeMesh":
        """Combine two meshes, offsetting the other mesh's indices."""
        return BladeMesh(
            vertices=np.vstack([self.vertices, other.vertices]),
            faces=np.vstack([self.faces, other.faces + self.num_vertices]),
        )

    def face_normals(self) -> NDArray[np.float64]:
        """
        Unit normal of every face from the cross product of its edges.

        Degenerate (zero-area) faces yield NaN components.
        """
        v0 = self.vertices[self.faces[:, 0]]
        v1 = self.vertices[self.faces[:, 1]]
        v2 = self.vertices[self.faces[:, 2]]
        normals = np.cross(v1 - v0, v2 - v0)
        with np.errstate(divide="ignore", invalid="ignore"):
            return normals / np.linalg.norm(normals, axis=1)[:, None]

    def bounds(self):
        """(min, max) corners of the axis-aligned bounding box."""
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def to_stl(self, name: str = "propeller") -> str:
        """Serialize as ASCII STL (one facet per triangle)."""
        normals = self.face_normals()
        lines = [f"solid {name}"]
        for face, normal in zip(self.faces, normals):
            lines.append(f"  facet normal {normal[0]:e} {normal[1]:e} {normal[2]:e}")
            lines.append("    outer loop")
            for idx in face:
                x, y, z = self.vertices[idx]
                lines.append(f"      vertex {x:e} {y:e} {z:e}")
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append(f"endsolid {name}")
        return "\n".join(lines)

    def to_obj(self, header: Sequence[str] = ()) -> str:
        """Serialize as Wavefront OBJ with 1-based face indices."""
        lines = [f"# {h}" for h in header]
        if lines:
            lines.append("")
        for x, y, z in self.vertices:
            lines.append(f"v {x:.6f} {y:.6f} {z:.6f}")
        lines.append("")
        for i0, i1, i2 in self.faces + 1:
            lines.append(f"f {i0} {i1} {i2}")
        return "\n".join(lines) + "\n"


def grid_faces(num_rows: int, num_cols: int) -> NDArray[np.int_]:
    """
    Triangulate a (rows x cols) vertex grid, two triangles per cell.

    For cell (i, j): (v0, v2, v1) and (v1, v2, v3) with v0 = i*W + j,
    v1 = v0 + 1, v2 = v0 + W, v3 = v2 + 1, W = num_cols.
    """
    faces = []
    for i in range(num_rows - 1):
        for j in range(num_cols - 1):
            v0 = i * num_cols + j
            v1 = v0 + 1
            v2 = v0 + num_cols
            v3 = v2 + 1
            faces.append((v0, v2, v1))
            faces.append((v1, v2, v3))
    return np.array(faces, dtype=int).reshape(-1, 3)


class BladeGeometryBuilder:
    """
    3D surface constructor for a propeller design.

    The builder copies the parameters at construction, synthesizes empty
    distributions and caches one chord-scaled airfoil section per
    station. Later edits to the caller's parameters are not observed.
    """

    def __init__(
        self,
        params: PropellerParams,
        num_stations: int = NUM_STATIONS,
        section_resolution: int = SECTION_RESOLUTION,
    ):
        """
        Initialize builder.

        Args:
            params: Propeller design (copied)
            num_stations: Number of radial stations
            section_resolution: Points per surface of each section

        Raises:
            InvalidCode, InsufficientPoints, UnknownAirfoilType:
                If the airfoil config cannot be generated
        """
        self.params = params.with_default_distributions(num_stations)
        self._dist = RadialDistributionModel.from_params(self.params, num_stations)
        self._stations = self._dist.stations
        self._sections = self._precompute_sections(section_resolution)

    def _precompute_sections(self, resolution: int) -> List[NDArray[np.float64]]:
        base = generate(self.params.airfoil, resolution)
        chords = self._dist.station_values("chord")
        return [scale_to_chord(base, chord) for chord in chords]

    @property
    def stations(self) -> NDArray[np.float64]:
        """Station radii [m]."""
        return self._stations.copy()

    @property
    def sections(self) -> List[NDArray[np.float64]]:
        """Chord-scaled section of every station, hub to tip (copies)."""
        return [s.copy() for s in self._sections]

    @property
    def points_per_section(self) -> int:
        return len(self._sections[0])

    def blade_vertices(self, blade_angle: float) -> NDArray[np.float64]:
        """
        Vertex grid of one blade, station-major.

        Args:
            blade_angle: Angular position of the blade about the rotor axis [rad]

        Returns:
            Array (num_stations * points_per_section, 3) in output (x, z, y) order
        """
        diameter = self.params.diameter
        rows = []

        for i, r in enumerate(self._stations):
            pitch = self._dist.pitch_at(r)
            skew = self._dist.skew_at(r)
            rake = self._dist.rake_at(r)

            pitch_angle = pitch / (2 * math.pi * r)
            skew_offset = skew / diameter

            section = self._sections[i]
            x_local = section[:, 0]
            y_local = section[:, 1]

            x_skewed = x_local - skew_offset
            z_raked = y_local + rake

            theta = blade_angle + pitch_angle * (x_local * diameter / r)
            x = r * np.cos(theta) - x_skewed * np.sin(theta)
            y = r * np.sin(theta) + x_skewed * np.cos(theta)

            rows.append(np.column_stack([x, z_raked, y]))

        return np.vstack(rows)

    def generate_blade_surface(self) -> BladeMesh:
        """
        Surface of all blades.

        Every blade shares the same (station x chordwise) grid
        triangulation, offset to its own vertices.
        """
        num_blades = self.params.num_blades
        pattern = grid_faces(len(self._stations), self.points_per_section)

        mesh = BladeMesh()
        for blade in range(num_blades):
            blade_angle = 2 * math.pi * blade / num_blades
            mesh = mesh.merge(BladeMesh(self.blade_vertices(blade_angle), pattern.copy()))

        logger.debug(
            "Blade surface: %d blades, %d vertices, %d faces",
            num_blades, mesh.num_vertices, mesh.num_faces,
        )
        return mesh

    def generate_hub(self, segments: int = 32) -> BladeMesh:
        """
        Truncated-cone hub along the rotor axis.

        Base radius = hub radius, top radius = 0.8 x hub radius,
        length = 0.8 x hub radius. The top face lies on the blade root
        plane (axial 0) and the base behind it. End caps are closed.
        """
        r_base = self.params.hub_radius
        r_top = HUB_TOP_RATIO * r_base
        length = HUB_LENGTH_RATIO * r_base

        angles = 2 * np.pi * np.arange(segments) / segments
        cos_a = np.cos(angles)
        sin_a = np.sin(angles)

        base = np.column_stack([r_base * cos_a, np.full(segments, -length), r_base * sin_a])
        top = np.column_stack([r_top * cos_a, np.zeros(segments), r_top * sin_a])
        centers = np.array([[0.0, -length, 0.0], [0.0, 0.0, 0.0]])
        vertices = np.vstack([base, top, centers])

        base_center = 2 * segments
        top_center = base_center + 1

        faces = []
        for k in range(segments):
            k_next = (k + 1) % segments
            b0, b1 = k, k_next
            t0, t1 = segments + k, segments + k_next
            # Side, outward facing
            faces.append((b0, t0, b1))
            faces.append((b1, t0, t1))
            # Caps
            faces.append((base_center, b0, b1))
            faces.append((top_center, t1, t0))

        return BladeMesh(vertices, np.array(faces, dtype=int))

    def generate_complete_propeller(self, hub_segments: int = 32) -> BladeMesh:
        """Blades and hub merged into one mesh."""
        return self.generate_blade_surface().merge(self.generate_hub(hub_segments))

    def obj_header(self) -> List[str]:
        return [
            "Propeller geometry generated by propeller_core",
            f"Diameter: {self.params.diameter} m",
            f"Blades: {self.params.num_blades}",
        ]

    def generate_stl(self, name: str = "propeller") -> str:
        """ASCII STL of the blade surface."""
        return self.generate_blade_surface().to_stl(name)

    def generate_obj(self) -> str:
        """OBJ of the blade surface with a diameter/blade count header."""
        return self.generate_blade_surface().to_obj(self.obj_header())
