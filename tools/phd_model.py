"""
In-memory records produced by the PHD decoders.

Everything here is built once by phd_level.decode_phd() and left alone
afterwards, with one exception: StaticMeshPlacement.mesh starts as
Unresolved(static_id) and is replaced by Resolved(static_id, mesh_index)
when phd_statics.relink_static_meshes() finds the id in the static-mesh
table.
"""

from dataclasses import dataclass, field

import numpy as np

ATLAS_WIDTH = 256
ATLAS_HEIGHT = 256
ATLAS_BYTES = ATLAS_WIDTH * ATLAS_HEIGHT
PALETTE_BYTES = 768

# Object texture attribute codes (categorical, not bit flags)
ATTRIBUTE_ALPHA = 1
ATTRIBUTE_ALPHA_NO_DEPTH = 4
ATTRIBUTE_WIREFRAME = 6


@dataclass(frozen=True)
class Vertex:
    x: int
    y: int
    z: int
    lighting: int = 0  # room vertices only; 0 (bright) .. 8191 (dark)


@dataclass(frozen=True)
class Face:
    vertices: tuple[Vertex, ...]
    texture_index: int
    double_sided: bool = False

    @property
    def is_quad(self) -> bool:
        return len(self.vertices) == 4


@dataclass(eq=False)
class TextureAtlas:
    pixels: np.ndarray  # (256, 256) uint8 palette indices

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


@dataclass(frozen=True)
class Unresolved:
    static_id: int


@dataclass(frozen=True)
class Resolved:
    static_id: int
    mesh_index: int


MeshRef = Unresolved | Resolved


@dataclass
class StaticMeshPlacement:
    x: int
    y: int
    z: int
    rotation: int  # quarter turns, 0-3
    lighting: int
    mesh: MeshRef

    @property
    def static_id(self) -> int:
        return self.mesh.static_id

    @property
    def mesh_index(self) -> int | None:
        if isinstance(self.mesh, Resolved):
            return self.mesh.mesh_index
        return None

    @property
    def rotation_degrees(self) -> int:
        return self.rotation * 90


@dataclass
class RoomMesh:
    index: int
    origin_x: int
    origin_z: int
    quads: list[Face] = field(default_factory=list)
    triangles: list[Face] = field(default_factory=list)
    static_meshes: list[StaticMeshPlacement] = field(default_factory=list)
    ambient_intensity: int = 0
    alternate_room: int = -1
    flags: int = 0


@dataclass
class ObjectMesh:
    vertex_count: int = 0
    normals: list[tuple[int, int, int]] = field(default_factory=list)
    light_count: int = 0
    textured_quads: list[Face] = field(default_factory=list)
    textured_triangles: list[Face] = field(default_factory=list)
    untextured_quads: list[Face] = field(default_factory=list)
    untextured_triangles: list[Face] = field(default_factory=list)

    @property
    def face_count(self) -> int:
        return (len(self.textured_quads) + len(self.textured_triangles) +
                len(self.untextured_quads) + len(self.untextured_triangles))


@dataclass(frozen=True)
class StaticMeshInfo:
    static_id: int
    mesh_index: int
    flags: int = 0


@dataclass(eq=False)
class ObjectTexture:
    attribute: int
    atlas_index: int
    is_triangle: bool
    width: int
    height: int
    uv: tuple[tuple[float, float], ...]  # reverse corner order: uv[3] is corner 0
    pixels: np.ndarray  # (height, width) uint8

    @property
    def has_alpha(self) -> bool:
        return self.attribute in (ATTRIBUTE_ALPHA, ATTRIBUTE_ALPHA_NO_DEPTH)

    @property
    def ignores_depth_test(self) -> bool:
        return self.attribute == ATTRIBUTE_ALPHA_NO_DEPTH

    @property
    def has_wireframe(self) -> bool:
        return self.attribute == ATTRIBUTE_WIREFRAME


@dataclass(eq=False)
class Palette:
    colors: np.ndarray  # 768 uint8, RGB triples in 8-bit range

    def rgb(self, index: int) -> tuple[int, int, int]:
        r, g, b = self.colors[index * 3:index * 3 + 3]
        return int(r), int(g), int(b)


@dataclass(eq=False)
class PhdLevel:
    """Everything decoded from one level file."""
    version: int
    atlases: list[TextureAtlas] = field(default_factory=list)
    rooms: list[RoomMesh] = field(default_factory=list)
    floor_data_words: int = 0
    meshes: list[ObjectMesh] = field(default_factory=list)
    static_meshes: list[StaticMeshInfo] = field(default_factory=list)
    object_textures: list[ObjectTexture] = field(default_factory=list)
    palette: Palette | None = None
    section_counts: dict[str, int] = field(default_factory=dict)

    def summary(self) -> dict:
        placements = [p for room in self.rooms for p in room.static_meshes]
        return {
            'version': self.version,
            'atlases': len(self.atlases),
            'rooms': len(self.rooms),
            'roomQuads': sum(len(r.quads) for r in self.rooms),
            'roomTriangles': sum(len(r.triangles) for r in self.rooms),
            'staticPlacements': len(placements),
            'unresolvedPlacements': sum(1 for p in placements if p.mesh_index is None),
            'floorDataWords': self.floor_data_words,
            'meshes': len(self.meshes),
            'meshFaces': sum(m.face_count for m in self.meshes),
            'staticMeshes': len(self.static_meshes),
            'objectTextures': len(self.object_textures),
            'skipped': dict(self.section_counts),
        }
