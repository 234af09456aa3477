"""
Object mesh library of a Tomb Raider 1 PHD level.

All object meshes live in one blob, addressed through a pointer table:

  u32         mesh data length W, in 16-bit words
  W × u16     mesh data blob
  u32         mesh pointer count M
  M × u32     byte offset of each mesh inside the blob

Several pointers may share an offset. Mesh i of the library is always the
mesh at pointer i, which is what the static-mesh table and animated models
refer to.

=== MESH (at its blob offset) ===

  s16 × 3     centre                         (skipped)
  s32         collision radius               (skipped)
  s16         vertex count V (negative is fatal), then V × (s16 x, s16 y, s16 z)
  s16         normal count N
                N > 0: N × (s16 x, s16 y, s16 z) normals
                N < 0: |N| × s16 light intensities (skipped)
  face lists, in this order, each a count then records (see phd_faces):
    textured quads, textured triangles, untextured quads, untextured triangles

Untextured faces use the texture word as a palette index. Object meshes have
no baked lighting, so their vertices carry lighting 0.
"""

import logging

from phd_cursor import Cursor
from phd_errors import PhdDecodeError, TruncatedInput
from phd_faces import QUAD, TRIANGLE, read_face_list
from phd_model import ObjectMesh, Vertex

log = logging.getLogger(__name__)

MESH_CENTRE_SIZE = 6
MESH_RADIUS_SIZE = 4

# (ObjectMesh attribute, vertices per face), in file order
MESH_FACE_LISTS = (
    ('textured_quads', QUAD),
    ('textured_triangles', TRIANGLE),
    ('untextured_quads', QUAD),
    ('untextured_triangles', TRIANGLE),
)


def read_mesh_vertices(cursor: Cursor) -> list[Vertex]:
    count = cursor.read_s16()
    if count < 0:
        raise PhdDecodeError(f'Negative mesh vertex count {count}', cursor.position_offset_by(-2))
    vertices = []
    for _ in range(count):
        x = cursor.read_s16()
        y = cursor.read_s16()
        z = cursor.read_s16()
        vertices.append(Vertex(x, y, z))
    return vertices


def read_mesh(cursor: Cursor) -> ObjectMesh:
    """Decode one mesh starting at the cursor's position."""
    cursor.skip(MESH_CENTRE_SIZE)
    cursor.skip(MESH_RADIUS_SIZE)

    vertices = read_mesh_vertices(cursor)
    mesh = ObjectMesh(vertex_count=len(vertices))

    num_normals = cursor.read_s16()
    if num_normals > 0:
        mesh.normals = [
            (cursor.read_s16(), cursor.read_s16(), cursor.read_s16())
            for _ in range(num_normals)
        ]
    elif num_normals < 0:
        mesh.light_count = -num_normals
        cursor.skip(mesh.light_count * 2)

    for attr, arity in MESH_FACE_LISTS:
        setattr(mesh, attr, read_face_list(cursor, vertices, arity))

    return mesh


def parse_mesh_at(blob: bytes, offset: int, blob_origin: int = 0) -> ObjectMesh:
    """Decode the mesh `offset` bytes into the blob on a private cursor."""
    if offset > len(blob):
        raise TruncatedInput(offset, len(blob), blob_origin)
    cursor = Cursor.from_bytes(blob, origin=blob_origin)
    cursor.skip(offset)
    return read_mesh(cursor)


def read_mesh_library(cursor: Cursor) -> list[ObjectMesh]:
    num_words = cursor.read_u32()
    blob_origin = cursor.position
    blob = cursor.read_bytes(num_words * 2)
    log.debug('%d: mesh data, %d words', blob_origin - 4, num_words)

    num_pointers = cursor.read_u32()
    log.debug('%d: %d mesh pointers', cursor.position_offset_by(-4), num_pointers)
    offsets = [cursor.read_u32() for _ in range(num_pointers)]

    meshes = [parse_mesh_at(blob, offset, blob_origin) for offset in offsets]
    log.debug('  %d mesh faces', sum(m.face_count for m in meshes))
    return meshes
