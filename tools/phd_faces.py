"""
Face record loader shared by room geometry and object meshes.

Every face list in a PHD file has the same shape:

  u16 count
  count × {
      u16 vertex index × arity   (4 for quads, 3 for triangles)
      u16 texture word           bit 15: double-sided, bits 0-14: texture index
  }

Indices point into the vertex list decoded just before the faces (the room's
or the mesh's). Faces store copies of the vertices, not the indices.
"""

from phd_cursor import Cursor
from phd_errors import InvalidVertexIndex
from phd_model import Face, Vertex

QUAD = 4
TRIANGLE = 3

DOUBLE_SIDED_BIT = 0x8000
TEXTURE_INDEX_MASK = 0x7FFF


def split_texture_word(word: int) -> tuple[int, bool]:
    """Split a raw texture word into (texture index, double-sided)."""
    word &= 0xFFFF
    return word & TEXTURE_INDEX_MASK, bool(word & DOUBLE_SIDED_BIT)


def read_face(cursor: Cursor, vertices: list[Vertex], arity: int) -> Face:
    resolved = []
    for _ in range(arity):
        index = cursor.read_u16()
        if index >= len(vertices):
            raise InvalidVertexIndex(index, len(vertices), cursor.position_offset_by(-2))
        resolved.append(vertices[index])
    texture_index, double_sided = split_texture_word(cursor.read_u16())
    return Face(tuple(resolved), texture_index, double_sided)


def read_face_list(cursor: Cursor, vertices: list[Vertex], arity: int) -> list[Face]:
    """Read a count-prefixed face list of the given arity."""
    count = cursor.read_u16()
    return [read_face(cursor, vertices, arity) for _ in range(count)]
