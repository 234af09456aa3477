"""
Object textures of a Tomb Raider 1 PHD level.

Each object texture is a quad or triangle cut out of one atlas page:

  Offset  Size  Field
  0       2     attribute: 0 opaque, 1 alpha, 4 alpha without depth test,
                6 wireframe (categories, not bit flags)
  2       2     atlas selector: bit 0 triangle, & 0x7FFF atlas index
  4       16    4 corners × (u16 x, u16 y)

Corner coordinates pack two values: the high byte is the atlas pixel the
corner sits on, the low byte is the corner's position inside the texture
(about 0 or 255, used as a UV fraction / 256). Triangles still store four
corners; the fourth is ignored.

UVs are stored in reverse corner order, uv[3] being corner 0. The exporter
relies on this when pairing face vertices with UVs.

The pixels are the bounding box of the first 3 (triangle) or 4 (quad) corner
pixels, copied out of the atlas.
"""

import logging

import numpy as np

from phd_cursor import Cursor
from phd_errors import AtlasIndexOutOfBounds
from phd_model import ObjectTexture, TextureAtlas

log = logging.getLogger(__name__)

OBJECT_TEXTURE_CORNERS = 4
TRIANGLE_BIT = 0x0001
ATLAS_INDEX_MASK = 0x7FFF


def split_corner(value: int) -> tuple[int, float]:
    """Split a corner coordinate into (atlas pixel, UV fraction)."""
    return value >> 8, (value & 0xFF) / 256.0


def bounding_box(cells: list[tuple[int, int]]) -> tuple[int, int, int, int]:
    """Return (min_x, min_y, width, height) of the given pixel positions."""
    xs = [x for x, _ in cells]
    ys = [y for _, y in cells]
    min_x, min_y = min(xs), min(ys)
    return min_x, min_y, max(xs) - min_x + 1, max(ys) - min_y + 1


def cut_sub_image(atlas: TextureAtlas, x: int, y: int, width: int, height: int) -> np.ndarray:
    """Copy a width × height block out of the atlas, top-left at (x, y)."""
    return atlas.pixels[y:y + height, x:x + width].copy()


def read_object_texture(cursor: Cursor, atlases: list[TextureAtlas]) -> ObjectTexture:
    attribute = cursor.read_u16()
    selector = cursor.read_u16()
    is_triangle = bool(selector & TRIANGLE_BIT)
    atlas_index = selector & ATLAS_INDEX_MASK
    if atlas_index >= len(atlases):
        raise AtlasIndexOutOfBounds(atlas_index, len(atlases), cursor.position_offset_by(-2))

    cells = []
    uv = [None] * OBJECT_TEXTURE_CORNERS
    for corner in range(OBJECT_TEXTURE_CORNERS):
        cell_x, u = split_corner(cursor.read_u16())
        cell_y, v = split_corner(cursor.read_u16())
        cells.append((cell_x, cell_y))
        uv[OBJECT_TEXTURE_CORNERS - 1 - corner] = (u, v)

    used = cells[:3] if is_triangle else cells
    x, y, width, height = bounding_box(used)

    return ObjectTexture(
        attribute=attribute,
        atlas_index=atlas_index,
        is_triangle=is_triangle,
        width=width,
        height=height,
        uv=tuple(uv),
        pixels=cut_sub_image(atlases[atlas_index], x, y, width, height),
    )


def read_object_textures(cursor: Cursor, atlases: list[TextureAtlas]) -> list[ObjectTexture]:
    count = cursor.read_u32()
    log.debug('%d: %d object textures', cursor.position_offset_by(-4), count)
    return [read_object_texture(cursor, atlases) for _ in range(count)]
