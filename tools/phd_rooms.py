"""
Room geometry decoder for Tomb Raider 1 PHD levels.

=== ROOM RECORD ===

  Size        Field
  4 × s32     room info: x, z, yBottom, yTop (world units; y bounds unused)
  u32         room data length W, in 16-bit words
  W × u16     room data block (see below)
  u16         portal count, then 32 bytes per portal        (skipped)
  u16, u16    sector grid z × x, then 8 bytes per sector    (skipped)
  s16         ambient intensity
  u16         light count, then 18 bytes per light          (skipped)
  u16         static mesh count, then 18 bytes per record
  s16         alternate room (-1 if none)
  u16         flags

=== ROOM DATA BLOCK ===

Decoded on its own cursor once all W words have been read:

  u16 vertex count, then per vertex: s16 x, s16 y, s16 z, u16 lighting
  u16 quad count, then per quad: u16 index × 4, u16 texture word
  u16 triangle count, then per triangle: u16 index × 3, u16 texture word
  (sprites follow; not decoded)

Vertex x/z are relative to the room origin from the room info. The decoder
adds the origin, so every room's geometry comes out in world coordinates.

=== STATIC MESH RECORD (18 bytes) ===

  s32 x, s32 y, s32 z   world position
  u16 rotation          bits 14-15: quarter turns
  u16 lighting
  u16 static mesh id    opaque; resolved later by phd_statics
"""

import logging

from phd_cursor import Cursor
from phd_faces import QUAD, TRIANGLE, read_face_list
from phd_model import RoomMesh, StaticMeshPlacement, Unresolved, Vertex

log = logging.getLogger(__name__)

ROOM_Y_BOUNDS_SIZE = 8
ROOM_PORTAL_SIZE = 32
ROOM_SECTOR_SIZE = 8
ROOM_LIGHT_SIZE = 18

ROTATION_SHIFT = 14


def read_room_vertices(cursor: Cursor, origin_x: int, origin_z: int) -> list[Vertex]:
    count = cursor.read_u16()
    vertices = []
    for _ in range(count):
        x = cursor.read_s16()
        y = cursor.read_s16()
        z = cursor.read_s16()
        lighting = cursor.read_u16()
        vertices.append(Vertex(x + origin_x, y, z + origin_z, lighting))
    return vertices


def parse_room_data(cursor: Cursor, origin_x: int, origin_z: int):
    """Decode the room data block. Returns (quads, triangles)."""
    vertices = read_room_vertices(cursor, origin_x, origin_z)
    quads = read_face_list(cursor, vertices, QUAD)
    triangles = read_face_list(cursor, vertices, TRIANGLE)
    return quads, triangles


def read_static_placement(cursor: Cursor) -> StaticMeshPlacement:
    x = cursor.read_s32()
    y = cursor.read_s32()
    z = cursor.read_s32()
    rotation = (cursor.read_u16() >> ROTATION_SHIFT) & 0x3
    lighting = cursor.read_u16()
    static_id = cursor.read_u16()
    return StaticMeshPlacement(x, y, z, rotation, lighting, Unresolved(static_id))


def read_room(cursor: Cursor, index: int) -> RoomMesh:
    log.debug('%d: room #%d', cursor.position, index)

    origin_x = cursor.read_s32()
    origin_z = cursor.read_s32()
    cursor.skip(ROOM_Y_BOUNDS_SIZE)

    num_words = cursor.read_u32()
    block_start = cursor.position
    block = Cursor.from_bytes(cursor.read_bytes(num_words * 2), origin=block_start)
    quads, triangles = parse_room_data(block, origin_x, origin_z)

    num_portals = cursor.read_u16()
    cursor.skip(ROOM_PORTAL_SIZE * num_portals)

    num_z_sectors = cursor.read_u16()
    num_x_sectors = cursor.read_u16()
    cursor.skip(ROOM_SECTOR_SIZE * num_z_sectors * num_x_sectors)

    ambient = cursor.read_s16()
    num_lights = cursor.read_u16()
    cursor.skip(ROOM_LIGHT_SIZE * num_lights)

    num_statics = cursor.read_u16()
    statics = [read_static_placement(cursor) for _ in range(num_statics)]

    alternate_room = cursor.read_s16()
    flags = cursor.read_u16()

    log.debug('  %d quads, %d triangles, %d portals, %dx%d sectors, %d lights, '
              '%d static meshes', len(quads), len(triangles), num_portals,
              num_z_sectors, num_x_sectors, num_lights, num_statics)

    return RoomMesh(
        index=index,
        origin_x=origin_x,
        origin_z=origin_z,
        quads=quads,
        triangles=triangles,
        static_meshes=statics,
        ambient_intensity=ambient,
        alternate_room=alternate_room,
        flags=flags,
    )


def read_rooms(cursor: Cursor) -> list[RoomMesh]:
    count = cursor.read_u16()
    log.debug('%d: %d rooms', cursor.position_offset_by(-2), count)
    return [read_room(cursor, i) for i in range(count)]
