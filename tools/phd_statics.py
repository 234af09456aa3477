"""
Static-mesh table and the relink pass for room placements.

Room static mesh records carry an opaque id. The static-mesh table, read
after the animation tables, maps those ids to mesh library indices:

  u32         entry count
  per entry (32 bytes):
    u32       static mesh id
    u16       mesh library index
    12 bytes  visibility box   (skipped)
    12 bytes  collision box    (skipped)
    u16       flags

relink_static_meshes() runs once every room and the mesh library are
decoded. It is a full rooms × placements × entries cross join. The format
doesn't forbid duplicate ids; when an id appears more than once the last
entry wins. Whether the game engine resolves duplicates the same way is
unverified.
"""

import logging

from phd_cursor import Cursor
from phd_model import Resolved, RoomMesh, StaticMeshInfo

log = logging.getLogger(__name__)

STATIC_MESH_BOXES_SIZE = 24


def read_static_mesh_info(cursor: Cursor) -> StaticMeshInfo:
    static_id = cursor.read_u32()
    mesh_index = cursor.read_u16()
    cursor.skip(STATIC_MESH_BOXES_SIZE)
    flags = cursor.read_u16()
    return StaticMeshInfo(static_id, mesh_index, flags)


def read_static_meshes(cursor: Cursor) -> list[StaticMeshInfo]:
    count = cursor.read_u32()
    log.debug('%d: %d static meshes', cursor.position_offset_by(-4), count)
    return [read_static_mesh_info(cursor) for _ in range(count)]


def relink_static_meshes(rooms: list[RoomMesh], static_meshes: list[StaticMeshInfo]) -> int:
    """Point each room placement at its mesh library index.

    Matching always uses the id read from the room record, even after a
    placement has been resolved. Returns the number of placements rewritten
    (a placement matched by several entries counts once).
    """
    rewritten = set()
    for info in static_meshes:
        for room in rooms:
            for i, placement in enumerate(room.static_meshes):
                if placement.static_id == info.static_id:
                    placement.mesh = Resolved(info.static_id, info.mesh_index)
                    rewritten.add((room.index, i))

    unresolved = sum(
        1 for room in rooms for p in room.static_meshes if p.mesh_index is None)
    if unresolved:
        log.warning('%d static mesh placements have no matching static mesh entry',
                    unresolved)
    return len(rewritten)
