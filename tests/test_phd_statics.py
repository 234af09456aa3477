import struct

import pytest

from phd_cursor import Cursor
from phd_errors import TruncatedInput
from phd_model import Resolved, RoomMesh, StaticMeshInfo, StaticMeshPlacement, Unresolved
from phd_statics import read_static_meshes, relink_static_meshes


def placement(static_id: int) -> StaticMeshPlacement:
    return StaticMeshPlacement(0, 0, 0, 0, 0, Unresolved(static_id))


def test_read_static_mesh_table():
    entry = struct.pack('<IH', 42, 7) + b'\x01' * 24 + struct.pack('<H', 3)
    data = struct.pack('<I', 2) + entry + struct.pack('<IH', 43, 8) + b'\0' * 26
    table = read_static_meshes(Cursor.from_bytes(data))
    assert table == [StaticMeshInfo(42, 7, 3), StaticMeshInfo(43, 8, 0)]


def test_truncated_static_mesh_table():
    data = struct.pack('<I', 1) + struct.pack('<IH', 42, 7) + b'\0' * 10
    with pytest.raises(TruncatedInput):
        read_static_meshes(Cursor.from_bytes(data))


def test_relink_rewrites_id_to_mesh_index():
    room = RoomMesh(0, 0, 0, static_meshes=[placement(42)])
    count = relink_static_meshes([room], [StaticMeshInfo(42, 7)])
    p = room.static_meshes[0]
    assert count == 1
    assert p.mesh_index == 7
    assert p.mesh == Resolved(42, 7)
    assert p.static_id == 42


def test_relink_covers_every_room_and_placement():
    rooms = [
        RoomMesh(0, 0, 0, static_meshes=[placement(1), placement(2)]),
        RoomMesh(1, 0, 0, static_meshes=[placement(2), placement(3)]),
    ]
    count = relink_static_meshes(rooms, [StaticMeshInfo(2, 20), StaticMeshInfo(1, 10)])
    assert count == 3
    assert [p.mesh_index for p in rooms[0].static_meshes] == [10, 20]
    assert [p.mesh_index for p in rooms[1].static_meshes] == [20, None]
    assert rooms[1].static_meshes[1].mesh == Unresolved(3)


def test_duplicate_ids_last_entry_wins():
    room = RoomMesh(0, 0, 0, static_meshes=[placement(5)])
    count = relink_static_meshes([room], [StaticMeshInfo(5, 1), StaticMeshInfo(5, 2)])
    assert count == 1
    assert room.static_meshes[0].mesh_index == 2


def test_resolved_index_is_never_matched_as_an_id():
    # entry 42 -> 7, then entry 7 -> 99: the placement keeps index 7
    room = RoomMesh(0, 0, 0, static_meshes=[placement(42)])
    relink_static_meshes([room], [StaticMeshInfo(42, 7), StaticMeshInfo(7, 99)])
    assert room.static_meshes[0].mesh_index == 7


def test_unmatched_placements_are_logged(caplog):
    room = RoomMesh(0, 0, 0, static_meshes=[placement(1), placement(2)])
    with caplog.at_level('WARNING', logger='phd_statics'):
        relink_static_meshes([room], [StaticMeshInfo(1, 0)])
    assert '1 static mesh placements' in caplog.text
