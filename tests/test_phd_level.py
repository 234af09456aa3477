import io

import numpy as np
import pytest

from phd_errors import AtlasIndexOutOfBounds, InvalidVertexIndex, TruncatedInput, UnsupportedVersion
from phd_fixtures import SQUARE, object_texture, room, sample_level
from phd_level import PHD_VERSION, decode_phd, load_phd


def test_decode_full_level():
    lvl = decode_phd(io.BytesIO(sample_level()))
    assert lvl.version == PHD_VERSION

    assert len(lvl.atlases) == 2
    assert all(a.pixels.shape == (256, 256) for a in lvl.atlases)

    assert len(lvl.rooms) == 2
    first = lvl.rooms[0]
    assert first.quads[0].double_sided and first.quads[0].texture_index == 0
    assert first.triangles[0].vertices[1].x == 1024 + 1024
    assert first.triangles[0].vertices[2].z == 2048 + 1024

    assert lvl.floor_data_words == 5
    assert len(lvl.meshes) == 2
    assert len(lvl.meshes[0].normals) == 4
    assert lvl.meshes[1].light_count == 4
    assert lvl.meshes[1].untextured_triangles[0].texture_index == 12

    assert [(t.width, t.height) for t in lvl.object_textures] == [(16, 16), (8, 8)]
    assert lvl.object_textures[1].is_triangle and lvl.object_textures[1].has_alpha

    assert lvl.palette.rgb(1) == (12, 16, 20)
    assert lvl.section_counts['boxes'] == 2
    assert lvl.section_counts['animations'] == 0
    assert lvl.section_counts['demoData'] == 0


def test_static_placements_relinked_after_decode():
    lvl = decode_phd(io.BytesIO(sample_level()))
    placed = lvl.rooms[0].static_meshes[0]
    assert placed.static_id == 42
    assert placed.mesh_index == 1
    assert placed.rotation_degrees == 180
    assert lvl.rooms[1].static_meshes[0].mesh_index is None


def test_decoding_twice_is_deterministic():
    data = sample_level()
    a = decode_phd(io.BytesIO(data))
    b = decode_phd(io.BytesIO(data))
    assert a.summary() == b.summary()
    assert a.rooms == b.rooms
    assert a.meshes == b.meshes
    assert a.static_meshes == b.static_meshes
    for x, y in zip(a.atlases, b.atlases):
        assert np.array_equal(x.pixels, y.pixels)
    for x, y in zip(a.object_textures, b.object_textures):
        assert x.uv == y.uv
        assert np.array_equal(x.pixels, y.pixels)
    assert np.array_equal(a.palette.colors, b.palette.colors)


def test_wrong_version_rejected():
    with pytest.raises(UnsupportedVersion) as exc:
        decode_phd(io.BytesIO(sample_level(version=0x2D)))
    assert exc.value.version == 0x2D
    assert exc.value.offset == 0


def test_truncated_file_rejected():
    data = sample_level()
    with pytest.raises(TruncatedInput):
        decode_phd(io.BytesIO(data[:-800]))


def test_empty_file_rejected():
    with pytest.raises(TruncatedInput):
        decode_phd(io.BytesIO(b''))


def test_bad_vertex_index_aborts_decode():
    bad_room = room(vertices=SQUARE, quads=[(0, 1, 2, 9, 0)])
    with pytest.raises(InvalidVertexIndex):
        decode_phd(io.BytesIO(sample_level(rooms=[bad_room])))


def test_missing_atlas_aborts_decode():
    with pytest.raises(AtlasIndexOutOfBounds):
        decode_phd(io.BytesIO(sample_level(object_textures=[object_texture(0, 2)])))


def test_trailing_sound_data_is_ignored():
    lvl = decode_phd(io.BytesIO(sample_level() + b'\xAB' * 1000))
    assert len(lvl.rooms) == 2


def test_load_phd_from_path(tmp_path):
    path = tmp_path / 'LEVEL1.PHD'
    path.write_bytes(sample_level())
    lvl = load_phd(path)
    assert lvl.summary()['rooms'] == 2
    assert lvl.summary()['staticPlacements'] == 2
    assert lvl.summary()['unresolvedPlacements'] == 1
