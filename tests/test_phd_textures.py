import struct

import numpy as np
import pytest

from phd_atlas import read_atlases
from phd_cursor import Cursor
from phd_errors import AtlasIndexOutOfBounds
from phd_fixtures import atlas, corner, gradient_atlas, object_texture
from phd_textures import bounding_box, read_object_texture, read_object_textures, split_corner


@pytest.fixture
def atlases():
    data = struct.pack('<I', 2) + gradient_atlas() + atlas(5, {(2, 2): 200})
    return read_atlases(Cursor.from_bytes(data))


def decode(record: bytes, atlases):
    return read_object_texture(Cursor.from_bytes(record), atlases)


def test_split_corner():
    assert split_corner(0x02FF) == (2, 255 / 256.0)
    assert split_corner(0x0401) == (4, 1 / 256.0)


def test_uv_array_is_reversed_corner_order(atlases):
    corners = [(corner(0, 1), corner(0, 1)), (corner(3, 255), corner(0, 1)),
               (corner(3, 255), corner(3, 255)), (corner(0, 1), corner(3, 255))]
    tex = decode(object_texture(0, 0, corners), atlases)
    c = [((x & 0xFF) / 256.0, (y & 0xFF) / 256.0) for x, y in corners]
    assert tex.uv[3] == c[0]
    assert tex.uv[2] == c[1]
    assert tex.uv[1] == c[2]
    assert tex.uv[0] == c[3]


def test_triangle_bounding_box_ignores_fourth_corner(atlases):
    corners = [(corner(2, 1), corner(2, 1)), (corner(4, 255), corner(2, 1)),
               (corner(2, 1), corner(5, 255)), (corner(200, 0), corner(200, 0))]
    tex = decode(object_texture(0, 1, corners), atlases)
    assert tex.is_triangle
    assert tex.atlas_index == 1
    assert (tex.width, tex.height) == (3, 4)
    assert tex.pixels.shape == (4, 3)
    assert tex.pixels[0, 0] == atlases[1].pixels[2, 2] == 200


def test_quad_copies_sub_image(atlases):
    corners = [(corner(10, 1), corner(20, 1)), (corner(13, 255), corner(20, 1)),
               (corner(13, 255), corner(21, 255)), (corner(10, 1), corner(21, 255))]
    tex = decode(object_texture(0, 0, corners), atlases)
    assert not tex.is_triangle
    assert (tex.width, tex.height) == (4, 2)
    expected = np.array([[(x + y) & 0xFF for x in range(10, 14)] for y in (20, 21)],
                        dtype=np.uint8)
    assert np.array_equal(tex.pixels, expected)


def test_pixels_are_a_copy(atlases):
    corners = [(corner(0, 0), corner(0, 0))] * 4
    tex = decode(object_texture(0, 0, corners), atlases)
    tex.pixels[0, 0] = 77
    assert atlases[0].pixels[0, 0] == 0


@pytest.mark.parametrize('attribute, alpha, no_depth, wireframe', [
    (0, False, False, False),
    (1, True, False, False),
    (4, True, True, False),
    (6, False, False, True),
])
def test_attribute_codes(atlases, attribute, alpha, no_depth, wireframe):
    tex = decode(object_texture(attribute, 0), atlases)
    assert tex.has_alpha is alpha
    assert tex.ignores_depth_test is no_depth
    assert tex.has_wireframe is wireframe


def test_atlas_index_out_of_bounds(atlases):
    with pytest.raises(AtlasIndexOutOfBounds) as exc:
        decode(object_texture(0, 4), atlases)
    assert exc.value.index == 4
    assert exc.value.atlas_count == 2
    assert exc.value.offset == 2


def test_bounding_box():
    assert bounding_box([(5, 9), (2, 3), (7, 3)]) == (2, 3, 6, 7)


def test_read_object_textures_count_prefixed(atlases):
    data = struct.pack('<I', 2) + object_texture(1, 0) + object_texture(6, 1)
    textures = read_object_textures(Cursor.from_bytes(data), atlases)
    assert [t.attribute for t in textures] == [1, 6]
    assert [(t.width, t.height) for t in textures] == [(1, 1), (1, 1)]
