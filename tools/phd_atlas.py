"""
Texture atlases and palette of a Tomb Raider 1 PHD level.

=== ATLASES ===

Right after the version tag:

  Offset  Size          Field
  4       4             u32: atlas count N
  8       N × 65536     256×256 uint8 palette indices per atlas, row-major

Object textures are cut out of these pages (see phd_textures).

=== PALETTE ===

768 bytes of RGB triples after the 8192-byte light map. Channels are 6-bit
VGA values (0-63) and are scaled ×4 to the 8-bit range (63 -> 252).
"""

import logging

import numpy as np

from phd_cursor import Cursor
from phd_model import (
    ATLAS_BYTES, ATLAS_HEIGHT, ATLAS_WIDTH, PALETTE_BYTES, Palette, TextureAtlas,
)

log = logging.getLogger(__name__)

VGA_SCALE = 4


def read_atlas(cursor: Cursor) -> TextureAtlas:
    raw = cursor.read_bytes(ATLAS_BYTES)
    pixels = np.frombuffer(raw, dtype=np.uint8).reshape(ATLAS_HEIGHT, ATLAS_WIDTH)
    return TextureAtlas(pixels)


def read_atlases(cursor: Cursor) -> list[TextureAtlas]:
    """Read the count-prefixed atlas array."""
    count = cursor.read_u32()
    log.debug('%d: %d texture atlases', cursor.position_offset_by(-4), count)
    return [read_atlas(cursor) for _ in range(count)]


def scale_vga(raw: bytes) -> np.ndarray:
    """Rescale 6-bit VGA channel values to 8 bits (wraps like a uint8 multiply)."""
    return np.frombuffer(raw, dtype=np.uint8) * np.uint8(VGA_SCALE)


def read_palette(cursor: Cursor) -> Palette:
    log.debug('%d: palette', cursor.position)
    return Palette(scale_vga(cursor.read_bytes(PALETTE_BYTES)))
