"""
Top-level decoder for Tomb Raider 1 .PHD level files.

The file is a straight sequence of count-prefixed tables with no directory,
so it has to be read front to back. Tables the tools don't use are skipped
by record size.

=== FILE LAYOUT ===

  Field                    Count          Record size    Handled by
  ───────────────────────  ─────────────  ─────────────  ───────────────
  version                  -              u32 (0x20)
  texture atlases          u32            65536          phd_atlas
  (unused)                 -              4
  rooms                    u16            variable       phd_rooms
  floor data               u32            2
  mesh data + pointers     u32, u32       variable       phd_meshes
  animations               u32            32
  state changes            u32            6
  animation dispatches     u32            8
  animation commands       u32            2
  mesh trees               u32            4
  frames                   u32            2
  models                   u32            18
  static meshes            u32            32             phd_statics
  object textures          u32            20             phd_textures
  sprite textures          u32            16
  sprite sequences         u32            8
  cameras                  u32            16
  sound sources            u32            16
  boxes                    u32            20
  overlaps                 u32            2
  zones                    -              6 × 2 per box
  animated textures        u32            2
  entities                 u32            22
  light map                -              8192
  palette                  -              768            phd_atlas
  cinematic frames         u16            16
  demo data                u16            1
  (sound map and samples follow; not read)

Decoding is all-or-nothing: any PhdDecodeError propagates out of
decode_phd() and no PhdLevel is returned.
"""

import logging

from phd_atlas import read_atlases, read_palette
from phd_cursor import Cursor
from phd_errors import UnsupportedVersion
from phd_meshes import read_mesh_library
from phd_model import PhdLevel
from phd_rooms import read_rooms
from phd_statics import read_static_meshes, relink_static_meshes
from phd_textures import read_object_textures

log = logging.getLogger(__name__)

PHD_VERSION = 0x20
UNUSED_DWORD_SIZE = 4
LIGHT_MAP_SIZE = 8192
ZONE_ARRAYS = 6

# (section name, record size) for the skipped u32-counted tables
ANIMATION_TABLES = (
    ('animations', 32),
    ('stateChanges', 6),
    ('animationDispatches', 8),
    ('animationCommands', 2),
    ('meshTrees', 4),
    ('frames', 2),
    ('models', 18),
)

SPRITE_AND_SOUND_TABLES = (
    ('spriteTextures', 16),
    ('spriteSequences', 8),
    ('cameras', 16),
    ('soundSources', 16),
)

BOX_SIZE = 20
OVERLAP_SIZE = 2
ZONE_SIZE = 2
ANIMATED_TEXTURE_SIZE = 2
ENTITY_SIZE = 22
CINEMATIC_FRAME_SIZE = 16
DEMO_DATA_SIZE = 1


def skip_table(cursor: Cursor, level: PhdLevel, name: str, record_size: int,
               count_width: int = 4) -> int:
    """Skip a count-prefixed table, recording its count on the level."""
    count = cursor.read_int(count_width, signed=False)
    log.debug('%d: %s: %d', cursor.position_offset_by(-count_width), name, count)
    cursor.skip(record_size * count)
    level.section_counts[name] = count
    return count


def read_version(cursor: Cursor) -> int:
    version = cursor.read_u32()
    if version != PHD_VERSION:
        raise UnsupportedVersion(version, PHD_VERSION, cursor.position_offset_by(-4))
    return version


def decode_phd(stream) -> PhdLevel:
    """Decode a PHD level from a binary file-like object."""
    cursor = Cursor(stream)
    level = PhdLevel(version=read_version(cursor))

    level.atlases = read_atlases(cursor)
    cursor.skip(UNUSED_DWORD_SIZE)
    level.rooms = read_rooms(cursor)

    level.floor_data_words = skip_table(cursor, level, 'floorData', 2)
    level.meshes = read_mesh_library(cursor)

    for name, size in ANIMATION_TABLES:
        skip_table(cursor, level, name, size)

    level.static_meshes = read_static_meshes(cursor)
    level.object_textures = read_object_textures(cursor, level.atlases)

    for name, size in SPRITE_AND_SOUND_TABLES:
        skip_table(cursor, level, name, size)

    num_boxes = skip_table(cursor, level, 'boxes', BOX_SIZE)
    skip_table(cursor, level, 'overlaps', OVERLAP_SIZE)
    cursor.skip(ZONE_ARRAYS * ZONE_SIZE * num_boxes)

    skip_table(cursor, level, 'animatedTextures', ANIMATED_TEXTURE_SIZE)
    skip_table(cursor, level, 'entities', ENTITY_SIZE)

    cursor.skip(LIGHT_MAP_SIZE)
    level.palette = read_palette(cursor)

    skip_table(cursor, level, 'cinematicFrames', CINEMATIC_FRAME_SIZE, count_width=2)
    skip_table(cursor, level, 'demoData', DEMO_DATA_SIZE, count_width=2)

    relinked = relink_static_meshes(level.rooms, level.static_meshes)
    log.debug('Relinked %d static mesh placements', relinked)

    return level


def load_phd(path) -> PhdLevel:
    with open(path, 'rb') as f:
        return decode_phd(f)
