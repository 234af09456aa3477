"""
Dump a decoded PHD level to plain files.

=== OUTPUT LAYOUT ===

  <root>/texture/atlas/palette.pal      768 bytes, 8-bit RGB triples
  <root>/texture/atlas/<i>.trt          65536 bytes, atlas palette indices
  <root>/texture/object/<i>.trt         width × height palette indices
  <root>/texture/object/<i>.trt.mta     "<width> <height>"
  <root>/mesh/room/<i>.trm              room faces
  <root>/mesh/room/<i>.sta              room static mesh placements
  <root>/mesh/object/<i>.trm            object mesh faces

=== .trm ===

One face per line:

  <n> <texture> x y z u v  (x y z u v repeated n times)

<texture> is the object texture index, or the negated palette index for an
untextured mesh face. Vertices are written in reverse winding. Object texture
UVs are stored in reverse corner order, so the vertex written at position j
takes uv[j + 4 - n], which pairs face vertex k with texture corner k.

=== .sta ===

One placement per line:

  <mesh index> x y z <rotation degrees> <lighting>

The mesh index is -1 for a placement the static-mesh table didn't resolve.
"""

import logging
from pathlib import Path

from phd_model import Face, PhdLevel

log = logging.getLogger(__name__)

OUTPUT_DIR = Path('output')


def _format_uv(value: float) -> str:
    return f'{value:.6f}'


def format_face(face: Face, object_textures: list, textured: bool = True) -> str:
    n = len(face.vertices)
    uvs = None
    if textured:
        if face.texture_index < len(object_textures):
            uvs = object_textures[face.texture_index].uv
        else:
            log.warning('Face uses missing object texture %d', face.texture_index)
        texture = face.texture_index
    else:
        texture = -face.texture_index

    parts = [str(n), str(texture)]
    for j in range(n):
        v = face.vertices[n - 1 - j]
        u, w = uvs[j + 4 - n] if uvs else (0.0, 0.0)
        parts += [str(v.x), str(v.y), str(v.z), _format_uv(u), _format_uv(w)]
    return ' '.join(parts)


def write_faces(path: Path, faces, object_textures: list):
    """Write (face, textured) pairs as a .trm file."""
    with open(path, 'w') as f:
        for face, textured in faces:
            f.write(format_face(face, object_textures, textured) + '\n')


def write_level(level: PhdLevel, root=OUTPUT_DIR) -> dict:
    """Write every decoded part of the level under `root`. Returns file counts."""
    root = Path(root)
    atlas_dir = root / 'texture' / 'atlas'
    object_dir = root / 'texture' / 'object'
    room_dir = root / 'mesh' / 'room'
    mesh_dir = root / 'mesh' / 'object'
    for d in (atlas_dir, object_dir, room_dir, mesh_dir):
        d.mkdir(parents=True, exist_ok=True)

    counts = {'atlases': 0, 'objectTextures': 0, 'rooms': 0, 'meshes': 0}

    if level.palette is not None:
        (atlas_dir / 'palette.pal').write_bytes(level.palette.colors.tobytes())

    for i, atlas in enumerate(level.atlases):
        (atlas_dir / f'{i}.trt').write_bytes(atlas.pixels.tobytes())
        counts['atlases'] += 1

    for i, texture in enumerate(level.object_textures):
        (object_dir / f'{i}.trt').write_bytes(texture.pixels.tobytes())
        (object_dir / f'{i}.trt.mta').write_text(f'{texture.width} {texture.height}')
        counts['objectTextures'] += 1

    textures = level.object_textures

    for room in level.rooms:
        faces = [(face, True) for face in room.quads + room.triangles]
        write_faces(room_dir / f'{room.index}.trm', faces, textures)
        with open(room_dir / f'{room.index}.sta', 'w') as f:
            for p in room.static_meshes:
                mesh_index = p.mesh_index if p.mesh_index is not None else -1
                f.write(f'{mesh_index} {p.x} {p.y} {p.z} {p.rotation_degrees} {p.lighting}\n')
        counts['rooms'] += 1

    for i, mesh in enumerate(level.meshes):
        faces = ([(face, True) for face in mesh.textured_quads + mesh.textured_triangles] +
                 [(face, False) for face in mesh.untextured_quads + mesh.untextured_triangles])
        write_faces(mesh_dir / f'{i}.trm', faces, textures)
        counts['meshes'] += 1

    return counts


def parse_trm_line(line: str):
    """Parse one .trm line into (texture, [(x, y, z, u, v), ...]), or None if blank."""
    values = line.split()
    if not values:
        return None
    n = int(values[0])
    texture = int(values[1])
    fields = values[2:]
    if len(fields) != n * 5:
        raise ValueError(f'Expected {n * 5} vertex fields, got {len(fields)}: {line!r}')
    corners = []
    for p in range(n):
        x, y, z, u, v = fields[p * 5:p * 5 + 5]
        corners.append((int(x), int(y), int(z), float(u), float(v)))
    return texture, corners


def read_trm(path) -> list:
    faces = []
    with open(path) as f:
        for line in f:
            face = parse_trm_line(line)
            if face is not None:
                faces.append(face)
    return faces
