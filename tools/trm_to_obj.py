#!/usr/bin/env python3
"""
Convert extract_phd .trm face dumps to Wavefront OBJ + MTL.

Textured faces get an "object_texture_<i>" material mapping <texture dir>/<i>.png
(as written by trt_to_png). Untextured faces (negative texture field) get a
flat "object_color_<i>" material from the level palette, <i> being the low
byte of the texture field. Vertex positions and UVs are de-duplicated.

Usage:
    python3 trm_to_obj.py -i output/mesh/room/0.trm -o room0.obj -m room0.mtl \\
        -p output/texture/atlas/palette.pal -t textures/

Requires: numpy
"""

import argparse
import sys
from pathlib import Path

from phd_export import read_trm
from trt_to_png import read_palette_file

# Untextured faces keep the palette index in the low byte of the texture word
PALETTE_INDEX_MASK = 0xFF


def material_name(texture: int) -> str:
    if texture >= 0:
        return f'object_texture_{texture}'
    return f'object_color_{abs(texture) & PALETTE_INDEX_MASK}'


def write_mtl(f, faces: list, palette, texture_dir: str):
    seen = set()
    for texture, _ in faces:
        name = material_name(texture)
        if name in seen:
            continue
        seen.add(name)

        f.write(f'newmtl {name}\n')
        if texture >= 0:
            f.write('Kd 1 1 1\n')
        else:
            r, g, b = palette[abs(texture) & PALETTE_INDEX_MASK]
            f.write(f'Kd {r / 255.0:f} {g / 255.0:f} {b / 255.0:f}\n')
        f.write('Ks 0 0 0\n')
        f.write('Ns 0\n')
        f.write('illum 0\n')
        if texture >= 0:
            f.write(f'map_Kd {texture_dir}{texture}.png\n')
        f.write('\n')


def write_obj(f, faces: list, mtl_name: str):
    positions = {}
    uvs = {}
    for _, corners in faces:
        for x, y, z, u, v in corners:
            positions.setdefault((x, y, z), len(positions) + 1)
            uvs.setdefault((u, v), len(uvs) + 1)

    f.write('# Tomb Raider 1 mesh converted by trm_to_obj\n')
    f.write(f'mtllib {mtl_name}\n')
    f.write('o tr_mesh\n')
    for x, y, z in positions:
        f.write(f'v {x} {y} {z}\n')
    for u, v in uvs:
        f.write(f'vt {u:f} {v:f}\n')

    for texture, corners in faces:
        f.write(f'usemtl {material_name(texture)}\n')
        refs = [f'{positions[(x, y, z)]}/{uvs[(u, v)]}' for x, y, z, u, v in corners]
        f.write('f ' + ' '.join(refs) + '\n')

    return len(positions), len(uvs)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Convert a .trm face dump to OBJ + MTL')
    parser.add_argument('-i', dest='input', required=True, help='Input .trm file')
    parser.add_argument('-o', dest='obj', required=True, help='Output .obj file')
    parser.add_argument('-m', dest='mtl', required=True, help='Output .mtl file')
    parser.add_argument('-p', dest='palette', required=True, help='Level palette .pal file')
    parser.add_argument('-t', dest='textures', default='',
                        help='Directory holding object texture PNGs')
    args = parser.parse_args(argv)

    trm_path = Path(args.input)
    palette_path = Path(args.palette)
    for p in (trm_path, palette_path):
        if not p.is_file():
            print(f'ERROR: {p} not found')
            return 1

    texture_dir = args.textures
    if texture_dir and not texture_dir.endswith('/'):
        texture_dir += '/'

    try:
        faces = read_trm(trm_path)
        palette = read_palette_file(palette_path)
        with open(args.mtl, 'w') as f:
            write_mtl(f, faces, palette, texture_dir)
        with open(args.obj, 'w') as f:
            num_positions, num_uvs = write_obj(f, faces, Path(args.mtl).name)
    except (ValueError, OSError) as e:
        print(f'ERROR: {e}')
        return 1

    print(f'{trm_path.name} -> {args.obj}: {len(faces)} faces, '
          f'{num_positions} vertices, {num_uvs} UVs')
    return 0


if __name__ == '__main__':
    sys.exit(main())
