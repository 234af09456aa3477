#!/usr/bin/env python3
"""
Convert extract_phd .trm face dumps to ASCII STL.

Quads are split into two triangles (0, 1, 2) and (0, 2, 3). Texture and UV
fields are ignored and facet normals are left at zero.

Usage:
    python3 trm_to_stl.py -i output/mesh/room/0.trm -o room0.stl
"""

import argparse
import sys
from pathlib import Path

from phd_export import read_trm


def triangulate(corners: list) -> list:
    if len(corners) == 4:
        return [(corners[0], corners[1], corners[2]), (corners[0], corners[2], corners[3])]
    if len(corners) == 3:
        return [tuple(corners)]
    return []


def write_stl(f, faces: list, name: str = 'room') -> int:
    count = 0
    f.write(f'solid {name}\n')
    for _, corners in faces:
        for tri in triangulate(corners):
            f.write('facet normal 0 0 0\n')
            f.write('\touter loop\n')
            for x, y, z, _, _ in tri:
                f.write(f'\t\tvertex {x} {y} {z}\n')
            f.write('\tendloop\n')
            f.write('endfacet\n')
            count += 1
    f.write(f'endsolid {name}\n')
    return count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Convert a .trm face dump to ASCII STL')
    parser.add_argument('-i', dest='input', required=True, help='Input .trm file')
    parser.add_argument('-o', dest='output', required=True, help='Output .stl file')
    args = parser.parse_args(argv)

    trm_path = Path(args.input)
    if not trm_path.is_file():
        print(f'ERROR: {trm_path} not found')
        return 1

    try:
        faces = read_trm(trm_path)
        with open(args.output, 'w') as f:
            count = write_stl(f, faces)
    except (ValueError, OSError) as e:
        print(f'ERROR: {e}')
        return 1

    print(f'{trm_path.name} -> {args.output}: {count} triangles')
    return 0


if __name__ == '__main__':
    sys.exit(main())
