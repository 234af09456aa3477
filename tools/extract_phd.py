#!/usr/bin/env python3
"""
Tomb Raider 1 level extractor.

Decodes a .PHD level (texture atlases, rooms, object meshes, static mesh
placements, object textures, palette) and dumps it to plain files that the
trt_to_png / trm_to_obj / trm_to_stl converters understand. See phd_level
for the file layout and phd_export for the output layout.

Usage:
    python3 extract_phd.py LEVEL1.PHD                    # Dump to ./output
    python3 extract_phd.py LEVEL1.PHD --output-dir out/  # Dump elsewhere
    python3 extract_phd.py LEVEL1.PHD --json             # Summary as JSON
    python3 extract_phd.py LEVEL1.PHD --verbose          # Log section offsets

Requires: numpy
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from phd_errors import PhdDecodeError
from phd_export import OUTPUT_DIR, write_level
from phd_level import load_phd


def print_summary(path: Path, summary: dict):
    print(f'{path.name}: PHD version 0x{summary["version"]:X}')
    print(f'  Texture atlases:   {summary["atlases"]}')
    print(f'  Rooms:             {summary["rooms"]} '
          f'({summary["roomQuads"]} quads, {summary["roomTriangles"]} triangles)')
    print(f'  Static placements: {summary["staticPlacements"]} '
          f'({summary["unresolvedPlacements"]} unresolved)')
    print(f'  Object meshes:     {summary["meshes"]} ({summary["meshFaces"]} faces)')
    print(f'  Static meshes:     {summary["staticMeshes"]}')
    print(f'  Object textures:   {summary["objectTextures"]}')
    print(f'  Floor data words:  {summary["floorDataWords"]}')
    skipped = summary['skipped']
    if skipped:
        print('  Skipped tables:')
        for name, count in skipped.items():
            print(f'    {name:20s} {count}')


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Extract geometry and textures from a Tomb Raider 1 .PHD level')
    parser.add_argument('path', help='Path to the .PHD level file')
    parser.add_argument('--output-dir', default=str(OUTPUT_DIR),
                        help='Directory to dump into (default: %(default)s)')
    parser.add_argument('--json', action='store_true', help='Print the summary as JSON')
    parser.add_argument('--verbose', action='store_true', help='Log section offsets')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    path = Path(args.path)
    if not path.is_file():
        print(f'ERROR: {path} not found')
        return 1

    try:
        level = load_phd(path)
    except PhdDecodeError as e:
        print(f'ERROR: {path}: {e}')
        return 1
    except OSError as e:
        print(f'ERROR: cannot read {path}: {e}')
        return 1

    summary = level.summary()
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print_summary(path, summary)

    try:
        counts = write_level(level, args.output_dir)
    except OSError as e:
        print(f'ERROR: cannot write to {args.output_dir}: {e}')
        return 1

    if not args.json:
        print(f'\nWrote {counts["atlases"]} atlases, {counts["objectTextures"]} object textures, '
              f'{counts["rooms"]} rooms, {counts["meshes"]} meshes to {args.output_dir}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
