#!/usr/bin/env python3
"""
Convert extract_phd .trt pixel dumps to PNG.

A .trt file is raw 8-bit palette indices. Its dimensions come from the
sibling "<file>.trt.mta" ("<width> <height>"); atlas pages have no .mta and
are 256×256. Palette index 0 is the transparent colour.

Usage:
    python3 trt_to_png.py -i output/texture/object/12.trt \\
        -p output/texture/atlas/palette.pal -o 12.png

Requires: numpy, Pillow
"""

import argparse
import sys
from pathlib import Path

import numpy as np
from PIL import Image

from phd_model import ATLAS_HEIGHT, ATLAS_WIDTH, PALETTE_BYTES

TRANSPARENT_INDEX = 0


def read_dimensions(trt_path: Path) -> tuple[int, int]:
    mta_path = trt_path.with_name(trt_path.name + '.mta')
    if not mta_path.exists():
        return ATLAS_WIDTH, ATLAS_HEIGHT
    width, height = mta_path.read_text().split()[:2]
    return int(width), int(height)


def read_palette_file(path: Path) -> np.ndarray:
    """Read a .pal file as a (256, 3) uint8 array."""
    raw = path.read_bytes()
    if len(raw) < PALETTE_BYTES:
        raise ValueError(f'{path}: palette is {len(raw)} bytes, expected {PALETTE_BYTES}')
    return np.frombuffer(raw[:PALETTE_BYTES], dtype=np.uint8).reshape(256, 3)


def indexed_to_rgba(indices: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """Look up palette colours; index 0 becomes fully transparent black."""
    rgba = np.zeros(indices.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = palette[indices]
    rgba[..., 3] = 255
    rgba[indices == TRANSPARENT_INDEX] = 0
    return rgba


def convert_trt(trt_path: Path, palette_path: Path, output_path: Path) -> tuple[int, int]:
    width, height = read_dimensions(trt_path)
    raw = trt_path.read_bytes()
    if len(raw) != width * height:
        raise ValueError(f'{trt_path}: {len(raw)} bytes, expected {width}×{height}')
    indices = np.frombuffer(raw, dtype=np.uint8).reshape(height, width)
    rgba = indexed_to_rgba(indices, read_palette_file(palette_path))
    Image.fromarray(rgba).save(output_path)
    return width, height


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Convert a .trt pixel dump to PNG')
    parser.add_argument('-i', dest='input', required=True, help='Input .trt file')
    parser.add_argument('-p', dest='palette', required=True, help='Palette .pal file')
    parser.add_argument('-o', dest='output', required=True, help='Output .png file')
    args = parser.parse_args(argv)

    trt_path = Path(args.input)
    palette_path = Path(args.palette)
    for p in (trt_path, palette_path):
        if not p.is_file():
            print(f'ERROR: {p} not found')
            return 1

    try:
        width, height = convert_trt(trt_path, palette_path, Path(args.output))
    except (ValueError, OSError) as e:
        print(f'ERROR: {e}')
        return 1

    print(f'{trt_path.name} -> {args.output} ({width}×{height})')
    return 0


if __name__ == '__main__':
    sys.exit(main())
