"""
Decode failures for Tomb Raider 1 PHD level files.

The PHD format has no seek table and no checksums: every length is only known
after reading the count that precedes it. A bad count or a misread field
shifts every read that follows, so none of these errors can be recovered
from. Each one records the absolute file offset at which it was detected.

  PhdDecodeError            base class (a ValueError, like other bad-magic
                            failures in these tools)
  ├── UnsupportedVersion    version tag is not 0x20
  ├── TruncatedInput        fewer bytes left than a field needs
  ├── InvalidVertexIndex    face points past its local vertex list
  └── AtlasIndexOutOfBounds object texture names a missing atlas
"""


class PhdDecodeError(ValueError):
    """Base class for every fatal PHD decode failure."""

    def __init__(self, message: str, offset: int | None = None):
        self.offset = offset
        if offset is not None:
            message = f'{message} (at offset 0x{offset:X})'
        super().__init__(message)


class UnsupportedVersion(PhdDecodeError):
    def __init__(self, version: int, expected: int, offset: int | None = None):
        self.version = version
        self.expected = expected
        super().__init__(
            f'Unsupported PHD version 0x{version:X} (expected 0x{expected:X})', offset)


class TruncatedInput(PhdDecodeError):
    def __init__(self, wanted: int, available: int, offset: int | None = None):
        self.wanted = wanted
        self.available = available
        super().__init__(
            f'Truncated input: needed {wanted} bytes, only {available} available', offset)


class InvalidVertexIndex(PhdDecodeError):
    def __init__(self, index: int, vertex_count: int, offset: int | None = None):
        self.index = index
        self.vertex_count = vertex_count
        super().__init__(
            f'Face vertex index {index} out of range ({vertex_count} vertices)', offset)


class AtlasIndexOutOfBounds(PhdDecodeError):
    def __init__(self, index: int, atlas_count: int, offset: int | None = None):
        self.index = index
        self.atlas_count = atlas_count
        super().__init__(
            f'Object texture references atlas {index}, only {atlas_count} present', offset)
