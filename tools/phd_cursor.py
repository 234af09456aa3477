"""
Forward-only little-endian reader used by every PHD decoder.

All PHD integers are little-endian, 1 to 4 bytes wide. The cursor only moves
forward: fields are read in file order and tables the tools don't need are
stepped over with skip(). Nothing is buffered beyond what the underlying
stream does.

Embedded blocks (room data, the mesh blob) are decoded with their own cursor
built by Cursor.from_bytes(); passing the block's file offset as `origin`
keeps error offsets absolute.
"""

import io

from phd_errors import TruncatedInput

SKIP_CHUNK = 64 * 1024


class Cursor:
    """Sequential reader over a binary file-like object."""

    def __init__(self, stream, origin: int = 0):
        self.stream = stream
        self.origin = origin
        seekable = getattr(stream, 'seekable', None)
        if seekable is not None and seekable():
            self._pos = stream.tell()
            self._size = stream.seek(0, io.SEEK_END)
            stream.seek(self._pos)
        else:
            self._pos = 0
            self._size = None

    @classmethod
    def from_bytes(cls, data, origin: int = 0) -> 'Cursor':
        return cls(io.BytesIO(data), origin)

    @property
    def position(self) -> int:
        """Absolute offset of the next byte to be read."""
        return self.origin + self._pos

    def position_offset_by(self, delta: int) -> int:
        """Offset `delta` bytes away from the current position (diagnostics only)."""
        return self.position + delta

    @property
    def remaining(self) -> int | None:
        """Bytes left in the stream, or None if the stream can't tell."""
        if self._size is None:
            return None
        return self._size - self._pos

    def read_bytes(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f'Cannot read a negative byte count: {count}')
        data = self.stream.read(count)
        if len(data) < count:
            raise TruncatedInput(count, len(data), self.position)
        self._pos += count
        return data

    def read_int(self, width: int, signed: bool = True) -> int:
        if not 1 <= width <= 4:
            raise ValueError(f'Integer width must be 1-4 bytes, got {width}')
        return int.from_bytes(self.read_bytes(width), 'little', signed=signed)

    def read_u8(self) -> int:
        return self.read_int(1, signed=False)

    def read_s16(self) -> int:
        return self.read_int(2)

    def read_u16(self) -> int:
        return self.read_int(2, signed=False)

    def read_s32(self) -> int:
        return self.read_int(4)

    def read_u32(self) -> int:
        return self.read_int(4, signed=False)

    def skip(self, count: int):
        """Step over `count` bytes without decoding them."""
        if count < 0:
            raise ValueError(f'Cannot skip backwards: {count}')
        if self._size is not None:
            available = self._size - self._pos
            if count > available:
                raise TruncatedInput(count, available, self.position)
            self.stream.seek(count, io.SEEK_CUR)
            self._pos += count
            return

        # Non-seekable: read and drop
        left = count
        while left:
            chunk = self.stream.read(min(left, SKIP_CHUNK))
            if not chunk:
                raise TruncatedInput(count, count - left, self.position)
            left -= len(chunk)
            self._pos += len(chunk)
