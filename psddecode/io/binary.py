from __future__ import annotations

import struct

from psddecode.core.errors import TruncatedFileError

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_I16 = struct.Struct(">h")
_U32 = struct.Struct(">I")
_I32 = struct.Struct(">i")


def swap_bytes(b: bytes) -> bytes:
    """Reverse the byte order of a big-endian field."""
    return bytes(reversed(b))


def pad2(n: int) -> int:
    return n + (n & 1)


class ByteReader:
    """Big-endian cursor over an in-memory PSD image."""

    def __init__(self, data: bytes | bytearray | memoryview, offset: int = 0) -> None:
        self._mv = memoryview(data)
        self._off = int(offset)

    def __len__(self) -> int:
        return len(self._mv)

    def tell(self) -> int:
        return self._off

    def seek(self, offset: int) -> None:
        if offset < 0 or offset > len(self._mv):
            raise TruncatedFileError(self._off, offset - self._off, self.remaining())
        self._off = int(offset)

    def remaining(self) -> int:
        return len(self._mv) - self._off

    def take(self, n: int) -> memoryview:
        if n < 0:
            raise ValueError("negative read length")
        if self._off + n > len(self._mv):
            raise TruncatedFileError(self._off, n, self.remaining())
        out = self._mv[self._off : self._off + n]
        self._off += n
        return out

    def skip(self, n: int) -> None:
        self.take(n)

    def sub(self, n: int) -> ByteReader:
        return ByteReader(self.take(n))

    def _unpack(self, st: struct.Struct) -> int:
        return st.unpack(self.take(st.size))[0]

    def u8(self) -> int:
        return self._unpack(_U8)

    def u16(self) -> int:
        return self._unpack(_U16)

    def i16(self) -> int:
        return self._unpack(_I16)

    def u32(self) -> int:
        return self._unpack(_U32)

    def i32(self) -> int:
        return self._unpack(_I32)
