from __future__ import annotations

from psddecode.core.errors import HeaderError
from psddecode.core.types import HEADER_SIZE, SIGNATURE, ColorMode, HeaderInfo
from psddecode.io.binary import ByteReader

MAX_CHANNELS = 24
MAX_DIMENSION = 30000


def read_header(r: ByteReader) -> HeaderInfo:
    r.seek(0)
    h = r.sub(HEADER_SIZE)
    signature = bytes(h.take(4))
    version = h.u16()
    if signature != SIGNATURE or version != 1:
        raise HeaderError(
            f"not a PSD file (signature {signature!r}, version {version})"
        )
    h.skip(6)  # reserved
    channels = h.u16()
    height = h.u32()
    width = h.u32()
    depth = h.u16()
    mode = h.u16()

    if not 1 <= channels <= MAX_CHANNELS:
        raise HeaderError(f"invalid channel count {channels}")
    if not 1 <= height <= MAX_DIMENSION or not 1 <= width <= MAX_DIMENSION:
        raise HeaderError(f"invalid dimensions {width}x{height}")
    try:
        color_mode = ColorMode(mode)
    except ValueError:
        raise HeaderError(f"invalid color mode {mode}") from None

    return HeaderInfo(
        channels=channels,
        height=height,
        width=width,
        depth=depth,
        color_mode=color_mode,
    )
