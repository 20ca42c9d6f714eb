from __future__ import annotations

from psddecode.core.types import ColorModeData
from psddecode.io.binary import ByteReader


def read_color_mode_data(r: ByteReader) -> ColorModeData:
    # Indexed images carry a 768 byte palette, duotone an undocumented blob
    # that is kept as is. Every other mode stores a zero length.
    n = r.u32()
    if n == 0:
        return ColorModeData(length=0)
    return ColorModeData(length=n, data=bytes(r.take(n)))
