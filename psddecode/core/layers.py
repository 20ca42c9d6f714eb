from __future__ import annotations

from psddecode.io.binary import ByteReader


def skip_layer_and_mask(r: ByteReader) -> tuple[int, bool]:
    """Step over the layer and mask section without parsing it.

    The cursor only moves when the whole section lies inside the file;
    otherwise it stays right after the length field.
    """
    n = r.u32()
    if r.tell() + n < len(r):
        r.skip(n)
        return n, True
    return n, False
