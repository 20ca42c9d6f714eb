from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from psddecode.core.errors import CorruptImageDataError, TruncatedFileError
from psddecode.io.binary import ByteReader


def unpack_bits(r: ByteReader, expected: int) -> bytearray:
    """Decode PackBits runs from ``r`` until ``expected`` bytes are produced.

    The control byte selects a literal run (< 128, length c + 1), a
    replicate run (> 128, length (c ^ 0xFF) + 2) or nothing (128).
    """
    out = bytearray()
    while len(out) < expected:
        c = r.u8()
        if c < 128:
            n = c + 1
            if len(out) + n > expected:
                raise CorruptImageDataError(
                    f"literal run of {n} overruns plane at {len(out)}/{expected}"
                )
            out += r.take(n)
        elif c > 128:
            n = (c ^ 0xFF) + 2
            if len(out) + n > expected:
                raise CorruptImageDataError(
                    f"replicate run of {n} overruns plane at {len(out)}/{expected}"
                )
            out += bytes((r.u8(),)) * n
    return out


def read_rle_planes(
    r: ByteReader, channels: int, height: int, plane_size: int
) -> NDArray[np.uint8]:
    # per-row byte counts are not needed: every plane ends on its own size
    r.skip(2 * height * channels)
    # a replicate run expands 2 bytes into at most 128
    minimum = channels * 2 * -(-plane_size // 128)
    if r.remaining() < minimum:
        raise TruncatedFileError(r.tell(), minimum, r.remaining())
    planes = [unpack_bits(r, plane_size) for _ in range(channels)]
    return np.frombuffer(b"".join(planes), dtype=np.uint8).reshape(
        channels, plane_size
    )


def deplanarize(planes: NDArray[np.uint8], bytes_per_sample: int) -> NDArray[np.uint8]:
    """(channels, pixels * bps) planes -> (pixels, channels, bps) interleave.

    Channel ``k`` sample ``p`` ends up at byte ``(p * channels + k) * bps`` of
    the flattened result.
    """
    channels = int(planes.shape[0])
    x = planes.reshape(channels, -1, bytes_per_sample)
    return np.ascontiguousarray(x.transpose(1, 0, 2))
