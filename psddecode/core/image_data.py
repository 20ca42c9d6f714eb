from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from psddecode.core.errors import (
    UnknownCompressionError,
    UnsupportedBitDepthError,
    UnsupportedCompressionError,
)
from psddecode.core.rle import deplanarize, read_rle_planes
from psddecode.core.types import (
    DEFAULT_DENSITY,
    ColorMode,
    Compression,
    HeaderInfo,
    ImageData,
    ResolutionInfo,
)
from psddecode.io.binary import ByteReader

SUPPORTED_DEPTHS = (8, 16)


def pixel_density(res: ResolutionInfo | None) -> tuple[int, int]:
    """Pixels per meter for (x, y); 96 dpi when the file has no resolution."""
    if res is None:
        return DEFAULT_DENSITY, DEFAULT_DENSITY
    return (int(res.h_res) * 10000) // 254, (int(res.v_res) * 10000) // 254


def read_compression(r: ByteReader) -> Compression:
    code = r.u16()
    if code in (Compression.ZIP, Compression.ZIP_PREDICTION):
        raise UnsupportedCompressionError(code)
    try:
        return Compression(code)
    except ValueError:
        raise UnknownCompressionError(code) from None


def read_raw_planes(r: ByteReader, header: HeaderInfo) -> NDArray[np.uint8]:
    bpc = header.bytes_per_channel
    total = header.pixel_count * header.channels * bpc
    data = np.frombuffer(r.take(total), dtype=np.uint8)
    planes = data.reshape(header.channels, header.pixel_count * bpc)

    if header.color_mode == ColorMode.RGB and bpc == 2:
        # 16 bit RGB keeps only the high byte of every sample
        return np.ascontiguousarray(
            planes.reshape(header.channels, header.pixel_count, 2)[:, :, 0]
        )
    # Grayscale, indexed and duotone read the stream front to back: the
    # first plane is the image. CMYK, Lab and multichannel keep full width
    # samples per plane.
    return planes


def read_image_data(
    r: ByteReader, header: HeaderInfo, resolution: ResolutionInfo | None = None
) -> ImageData:
    compression = read_compression(r)
    if header.depth not in SUPPORTED_DEPTHS:
        raise UnsupportedBitDepthError(header.depth)

    bpc = header.bytes_per_channel
    if compression == Compression.RAW:
        planes = read_raw_planes(r, header)
    else:
        planes = read_rle_planes(
            r, header.channels, header.height, header.pixel_count * bpc
        )

    bps = int(planes.shape[1]) // header.pixel_count
    return ImageData(
        compression=compression,
        samples=deplanarize(planes, bps),
        density=pixel_density(resolution),
    )
