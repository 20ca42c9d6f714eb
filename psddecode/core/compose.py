from __future__ import annotations

from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from psddecode.core.errors import CorruptImageDataError, UnsupportedColorModeError
from psddecode.core.types import (
    ColorMode,
    ColorModeData,
    DecodedImage,
    HeaderInfo,
    ImageData,
    ImageResources,
)
from psddecode.utils.colorspace import cmyk_to_rgb, lab_to_rgb

PixelDecoder = Callable[
    [NDArray[np.uint8], HeaderInfo, ColorModeData, ImageResources], NDArray[np.uint8]
]

_DECODERS: dict[ColorMode, PixelDecoder] = {}


def pixel_decoder(*modes: ColorMode) -> Callable[[PixelDecoder], PixelDecoder]:
    def register(fn: PixelDecoder) -> PixelDecoder:
        for m in modes:
            _DECODERS[m] = fn
        return fn

    return register


def channel_values(samples: NDArray[np.uint8], ch: int) -> NDArray[np.uint32]:
    """Unsigned big-endian sample values of one channel."""
    x = samples[:, ch, :].astype(np.uint32)
    if x.shape[1] == 1:
        return x[:, 0]
    return (x[:, 0] << 8) | x[:, 1]


def _require_channels(header: HeaderInfo, n: int) -> None:
    if header.channels < n:
        raise UnsupportedColorModeError(
            f"{header.color_mode.name} needs {n} channels, file has {header.channels}"
        )


def _ink(samples: NDArray[np.uint8], ch: int, depth: int) -> NDArray[np.float64]:
    # stored values are inverted: the maximum means no ink
    max_value = float((1 << depth) - 1)
    return 1.0 - channel_values(samples, ch).astype(np.float64) / max_value


@pixel_decoder(ColorMode.GRAYSCALE, ColorMode.DUOTONE)
def decode_grayscale(
    samples: NDArray[np.uint8],
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
) -> NDArray[np.uint8]:
    v = channel_values(samples, 0)
    if header.depth == 16:
        v = v // 256
    g = np.clip(v, 0, 255).astype(np.uint8)
    return np.repeat(g[:, None], 3, axis=1)


@pixel_decoder(ColorMode.INDEXED)
def decode_indexed(
    samples: NDArray[np.uint8],
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
) -> NDArray[np.uint8]:
    palette = cmd.palette()
    if palette is None:
        raise UnsupportedColorModeError(
            f"indexed image needs a 768 byte palette, got {cmd.length} bytes"
        )
    if res.color_count <= 0:
        raise UnsupportedColorModeError("indexed image has no color count resource")
    if header.depth != 8:
        raise UnsupportedColorModeError(f"indexed image with depth {header.depth}")
    return palette[samples[:, 0, 0]]


@pixel_decoder(ColorMode.RGB)
def decode_rgb(
    samples: NDArray[np.uint8],
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
) -> NDArray[np.uint8]:
    _require_channels(header, 3)
    # byte 0 is the whole 8 bit sample or the high byte of a 16 bit one
    return np.ascontiguousarray(samples[:, :3, 0])


@pixel_decoder(ColorMode.CMYK)
def decode_cmyk(
    samples: NDArray[np.uint8],
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
) -> NDArray[np.uint8]:
    _require_channels(header, 4)
    d = header.depth
    c, m, y, k = (_ink(samples, ch, d) for ch in range(4))
    return cmyk_to_rgb(c, m, y, k)


@pixel_decoder(ColorMode.MULTICHANNEL)
def decode_multichannel(
    samples: NDArray[np.uint8],
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
) -> NDArray[np.uint8]:
    # treated as CMY, or CMYK when a fourth channel is present
    _require_channels(header, 3)
    d = header.depth
    c, m, y = (_ink(samples, ch, d) for ch in range(3))
    k = _ink(samples, 3, d) if header.channels >= 4 else 0.0
    return cmyk_to_rgb(c, m, y, k)


@pixel_decoder(ColorMode.LAB)
def decode_lab(
    samples: NDArray[np.uint8],
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
) -> NDArray[np.uint8]:
    _require_channels(header, 3)
    max_value = float((1 << header.depth) - 1)
    l_coef = max_value / 100.0
    ab_coef = max_value / 256.0
    l = np.trunc(channel_values(samples, 0) / l_coef)
    a = np.trunc(channel_values(samples, 1) / ab_coef - 128.0)
    b = np.trunc(channel_values(samples, 2) / ab_coef - 128.0)
    return lab_to_rgb(l, a, b)


def compose(
    header: HeaderInfo,
    cmd: ColorModeData,
    res: ImageResources,
    data: ImageData,
) -> DecodedImage:
    decoder = _DECODERS.get(header.color_mode)
    if decoder is None:
        raise UnsupportedColorModeError(
            f"{header.color_mode.name} images are not supported"
        )

    pixels = np.ascontiguousarray(
        decoder(data.samples, header, cmd, res), dtype=np.uint8
    )
    if pixels.shape != (header.pixel_count, 3):
        raise CorruptImageDataError(
            f"decoded {pixels.shape[0]} pixels, expected {header.pixel_count}"
        )
    return DecodedImage(
        width=header.width,
        height=header.height,
        pixels=pixels,
        density=data.density,
    )
