from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Final, Union

import numpy as np
from numpy.typing import NDArray

SIGNATURE: Final[bytes] = b"8BPS"
RESOURCE_TAG: Final[bytes] = b"8BIM"
HEADER_SIZE: Final[int] = 26

DEFAULT_GLOBAL_ANGLE: Final[int] = 30
DEFAULT_DENSITY: Final[int] = 3780  # 96 dpi in pixels per meter


class ColorMode(IntEnum):
    BITMAP = 0
    GRAYSCALE = 1
    INDEXED = 2
    RGB = 3
    CMYK = 4
    MULTICHANNEL = 7
    DUOTONE = 8
    LAB = 9


class Compression(IntEnum):
    RAW = 0
    RLE = 1
    ZIP = 2
    ZIP_PREDICTION = 3


@dataclass(frozen=True, slots=True)
class HeaderInfo:
    channels: int
    height: int
    width: int
    depth: int
    color_mode: ColorMode

    @property
    def bytes_per_channel(self) -> int:
        return self.depth // 8

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


@dataclass(frozen=True, slots=True)
class ColorModeData:
    length: int
    data: bytes = b""

    def palette(self) -> NDArray[np.uint8] | None:
        """(256, 3) RGB table for indexed images, None for any other payload."""
        if self.length != 768:
            return None
        planes = np.frombuffer(self.data, dtype=np.uint8).reshape(3, 256)
        return np.ascontiguousarray(planes.T)


@dataclass(frozen=True, slots=True)
class ResolutionInfo:
    h_res: int
    h_res_unit: int
    width_unit: int
    v_res: int
    v_res_unit: int
    height_unit: int


@dataclass(frozen=True, slots=True)
class DisplayInfo:
    color_space: int
    color: tuple[int, int, int, int]
    opacity: int
    kind: bool
    padding: int


@dataclass(frozen=True, slots=True)
class ThumbnailInfo:
    resource_id: int
    format: int
    width: int
    height: int
    width_bytes: int
    size: int
    compressed_size: int
    bits_per_pixel: int
    planes: int
    data: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class CopyrightFlag:
    copyrighted: bool


@dataclass(frozen=True, slots=True)
class GlobalAngle:
    angle: int


@dataclass(frozen=True, slots=True)
class IndexedColorCount:
    count: int


@dataclass(frozen=True, slots=True)
class TransparentIndex:
    index: int


@dataclass(frozen=True, slots=True)
class OpaqueResource:
    resource_id: int
    size: int


Resource = Union[
    ResolutionInfo,
    DisplayInfo,
    ThumbnailInfo,
    CopyrightFlag,
    GlobalAngle,
    IndexedColorCount,
    TransparentIndex,
    OpaqueResource,
]


@dataclass(frozen=True, slots=True)
class ImageResources:
    length: int = 0
    resolution: ResolutionInfo | None = None
    display_info: DisplayInfo | None = None
    thumbnail: ThumbnailInfo | None = None
    copyrighted: bool = False
    global_angle: int = DEFAULT_GLOBAL_ANGLE
    color_count: int = -1
    transparent_index: int | None = None
    skipped_ids: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class ImageData:
    compression: Compression
    samples: NDArray[np.uint8]
    density: tuple[int, int] = (DEFAULT_DENSITY, DEFAULT_DENSITY)


@dataclass(frozen=True, slots=True)
class DecodedImage:
    width: int
    height: int
    pixels: NDArray[np.uint8]
    density: tuple[int, int] = (DEFAULT_DENSITY, DEFAULT_DENSITY)

    def __len__(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def array(self) -> NDArray[np.uint8]:
        return self.pixels.reshape(self.height, self.width, 3)


@dataclass(frozen=True, slots=True)
class DecodeOptions:
    skip_invalid_resources: bool = False


@dataclass(frozen=True, slots=True)
class PSDFile:
    header: HeaderInfo
    color_mode_data: ColorModeData
    resources: ImageResources
    layer_mask_length: int
    compression: Compression
    image: DecodedImage

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def depth(self) -> int:
        return self.header.depth

    @property
    def is_copyrighted(self) -> bool:
        return self.resources.copyrighted

    @property
    def global_angle(self) -> int:
        return self.resources.global_angle

    @property
    def has_thumbnail(self) -> bool:
        return self.resources.thumbnail is not None

    @property
    def x_resolution(self) -> int | None:
        r = self.resources.resolution
        return None if r is None else r.h_res

    @property
    def y_resolution(self) -> int | None:
        r = self.resources.resolution
        return None if r is None else r.v_res

    def metadata(self) -> dict[str, object]:
        th = self.resources.thumbnail
        return {
            "width": self.width,
            "height": self.height,
            "channels": self.header.channels,
            "depth": self.depth,
            "color_mode": self.header.color_mode.name,
            "compression": self.compression.name,
            "x_resolution": self.x_resolution,
            "y_resolution": self.y_resolution,
            "density": self.image.density,
            "copyrighted": self.is_copyrighted,
            "global_angle": self.global_angle,
            "color_count": self.resources.color_count,
            "thumbnail": None if th is None else (th.width, th.height),
        }
