from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from psddecode.core.errors import ResourceError
from psddecode.core.types import (
    DEFAULT_GLOBAL_ANGLE,
    RESOURCE_TAG,
    CopyrightFlag,
    DisplayInfo,
    GlobalAngle,
    ImageResources,
    IndexedColorCount,
    OpaqueResource,
    ResolutionInfo,
    Resource,
    ThumbnailInfo,
    TransparentIndex,
)
from psddecode.io.binary import ByteReader, pad2, swap_bytes
from psddecode.utils.logger import Logger

RESOLUTION_INFO = 1005
DISPLAY_INFO = 1007
THUMBNAIL_BGR = 1033
COPYRIGHT_FLAG = 1034
THUMBNAIL_RGB = 1036
GLOBAL_ANGLE = 1037
INDEXED_COLOR_COUNT = 1046
TRANSPARENT_INDEX = 1047

THUMBNAIL_HEADER_SIZE = 28


def _resolution(p: ByteReader, rid: int) -> ResolutionInfo:
    return ResolutionInfo(
        h_res=p.i16(),
        h_res_unit=p.i32(),
        width_unit=p.i16(),
        v_res=p.i16(),
        v_res_unit=p.i32(),
        height_unit=p.i16(),
    )


def _display_info(p: ByteReader, rid: int) -> DisplayInfo:
    color_space = p.i16()
    color = (p.i16(), p.i16(), p.i16(), p.i16())
    opacity = p.i16()
    if opacity < 0 or opacity > 100:
        opacity = 100
    kind = p.u8() != 0
    padding = p.u8()
    return DisplayInfo(
        color_space=color_space,
        color=color,
        opacity=opacity,
        kind=kind,
        padding=padding,
    )


def _copyright(p: ByteReader, rid: int) -> CopyrightFlag:
    return CopyrightFlag(copyrighted=p.i16() != 0)


def _thumbnail(p: ByteReader, rid: int) -> ThumbnailInfo:
    if len(p) < THUMBNAIL_HEADER_SIZE:
        raise ResourceError(
            f"thumbnail resource {rid} is {len(p)} bytes, "
            f"shorter than its {THUMBNAIL_HEADER_SIZE} byte header"
        )
    fmt = p.i32()
    width = p.i32()
    height = p.i32()
    width_bytes = p.i32()
    size = p.i32()
    compressed_size = p.i32()
    bits_per_pixel = p.i16()
    planes = p.i16()
    payload = bytes(p.take(p.remaining()))
    if rid == THUMBNAIL_BGR:
        # BGR -> RGB per complete triple, a trailing partial one stays
        n = len(payload) - len(payload) % 3
        payload = (
            b"".join(swap_bytes(payload[i : i + 3]) for i in range(0, n, 3))
            + payload[n:]
        )
    return ThumbnailInfo(
        resource_id=rid,
        format=fmt,
        width=width,
        height=height,
        width_bytes=width_bytes,
        size=size,
        compressed_size=compressed_size,
        bits_per_pixel=bits_per_pixel,
        planes=planes,
        data=payload,
    )


def _global_angle(p: ByteReader, rid: int) -> GlobalAngle:
    return GlobalAngle(angle=p.i32())


def _color_count(p: ByteReader, rid: int) -> IndexedColorCount:
    return IndexedColorCount(count=p.i16())


def _transparent_index(p: ByteReader, rid: int) -> TransparentIndex:
    return TransparentIndex(index=p.i16())


_PARSERS: dict[int, Callable[[ByteReader, int], Resource]] = {
    RESOLUTION_INFO: _resolution,
    DISPLAY_INFO: _display_info,
    THUMBNAIL_BGR: _thumbnail,
    COPYRIGHT_FLAG: _copyright,
    THUMBNAIL_RGB: _thumbnail,
    GLOBAL_ANGLE: _global_angle,
    INDEXED_COLOR_COUNT: _color_count,
    TRANSPARENT_INDEX: _transparent_index,
}


def parse_resource(rid: int, payload: ByteReader) -> Resource:
    """Decode one resource payload into its tagged variant.

    ``payload`` covers exactly the declared (even padded) data of the record.
    A 1 byte copyright flag is padded to 2 bytes on disk, so every
    recognized variant reads whole fields from its payload. Empty records
    carry nothing to parse and are kept as opaque.
    """
    parser = _PARSERS.get(rid)
    if parser is None or len(payload) == 0:
        return OpaqueResource(resource_id=rid, size=len(payload))
    return parser(payload, rid)


@dataclass(slots=True)
class ResourceSet:
    """Accumulates recognized records while the block is being read."""

    resolution: ResolutionInfo | None = None
    display_info: DisplayInfo | None = None
    thumbnail: ThumbnailInfo | None = None
    copyrighted: bool = False
    global_angle: int = DEFAULT_GLOBAL_ANGLE
    color_count: int = -1
    transparent_index: int | None = None
    skipped: list[int] = field(default_factory=list)

    def add(self, res: Resource) -> None:
        if isinstance(res, ResolutionInfo):
            self.resolution = res
        elif isinstance(res, DisplayInfo):
            self.display_info = res
        elif isinstance(res, ThumbnailInfo):
            self.thumbnail = res
        elif isinstance(res, CopyrightFlag):
            self.copyrighted = res.copyrighted
        elif isinstance(res, GlobalAngle):
            self.global_angle = res.angle
        elif isinstance(res, IndexedColorCount):
            self.color_count = res.count
        elif isinstance(res, TransparentIndex):
            self.transparent_index = res.index
        elif isinstance(res, OpaqueResource):
            self.skipped.append(res.resource_id)
        else:
            raise TypeError(f"unexpected resource {res!r}")

    def freeze(self, length: int) -> ImageResources:
        return ImageResources(
            length=length,
            resolution=self.resolution,
            display_info=self.display_info,
            thumbnail=self.thumbnail,
            copyrighted=self.copyrighted,
            global_angle=self.global_angle,
            color_count=self.color_count,
            transparent_index=self.transparent_index,
            skipped_ids=tuple(self.skipped),
        )


def read_record(r: ByteReader) -> tuple[int, Resource, int]:
    """Read one ``8BIM`` record at the cursor.

    Returns (resource id, parsed variant, bytes consumed).
    """
    start = r.tell()
    tag = bytes(r.take(4))
    if tag != RESOURCE_TAG:
        raise ResourceError(f"invalid resource signature {tag!r} at offset {start}")
    rid = r.u16()
    name_len = r.u8()
    # length byte + name is padded to an even size
    r.skip(pad2(1 + name_len) - 1)
    size = pad2(r.u32())
    payload = r.sub(size)
    res = parse_resource(rid, payload)
    return rid, res, r.tell() - start


def read_image_resources(
    r: ByteReader,
    skip_invalid: bool = False,
    log: Logger | None = None,
) -> ImageResources:
    length = r.u32()
    block_start = r.tell()
    acc = ResourceSet()
    consumed = 0

    while consumed < length and r.remaining() > 0:
        try:
            rid, res, n = read_record(r)
        except ResourceError:
            if not skip_invalid:
                raise
            if log is not None:
                log.info(
                    f"invalid resource at offset {block_start + consumed}, "
                    "skipping the rest of the block"
                )
            r.seek(min(block_start + length, len(r)))
            break
        consumed += n
        acc.add(res)
        if log is not None:
            log.info(f"resource {rid}: {type(res).__name__} ({n} bytes)")

    if consumed > length:
        raise ResourceError(
            f"resource records overrun the block ({consumed} > {length} bytes)"
        )
    return acc.freeze(length)
