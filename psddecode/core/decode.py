from __future__ import annotations

import struct
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from psddecode.core.color_mode import read_color_mode_data
from psddecode.core.compose import compose
from psddecode.core.errors import PSDError, StageError
from psddecode.core.header import read_header
from psddecode.core.image_data import read_image_data
from psddecode.core.layers import skip_layer_and_mask
from psddecode.core.resources import read_image_resources
from psddecode.core.types import DecodeOptions, PSDFile
from psddecode.io.binary import ByteReader
from psddecode.utils.logger import Logger

STAGE_HEADER = "header"
STAGE_COLOR_MODE_DATA = "color-mode-data"
STAGE_IMAGE_RESOURCE = "image-resource"
STAGE_LAYER_MASK = "layer-mask"
STAGE_IMAGE_DATA = "image-data"


@contextmanager
def stage(name: str) -> Iterator[None]:
    """Tag every error leaving the block with the stage it came from."""
    try:
        yield
    except PSDError as e:
        if e.stage is None:
            e.stage = name
        raise
    except (struct.error, ValueError, IndexError, OSError) as e:
        raise StageError(name, e) from e


def decode_bytes(
    data: bytes | bytearray | memoryview,
    options: DecodeOptions | None = None,
    log: Logger | None = None,
) -> PSDFile:
    opts = options if options is not None else DecodeOptions()
    r = ByteReader(data)

    with stage(STAGE_HEADER):
        header = read_header(r)
    if log is not None:
        log.info(
            f"{header.width}x{header.height} {header.color_mode.name}, "
            f"{header.channels} channels, {header.depth} bit"
        )

    with stage(STAGE_COLOR_MODE_DATA):
        cmd = read_color_mode_data(r)

    with stage(STAGE_IMAGE_RESOURCE):
        resources = read_image_resources(
            r,
            skip_invalid=opts.skip_invalid_resources,
            log=None if log is None else log.child("resources"),
        )

    with stage(STAGE_LAYER_MASK):
        layer_len, skipped = skip_layer_and_mask(r)
    if log is not None and not skipped:
        log.info(f"layer and mask section of {layer_len} bytes left in place")

    with stage(STAGE_IMAGE_DATA):
        img_data = read_image_data(r, header, resources.resolution)
        image = compose(header, cmd, resources, img_data)
    if log is not None:
        log.info(f"decoded {len(image)} pixels ({img_data.compression.name})")

    return PSDFile(
        header=header,
        color_mode_data=cmd,
        resources=resources,
        layer_mask_length=layer_len,
        compression=img_data.compression,
        image=image,
    )


def decode_stream(
    fp: BinaryIO, options: DecodeOptions | None = None, log: Logger | None = None
) -> PSDFile:
    return decode_bytes(fp.read(), options=options, log=log)


def open_psd(
    path: Path | str, options: DecodeOptions | None = None, log: Logger | None = None
) -> PSDFile:
    with Path(path).open("rb") as fp:
        return decode_stream(fp, options=options, log=log)
