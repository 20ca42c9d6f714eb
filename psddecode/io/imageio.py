from __future__ import annotations

from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image

from psddecode.core.types import DecodedImage, ThumbnailInfo

THUMBNAIL_RAW = 0
THUMBNAIL_JPEG = 1


def to_pil(image: DecodedImage) -> Image.Image:
    img = Image.fromarray(np.ascontiguousarray(image.array))
    # density is stored in pixels per meter, Pillow wants dots per inch
    img.info["dpi"] = tuple(round(d * 254 / 10000) for d in image.density)
    return img


def save_image(path: Path, image: DecodedImage) -> None:
    img = to_pil(image)
    img.save(path, dpi=img.info["dpi"])


def thumbnail_to_pil(th: ThumbnailInfo) -> Image.Image:
    if th.format == THUMBNAIL_RAW:
        return Image.frombytes(
            "RGB", (th.width, th.height), th.data, "raw", "RGB", th.width_bytes
        )
    if th.format == THUMBNAIL_JPEG:
        img = Image.open(BytesIO(th.data))
        img.load()
        return img.convert("RGB")
    raise ValueError(f"unknown thumbnail format {th.format}")


def save_thumbnail(path: Path, th: ThumbnailInfo) -> None:
    thumbnail_to_pil(th).save(path)
