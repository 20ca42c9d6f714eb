from __future__ import annotations

from psddecode.core.decode import decode_bytes, decode_stream, open_psd
from psddecode.core.errors import (
    CorruptImageDataError,
    HeaderError,
    PSDError,
    ResourceError,
    StageError,
    TruncatedFileError,
    UnknownCompressionError,
    UnsupportedBitDepthError,
    UnsupportedColorModeError,
    UnsupportedCompressionError,
)
from psddecode.core.types import (
    ColorMode,
    Compression,
    DecodedImage,
    DecodeOptions,
    PSDFile,
)

__all__ = [
    "ColorMode",
    "Compression",
    "CorruptImageDataError",
    "DecodeOptions",
    "DecodedImage",
    "HeaderError",
    "PSDError",
    "PSDFile",
    "ResourceError",
    "StageError",
    "TruncatedFileError",
    "UnknownCompressionError",
    "UnsupportedBitDepthError",
    "UnsupportedColorModeError",
    "UnsupportedCompressionError",
    "decode_bytes",
    "decode_stream",
    "open_psd",
]
