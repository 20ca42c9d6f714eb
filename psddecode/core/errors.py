from __future__ import annotations


class PSDError(Exception):
    """Base class for every decode failure.

    ``stage`` names the pipeline stage the error escaped from. It is filled in
    at the stage boundary by :func:`psddecode.core.decode.stage`.
    """

    stage: str | None = None

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stage is None:
            return msg
        return f"[{self.stage}] {msg}"


class HeaderError(PSDError):
    pass


class TruncatedFileError(PSDError):
    def __init__(self, offset: int, wanted: int, available: int) -> None:
        super().__init__(
            f"unexpected end of file at offset {offset}: "
            f"wanted {wanted} bytes, {available} available"
        )
        self.offset = offset
        self.wanted = wanted
        self.available = available


class UnsupportedBitDepthError(PSDError):
    def __init__(self, depth: int) -> None:
        super().__init__(f"unsupported format: {depth} bits per channel")
        self.depth = depth


class UnsupportedCompressionError(PSDError):
    def __init__(self, code: int) -> None:
        super().__init__(f"ZIP compressed image data is not supported (code {code})")
        self.code = code


class UnknownCompressionError(PSDError):
    def __init__(self, code: int) -> None:
        super().__init__(f"unknown compression code {code}")
        self.code = code


class ResourceError(PSDError):
    pass


class CorruptImageDataError(PSDError):
    pass


class UnsupportedColorModeError(PSDError):
    pass


class StageError(PSDError):
    """A lower-level failure (struct, index, OS) re-raised with its stage."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"error reading {stage}: {cause!r}")
        self.stage = stage
        self.cause = cause

    def __str__(self) -> str:
        return Exception.__str__(self)
