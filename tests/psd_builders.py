from __future__ import annotations

import struct
from collections.abc import Sequence


def u16(v: int) -> bytes:
    return struct.pack(">H", v)


def u32(v: int) -> bytes:
    return struct.pack(">I", v)


def header_bytes(
    channels: int = 3,
    height: int = 1,
    width: int = 2,
    depth: int = 8,
    mode: int = 3,
    signature: bytes = b"8BPS",
    version: int = 1,
) -> bytes:
    return struct.pack(
        ">4sH6xHIIHH", signature, version, channels, height, width, depth, mode
    )


def resource(rid: int, payload: bytes, name: bytes = b"", tag: bytes = b"8BIM") -> bytes:
    pname = bytes([len(name)]) + name
    if len(pname) % 2:
        pname += b"\x00"
    data = payload + (b"\x00" if len(payload) % 2 else b"")
    return tag + u16(rid) + pname + u32(len(payload)) + data


def literal_runs(row: bytes) -> bytes:
    out = bytearray()
    for i in range(0, len(row), 128):
        chunk = row[i : i + 128]
        out.append(len(chunk) - 1)
        out += chunk
    return bytes(out)


def rle_body(planes: Sequence[bytes], height: int) -> bytes:
    """PackBits body (count table + rows) encoding every row as literals."""
    counts = bytearray()
    rows = bytearray()
    for plane in planes:
        row_len = len(plane) // height
        for y in range(height):
            enc = literal_runs(plane[y * row_len : (y + 1) * row_len])
            counts += u16(len(enc))
            rows += enc
    return bytes(counts + rows)


def build_psd(
    image: bytes,
    channels: int = 3,
    height: int = 1,
    width: int = 2,
    depth: int = 8,
    mode: int = 3,
    compression: int = 0,
    color_data: bytes = b"",
    resources: bytes = b"",
    layers: bytes = b"",
) -> bytes:
    return b"".join(
        [
            header_bytes(channels, height, width, depth, mode),
            u32(len(color_data)),
            color_data,
            u32(len(resources)),
            resources,
            u32(len(layers)),
            layers,
            u16(compression),
            image,
        ]
    )


def resolution_payload(h_res: int, v_res: int) -> bytes:
    return struct.pack(">hihhih", h_res, 0, 1, v_res, 0, 1)


def thumbnail_payload(
    data: bytes, fmt: int = 0, width: int = 1, height: int = 1, width_bytes: int = 4
) -> bytes:
    head = struct.pack(
        ">iiiiiihh", fmt, width, height, width_bytes, len(data), len(data), 24, 1
    )
    return head + data
