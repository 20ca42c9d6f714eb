from __future__ import annotations

import struct
from typing import Any

import numpy as np
import pytest
from conftest import BenchImage

from psddecode.core.decode import decode_bytes

pytest.importorskip("pytest_benchmark")


def _packbits_row(row: bytes) -> bytes:
    # alternate replicate runs of 4 and literal runs of 4
    out = bytearray()
    i = 0
    while i < len(row):
        chunk = row[i : i + 4]
        if len(set(chunk)) == 1 and len(chunk) > 1:
            out.append(257 - len(chunk))
            out.append(chunk[0])
        else:
            out.append(len(chunk) - 1)
            out += chunk
        i += len(chunk)
    return bytes(out)


def _make_psd(img: BenchImage) -> bytes:
    rng = np.random.default_rng(0)
    bpc = img.depth // 8
    row_bytes = img.size * bpc
    planes = []
    for _ in range(img.channels):
        noise = rng.integers(0, 256, size=(img.size, (row_bytes + 3) // 4), dtype=np.uint8)
        plane = np.repeat(noise, 4, axis=1)[:, :row_bytes]
        plane[:, 1::8] = rng.integers(0, 256, size=plane[:, 1::8].shape, dtype=np.uint8)
        planes.append(plane)

    if img.rle:
        counts = bytearray()
        rows = bytearray()
        for plane in planes:
            for y in range(img.size):
                enc = _packbits_row(plane[y].tobytes())
                counts += struct.pack(">H", len(enc))
                rows += enc
        body = bytes(counts + rows)
    else:
        body = b"".join(p.tobytes() for p in planes)

    head = struct.pack(
        ">4sH6xHIIHH", b"8BPS", 1, img.channels, img.size, img.size, img.depth, img.mode
    )
    return head + b"\x00" * 12 + struct.pack(">H", 1 if img.rle else 0) + body


def test_bench_decode_speed(benchmark: Any, bench_image: BenchImage, pytestconfig: pytest.Config) -> None:
    data = _make_psd(bench_image)
    rounds = int(pytestconfig.getoption("--bench-rounds", default=10))
    warmup = int(pytestconfig.getoption("--bench-warmup-rounds", default=2))

    benchmark.extra_info["psd_bytes"] = len(data)
    benchmark.extra_info["pixels"] = bench_image.size * bench_image.size
    psd = benchmark.pedantic(
        decode_bytes, args=(data,), rounds=rounds, warmup_rounds=warmup, iterations=1
    )
    assert len(psd.image) == bench_image.size * bench_image.size
