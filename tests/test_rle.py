from __future__ import annotations

import numpy as np
import pytest

from psddecode.core.errors import CorruptImageDataError, TruncatedFileError
from psddecode.core.rle import deplanarize, read_rle_planes, unpack_bits
from psddecode.io.binary import ByteReader


def test_literal_run() -> None:
    assert unpack_bits(ByteReader(bytes([0x03, 10, 20, 30, 40])), 4) == bytes([10, 20, 30, 40])


def test_replicate_run() -> None:
    assert unpack_bits(ByteReader(bytes([0xFE, 7])), 3) == bytes([7, 7, 7])


def test_replicate_run_longest() -> None:
    # 0x81 is -127: 128 copies
    assert unpack_bits(ByteReader(bytes([0x81, 9])), 128) == bytes([9]) * 128


def test_noop_control_byte() -> None:
    r = ByteReader(bytes([0x80, 0x00, 5, 0x80]))
    assert unpack_bits(r, 1) == bytes([5])
    assert r.tell() == 3


def test_mixed_runs_stop_at_expected() -> None:
    data = bytes([0x01, 1, 2, 0xFD, 3, 0x00, 4, 0xEE])
    r = ByteReader(data)
    assert unpack_bits(r, 7) == bytes([1, 2, 3, 3, 3, 3, 4])
    assert r.remaining() == 1


def test_overrun_is_rejected() -> None:
    with pytest.raises(CorruptImageDataError):
        unpack_bits(ByteReader(bytes([0x03, 1, 2, 3, 4])), 3)
    with pytest.raises(CorruptImageDataError):
        unpack_bits(ByteReader(bytes([0xFE, 1])), 2)


def test_underrun_is_truncation() -> None:
    with pytest.raises(TruncatedFileError):
        unpack_bits(ByteReader(bytes([0x01, 1, 2])), 4)


def test_read_rle_planes_skips_count_table() -> None:
    counts = bytes(2 * 2 * 1)
    body = bytes([0x01, 10, 11, 0xFF, 20])
    r = ByteReader(counts + body)
    planes = read_rle_planes(r, channels=2, height=1, plane_size=2)
    assert planes.tolist() == [[10, 11], [20, 20]]
    assert r.remaining() == 0


def test_deplanarize_channel_minor() -> None:
    planes = np.array([[1, 2, 3], [4, 5, 6], [7, 8, 9]], dtype=np.uint8)
    out = deplanarize(planes, 1)
    assert out.shape == (3, 3, 1)
    assert out.reshape(-1).tolist() == [1, 4, 7, 2, 5, 8, 3, 6, 9]


def test_deplanarize_two_byte_samples() -> None:
    planes = np.array([[0xA1, 0xA2, 0xB1, 0xB2], [0xC1, 0xC2, 0xD1, 0xD2]], dtype=np.uint8)
    out = deplanarize(planes, 2)
    assert out.shape == (2, 2, 2)
    assert out.reshape(-1).tolist() == [0xA1, 0xA2, 0xC1, 0xC2, 0xB1, 0xB2, 0xD1, 0xD2]


def test_read_rle_planes_rejects_input_too_short_for_planes() -> None:
    # 2 planes of 300 bytes need at least 2 * 3 two-byte replicate runs
    r = ByteReader(bytes(2 * 2 * 1) + bytes([0x81, 1]) * 5)
    with pytest.raises(TruncatedFileError) as ei:
        read_rle_planes(r, channels=2, height=1, plane_size=300)
    assert ei.value.wanted == 12
    assert ei.value.available == 10
    assert ei.value.offset == 4
