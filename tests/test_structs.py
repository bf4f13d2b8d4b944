from __future__ import annotations

import pytest

from icopack.structs import (
    BitmapFileHeader,
    BitmapInfoHeader,
    IconDirEntry,
    IconHeader,
    row_stride,
)


def test_record_sizes() -> None:
    assert IconHeader.FORMAT.size == 6
    assert IconDirEntry.FORMAT.size == 16
    assert BitmapFileHeader.FORMAT.size == 14
    assert BitmapInfoHeader.FORMAT.size == 40


def test_icon_header_layout() -> None:
    assert IconHeader(count=3).pack() == b"\x00\x00\x01\x00\x03\x00"


def test_dir_entry_wraps_256_to_zero() -> None:
    packed = IconDirEntry(width=256, height=256, color_count=0, bit_count=32, size=10, offset=22).pack()
    assert packed == bytes([0, 0, 0, 0, 1, 0, 32, 0, 10, 0, 0, 0, 22, 0, 0, 0])
    assert IconDirEntry.unpack(packed).width == 256


def test_dir_entry_round_trip() -> None:
    entry = IconDirEntry(width=48, height=48, color_count=16, bit_count=4, size=1234, offset=70000)
    assert IconDirEntry.unpack(b"xx" + entry.pack(), 2) == entry


def test_info_header_with_height() -> None:
    info = BitmapInfoHeader(width=32, height=32, bit_count=24, image_size=3072)
    doubled = BitmapInfoHeader.unpack(info.with_height(64).pack())
    assert (doubled.width, doubled.height, doubled.bit_count, doubled.image_size) == (32, 64, 24, 3072)


def test_file_header_rejects_other_signatures() -> None:
    with pytest.raises(ValueError):
        BitmapFileHeader.unpack(b"XX" + bytes(12))


@pytest.mark.parametrize(
    "width, bits, expected",
    [(16, 1, 4), (48, 1, 8), (33, 1, 8), (3, 4, 4), (9, 4, 8), (5, 24, 16), (16, 32, 64), (3, 16, 8)],
)
def test_row_stride(width, bits, expected) -> None:
    assert row_stride(width, bits) == expected
