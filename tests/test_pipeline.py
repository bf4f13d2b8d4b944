from __future__ import annotations

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from icopack.container import entry_data, read_icon_directory
from icopack.errors import SourceNotFound, UnreadableSource, UnsupportedDimension
from icopack.formats import parse_format_specs
from icopack.mask import MaskPolarity
from icopack.pipeline import build_composite_set, convert, encode_entries
from icopack.structs import BitmapInfoHeader, row_stride

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_composite_built_once_per_dimension(wide_image) -> None:
    built = []

    def factory(source, size, polarity):
        built.append(size)
        return build_composite_set(source, size, polarity)

    specs = parse_format_specs("16 PNG, 16 BMP, 32, 16 24bpp, 32 8bpp BMP")
    entries = encode_entries(wide_image, specs, composite_factory=factory)

    assert built == [16, 32]
    assert [e.spec for e in entries] == specs


def test_entries_keep_request_order(wide_image) -> None:
    entries = encode_entries(wide_image, parse_format_specs("48, 16 4bpp, 32 PNG"))
    assert [(e.width, e.bit_count) for e in entries] == [(48, 32), (16, 4), (32, 32)]


def test_on_entry_callback_sees_every_entry(wide_image) -> None:
    seen = []
    encode_entries(wide_image, parse_format_specs("16,32"), on_entry=seen.append)
    assert [e.width for e in seen] == [16, 32]


def test_end_to_end_wide_source(tmp_path, source_path) -> None:
    out = tmp_path / "logo.ico"
    convert(source_path, out, "16,32")
    data = out.read_bytes()

    header, records = read_icon_directory(data)
    assert header.count == 2
    assert [(r.width, r.height, r.bit_count) for r in records] == [(16, 16, 32), (32, 32, 32)]
    assert data[6] == 16 and data[7] == 16
    assert data[22] == 32 and data[23] == 32

    assert records[0].offset == 6 + 16 * 2
    assert records[1].offset == records[0].offset + records[0].size
    assert len(data) == records[1].offset + records[1].size

    for record in records:
        blob = entry_data(data, record)
        if blob.startswith(PNG_MAGIC):
            assert Image.open(BytesIO(blob)).size == (record.width, record.height)
        else:
            info = BitmapInfoHeader.unpack(blob)
            assert info.height == 2 * info.width == 2 * record.width
            n = record.width
            assert len(blob) == 40 + row_stride(n, 32) * n + row_stride(n, 1) * n


def test_default_formats(tmp_path, source_path) -> None:
    out = tmp_path / "default.ico"
    entries = convert(source_path, out)
    assert [e.width for e in entries] == [16, 32, 48, 256]
    assert out.read_bytes()[6 + 16 * 3] == 0  # 256 wraps to 0


def test_pillow_decodes_bmp_mask_as_transparency(tmp_path, source_path) -> None:
    out = tmp_path / "mask.ico"
    convert(source_path, out, "32 24bpp BMP")

    decoded = Image.open(out).convert("RGBA")
    alpha = np.asarray(decoded.getchannel("A"))
    assert decoded.size == (32, 32)
    assert (alpha[:6] == 0).all()
    assert (alpha[25:] == 0).all()
    assert (alpha[8:23] == 255).all()


def test_opaque_set_polarity_is_read_inverted(tmp_path, source_path) -> None:
    out = tmp_path / "inverted.ico"
    convert(source_path, out, "32 24bpp BMP", polarity=MaskPolarity.OPAQUE_SET)

    alpha = np.asarray(Image.open(out).convert("RGBA").getchannel("A"))
    assert (alpha[:6] == 255).all()
    assert (alpha[8:23] == 0).all()


@pytest.mark.parametrize("formats", ["16 4bpp BMP", "16 8bpp BMP", "16 16bpp BMP", "16 4bpp PNG", "16 8bpp"])
def test_low_depth_entries_decode_with_pillow(tmp_path, source_path, formats) -> None:
    out = tmp_path / "low.ico"
    convert(source_path, out, formats)
    data = out.read_bytes()
    _, (record,) = read_icon_directory(data)
    blob = entry_data(data, record)
    if blob.startswith(PNG_MAGIC):
        # the ICO plugin drops a PNG frame's tRNS, so read the entry directly
        decoded = Image.open(BytesIO(blob)).convert("RGBA")
    else:
        decoded = Image.open(out).convert("RGBA")
    alpha = np.asarray(decoded.getchannel("A"))
    assert decoded.size == (16, 16)
    assert alpha[0, 8] == 0
    assert alpha[8, 8] == 255


def test_missing_source(tmp_path) -> None:
    with pytest.raises(SourceNotFound):
        convert(tmp_path / "nope.png", tmp_path / "nope.ico")


def test_failed_conversion_writes_nothing(tmp_path, source_path) -> None:
    out = tmp_path / "bad.ico"
    with pytest.raises(UnsupportedDimension):
        convert(source_path, out, "16, 20")
    assert not out.exists()


def test_directory_is_not_a_source(tmp_path) -> None:
    with pytest.raises(SourceNotFound):
        convert(tmp_path, tmp_path / "dir.ico")


def test_non_image_source(tmp_path) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("not an image")
    with pytest.raises(UnreadableSource):
        convert(notes, tmp_path / "notes.ico")
    assert not (tmp_path / "notes.ico").exists()


def test_convert_accepts_loaded_image(tmp_path, wide_image) -> None:
    out = tmp_path / "loaded.ico"
    entries = convert(wide_image, out, "16")
    assert [e.width for e in entries] == [16]
    assert out.exists()
