"""
Encode one format spec from its dimension's composite and pick the entry to embed.

Each spec can yield two candidates:
  - PNG: the depth-reduced image as a standalone PNG stream.
  - BMP: the depth-reduced image as a BMP with the file header dropped,
    biHeight doubled and the 1bpp AND mask rows appended after the colour rows.
The shorter candidate wins (PNG on a tie).
"""

import io
import logging

import numpy as np
from PIL import Image

from . import dib
from .errors import InternalInvariantViolation
from .formats import FormatSpec
from .models import CompositeSet, EncodedEntry
from .structs import BitmapFileHeader, BitmapInfoHeader, row_stride

log = logging.getLogger(__name__)

PNG = "png"
BMP = "bmp"

FILE_HEADER_SIZE = BitmapFileHeader.FORMAT.size

# Depths Pillow's BMP plugin writes natively, and the mode it needs for each.
PILLOW_BMP_MODES = {1: "1", 8: "P", 24: "RGB", 32: "RGBA"}


def color_count(bit_depth: int) -> int:
    """Directory colour count: palette size for <= 8bpp (256 wraps to 0), else 0."""
    if bit_depth > 8:
        return 0
    return (1 << bit_depth) & 0xFF


def _flatten(composite: Image.Image) -> Image.Image:
    base = Image.new("RGBA", composite.size, (0, 0, 0, 255))
    base.alpha_composite(composite)
    return base.convert("RGB")


def _quantize(rgb: Image.Image, transparent: np.ndarray, bit_depth: int) -> Image.Image:
    # Last palette slot is kept black and used for transparent pixels.
    colors = 1 << bit_depth
    index = colors - 1
    img = rgb.quantize(colors=index, method=Image.Quantize.MEDIANCUT, dither=Image.Dither.NONE)

    palette = (img.getpalette() or [])[:index * 3]
    palette += [0] * (colors * 3 - len(palette))
    img.putpalette(palette)

    img.paste(index, mask=Image.fromarray(transparent))
    img.info["transparency"] = index
    return img


def reduce_depth(composites: CompositeSet, bit_depth: int) -> Image.Image:
    """Convert the shared composite to what `bit_depth` can hold."""
    composite = composites.composite
    if bit_depth == 32:
        return composite.copy()

    rgb = _flatten(composite)
    if bit_depth == 24:
        return rgb
    if bit_depth == 16:
        return Image.fromarray(np.asarray(rgb) & 0xF8, "RGB")
    if bit_depth in (8, 4):
        return _quantize(rgb, composites.transparent(), bit_depth)
    raise ValueError(f"Unsupported bit depth: {bit_depth}")


def encode_png(image: Image.Image, bit_depth: int) -> bytes:
    params = {}
    if image.mode == "P":
        params["transparency"] = image.info.get("transparency")
        if bit_depth == 4:
            params["bits"] = 4
    buf = io.BytesIO()
    image.save(buf, format="PNG", **params)
    return buf.getvalue()


def encode_bmp(image: Image.Image, bit_depth: int) -> bytes:
    """Full BMP file (file header, info header, palette, bottom-up pixel rows)."""
    if bit_depth not in PILLOW_BMP_MODES:
        return dib.encode_dib(image, bit_depth)

    mode = PILLOW_BMP_MODES[bit_depth]
    if image.mode != mode:
        raise ValueError(f"{bit_depth}bpp bitmap needs a {mode} image, got {image.mode}")
    buf = io.BytesIO()
    image.save(buf, format="BMP")
    return buf.getvalue()


def pixel_region(bmp: bytes) -> bytes:
    """Raw pixel rows of a BMP file, skipping headers and palette."""
    file_header = BitmapFileHeader.unpack(bmp)
    info = BitmapInfoHeader.unpack(bmp, FILE_HEADER_SIZE)
    length = row_stride(info.width, info.bit_count) * abs(info.height)
    start = file_header.pixel_offset
    return bmp[start:start + length]


def icon_bmp(bmp: bytes, mask_bmp: bytes) -> bytes:
    """Rewrite a BMP file into an icon image: [info][palette][XOR rows][AND rows]."""
    file_header = BitmapFileHeader.unpack(bmp)
    info = BitmapInfoHeader.unpack(bmp, FILE_HEADER_SIZE)

    info_end = FILE_HEADER_SIZE + info.size
    extra_header = bmp[FILE_HEADER_SIZE + BitmapInfoHeader.FORMAT.size:info_end]
    palette = bmp[info_end:file_header.pixel_offset]
    pixels = pixel_region(bmp)
    mask = pixel_region(mask_bmp)

    expected_mask = row_stride(info.width, 1) * info.width
    if len(mask) != expected_mask:
        raise InternalInvariantViolation(
            f"AND mask is {len(mask)} bytes, expected {expected_mask}")

    header = info.with_height(2 * info.width).pack() + extra_header
    return header + palette + pixels + mask


def encode_entry(spec: FormatSpec, composites: CompositeSet) -> EncodedEntry:
    """Encode `spec` from its dimension's composite set and keep the smaller candidate."""
    reduced = reduce_depth(composites, spec.bit_depth)

    candidates = []
    if spec.container.allows_png:
        candidates.append((PNG, encode_png(reduced, spec.bit_depth)))
    if spec.container.allows_bmp:
        bmp = encode_bmp(reduced, spec.bit_depth)
        mask_bmp = encode_bmp(composites.mask, 1)
        candidates.append((BMP, icon_bmp(bmp, mask_bmp)))

    if not candidates:
        raise InternalInvariantViolation(f"No encoding produced for {spec}")

    for kind, data in candidates:
        log.debug("%s as %s: %d bytes", spec, kind.upper(), len(data))
    kind, data = min(candidates, key=lambda c: len(c[1]))

    return EncodedEntry(
        spec=spec,
        data=data,
        bit_count=spec.bit_depth,
        color_count=color_count(spec.bit_depth),
        width=spec.dimension,
        height=spec.dimension,
        kind=kind,
    )
