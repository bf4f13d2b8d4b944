"""
BMP writer for the two depths Pillow's BMP plugin does not produce.

    4bpp   palette image, up to 16 colours, two pixels per byte (high nibble first)
    16bpp  X1R5G5B5, BI_RGB, little-endian words

Rows are stored bottom-up and padded to 4 bytes, same as any other BMP.
"""

import numpy as np
from PIL import Image

from .structs import BitmapFileHeader, BitmapInfoHeader, row_stride

FILE_HEADER_SIZE = BitmapFileHeader.FORMAT.size
INFO_HEADER_SIZE = BitmapInfoHeader.FORMAT.size


def _pack_4bpp(image: Image.Image) -> np.ndarray:
    indices = np.asarray(image, dtype=np.uint8)
    if indices.max(initial=0) > 15:
        raise ValueError("4bpp bitmap needs palette indices below 16")
    if indices.shape[1] % 2:
        indices = np.pad(indices, ((0, 0), (0, 1)))
    return (indices[:, 0::2] << 4) | indices[:, 1::2]


def _pack_16bpp(image: Image.Image) -> np.ndarray:
    rgb = np.asarray(image.convert("RGB"), dtype=np.uint16)
    r, g, b = rgb[:, :, 0] >> 3, rgb[:, :, 1] >> 3, rgb[:, :, 2] >> 3
    words = (r << 10) | (g << 5) | b
    return words.astype("<u2").view(np.uint8).reshape(words.shape[0], -1)


def _palette_bytes(image: Image.Image, entries: int) -> bytes:
    rgb = np.zeros((entries, 3), dtype=np.uint8)
    palette = image.getpalette() or []
    used = np.asarray(palette[:entries * 3], dtype=np.uint8).reshape(-1, 3)
    rgb[:len(used)] = used
    bgrx = np.zeros((entries, 4), dtype=np.uint8)
    bgrx[:, 0], bgrx[:, 1], bgrx[:, 2] = rgb[:, 2], rgb[:, 1], rgb[:, 0]
    return bgrx.tobytes()


def encode_dib(image: Image.Image, bit_count: int) -> bytes:
    """Encode `image` as a complete BMP file at 4 or 16 bits per pixel."""
    if bit_count == 4:
        if image.mode != "P":
            raise ValueError(f"4bpp bitmap needs a palette image, got {image.mode}")
        rows = _pack_4bpp(image)
        palette = _palette_bytes(image, 16)
        colors = 16
    elif bit_count == 16:
        rows = _pack_16bpp(image)
        palette = b""
        colors = 0
    else:
        raise ValueError(f"Unsupported DIB bit count: {bit_count}")

    stride = row_stride(image.width, bit_count)
    padded = np.zeros((image.height, stride), dtype=np.uint8)
    padded[:, :rows.shape[1]] = rows
    pixels = padded[::-1].tobytes()

    offset = FILE_HEADER_SIZE + INFO_HEADER_SIZE + len(palette)
    info = BitmapInfoHeader(
        width=image.width,
        height=image.height,
        bit_count=bit_count,
        image_size=len(pixels),
        colors_used=colors,
    )
    header = BitmapFileHeader(file_size=offset + len(pixels), pixel_offset=offset)
    return header.pack() + info.pack() + palette + pixels
