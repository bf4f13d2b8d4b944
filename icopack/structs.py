"""
Fixed-layout binary records used in ICO and BMP files.

All fields are little-endian with no padding:

    ICONDIR            <HHH          reserved, type, count                 (6 bytes)
    ICONDIRENTRY       <BBBBHHII     width, height, colors, reserved,
                                     planes, bpp, size, offset             (16 bytes)
    BITMAPFILEHEADER   <2sIHHI       'BM', file size, reserved x2,
                                     pixel data offset                     (14 bytes)
    BITMAPINFOHEADER   <IiiHHIIiiII  size, width, height, planes, bpp,
                                     compression, image size, x/y ppm,
                                     colors used, colors important         (40 bytes)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace

ICON_TYPE = 1


@dataclass(frozen=True)
class IconHeader:
    count: int
    reserved: int = 0
    type: int = ICON_TYPE

    FORMAT = struct.Struct("<HHH")

    def pack(self) -> bytes:
        return self.FORMAT.pack(self.reserved, self.type, self.count)

    @classmethod
    def unpack(cls, data: bytes, offset: int = 0) -> "IconHeader":
        reserved, type_, count = cls.FORMAT.unpack_from(data, offset)
        return cls(count=count, reserved=reserved, type=type_)


@dataclass(frozen=True)
class IconDirEntry:
    """One directory record. Width/height are stored as a byte, 256 -> 0."""

    width: int
    height: int
    color_count: int
    bit_count: int
    size: int
    offset: int
    planes: int = 1
    reserved: int = 0

    FORMAT = struct.Struct("<BBBBHHII")

    def pack(self) -> bytes:
        return self.FORMAT.pack(
            self.width & 0xFF,
            self.height & 0xFF,
            self.color_count & 0xFF,
            self.reserved,
            self.planes,
            self.bit_count,
            self.size,
            self.offset,
        )

    @classmethod
    def unpack(cls, data: bytes, offset: int = 0) -> "IconDirEntry":
        w, h, colors, reserved, planes, bpp, size, data_offset = cls.FORMAT.unpack_from(data, offset)
        return cls(
            width=w or 256,
            height=h or 256,
            color_count=colors,
            bit_count=bpp,
            size=size,
            offset=data_offset,
            planes=planes,
            reserved=reserved,
        )


@dataclass(frozen=True)
class BitmapFileHeader:
    file_size: int
    pixel_offset: int
    signature: bytes = b"BM"

    FORMAT = struct.Struct("<2sIHHI")

    def pack(self) -> bytes:
        return self.FORMAT.pack(self.signature, self.file_size, 0, 0, self.pixel_offset)

    @classmethod
    def unpack(cls, data: bytes, offset: int = 0) -> "BitmapFileHeader":
        signature, file_size, _, _, pixel_offset = cls.FORMAT.unpack_from(data, offset)
        if signature != b"BM":
            raise ValueError(f"Not a BMP stream (signature {signature!r})")
        return cls(file_size=file_size, pixel_offset=pixel_offset, signature=signature)


@dataclass(frozen=True)
class BitmapInfoHeader:
    width: int
    height: int
    bit_count: int
    image_size: int = 0
    colors_used: int = 0
    colors_important: int = 0
    compression: int = 0
    x_ppm: int = 0
    y_ppm: int = 0
    planes: int = 1
    size: int = 40

    FORMAT = struct.Struct("<IiiHHIIiiII")

    def pack(self) -> bytes:
        return self.FORMAT.pack(
            self.size,
            self.width,
            self.height,
            self.planes,
            self.bit_count,
            self.compression,
            self.image_size,
            self.x_ppm,
            self.y_ppm,
            self.colors_used,
            self.colors_important,
        )

    @classmethod
    def unpack(cls, data: bytes, offset: int = 0) -> "BitmapInfoHeader":
        (size, width, height, planes, bpp, compression, image_size,
         x_ppm, y_ppm, used, important) = cls.FORMAT.unpack_from(data, offset)
        return cls(
            width=width,
            height=height,
            bit_count=bpp,
            image_size=image_size,
            colors_used=used,
            colors_important=important,
            compression=compression,
            x_ppm=x_ppm,
            y_ppm=y_ppm,
            planes=planes,
            size=size,
        )

    def with_height(self, height: int) -> "BitmapInfoHeader":
        return replace(self, height=height)


def row_stride(width: int, bit_count: int) -> int:
    """Bytes per BMP pixel row, padded up to a multiple of 4."""
    return ((width * bit_count + 31) // 32) * 4
