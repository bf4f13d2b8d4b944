"""
ICO container layout:

    ICONDIR (6 bytes) | N x ICONDIRENTRY (16 bytes) | N image blobs

Blobs follow the directory back to back, in directory order. The first one
starts at 6 + 16 * N and each offset adds the previous blob's length.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import EncodedEntry
from .structs import ICON_TYPE, IconDirEntry, IconHeader

HEADER_SIZE = IconHeader.FORMAT.size
ENTRY_SIZE = IconDirEntry.FORMAT.size


def directory(entries: Sequence[EncodedEntry]) -> List[IconDirEntry]:
    """Directory records for `entries` with cumulative offsets."""
    records = []
    offset = HEADER_SIZE + ENTRY_SIZE * len(entries)
    for entry in entries:
        records.append(IconDirEntry(
            width=entry.width,
            height=entry.height,
            color_count=entry.color_count,
            bit_count=entry.bit_count,
            size=len(entry.data),
            offset=offset,
        ))
        offset += len(entry.data)
    return records


def build_icon(entries: Sequence[EncodedEntry]) -> bytes:
    return b"".join(_chunks(entries))


def write_icon(path, entries: Sequence[EncodedEntry]) -> int:
    """Write header, directory, then blobs. Returns the file size."""
    total = 0
    with open(path, "wb") as f:
        for chunk in _chunks(entries):
            f.write(chunk)
            total += len(chunk)
    return total


def _chunks(entries):
    yield IconHeader(count=len(entries)).pack()
    for record in directory(entries):
        yield record.pack()
    for entry in entries:
        yield entry.data


def read_icon_directory(data: bytes) -> Tuple[IconHeader, List[IconDirEntry]]:
    """Parse the header and directory of an .ico file held in memory."""
    if len(data) < HEADER_SIZE:
        raise ValueError("File too short for an icon header")
    header = IconHeader.unpack(data)
    if header.reserved != 0 or header.type != ICON_TYPE:
        raise ValueError(f"Not an icon file (reserved={header.reserved}, type={header.type})")

    end = HEADER_SIZE + ENTRY_SIZE * header.count
    if len(data) < end:
        raise ValueError(f"Directory truncated: {header.count} entries need {end} bytes")

    records = [IconDirEntry.unpack(data, HEADER_SIZE + i * ENTRY_SIZE) for i in range(header.count)]
    for i, record in enumerate(records):
        if record.offset + record.size > len(data):
            raise ValueError(f"Entry {i} runs past end of file")
    return header, records


def entry_data(data: bytes, record: IconDirEntry) -> bytes:
    return data[record.offset:record.offset + record.size]
