"""
Check how an .ico renders by compositing every entry against several backgrounds.
Prints the icon directory and writes a comparison sheet: one row per entry,
one column per background (white, black, red, green, blue).

Entries are decoded with Pillow's ICO reader, which applies the AND mask to
BMP entries the same way Windows does. Transparent corners showing the
background colour (not black or white blocks) means the mask polarity is right.

Usage: python tools/preview_ico.py <icon.ico> [output.png]
"""

import sys
from io import BytesIO
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from icopack.container import entry_data, read_icon_directory

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
CELL = 128  # entries are upscaled (nearest) to this size for viewing

# Background colors (BGR)
BACKGROUNDS = [
    ("White", (255, 255, 255)),
    ("Black", (0, 0, 0)),
    ("Red", (0, 0, 255)),
    ("Green", (0, 255, 0)),
    ("Blue", (255, 0, 0)),
]


def composite_on_background(frame_bgra, bg_color):
    """Composite BGRA frame onto solid background color."""
    h, w = frame_bgra.shape[:2]

    bg = np.full((h, w, 3), bg_color, dtype=np.uint8)

    b, g, r, a = cv2.split(frame_bgra)
    alpha = a.astype(np.float32) / 255.0

    # Composite: result = fg * alpha + bg * (1 - alpha)
    result = np.zeros((h, w, 3), dtype=np.uint8)
    for i, (fg_ch, bg_ch) in enumerate(zip([b, g, r], cv2.split(bg))):
        result[:, :, i] = (fg_ch * alpha + bg_ch * (1 - alpha)).astype(np.uint8)

    return result


def decode_entries(data: bytes):
    """Yield (record, kind, BGRA array) for each directory entry, in file order."""
    _, records = read_icon_directory(data)
    ico = Image.open(BytesIO(data))
    for record in records:
        kind = "PNG" if entry_data(data, record)[:8] == PNG_MAGIC else "BMP"
        idx = next(i for i, h in enumerate(ico.ico.entry) if h.offset == record.offset)
        rgba = np.array(ico.ico.frame(idx).convert("RGBA"))
        yield record, kind, cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)


def print_directory(data: bytes):
    header, records = read_icon_directory(data)
    print(f"{header.count} entries, {len(data)} bytes")
    print(f"{'#':>2} {'Size':>9} {'BPP':>4} {'Colors':>6} {'Bytes':>8} {'Offset':>8}")
    print("-" * 42)
    for i, r in enumerate(records):
        print(f"{i:>2} {f'{r.width}x{r.height}':>9} {r.bit_count:>4} {r.color_count:>6} "
              f"{r.size:>8} {r.offset:>8}")


def create_preview_sheet(icon_path: str, output_path: str = None):
    """Write a sheet of every entry composited on every background."""
    data = Path(icon_path).read_bytes()
    print_directory(data)

    rows = []
    for record, kind, frame in decode_entries(data):
        scaled = cv2.resize(frame, (CELL, CELL), interpolation=cv2.INTER_NEAREST)
        cells = []
        for name, color in BACKGROUNDS:
            comp = composite_on_background(scaled, color)
            label = f"{record.width} {record.bit_count}bpp {kind}"
            cv2.putText(comp, label, (4, CELL - 6), cv2.FONT_HERSHEY_SIMPLEX, 0.35,
                        (128, 128, 128) if name == "Black" else (0, 0, 0), 1)
            cells.append(comp)
        rows.append(np.hstack(cells))

    if not rows:
        print(f"Error: No entries in {icon_path}")
        return False

    sheet = np.vstack(rows)
    if output_path is None:
        output_path = str(Path(icon_path).with_suffix(".preview.png"))

    cv2.imwrite(output_path, sheet)
    print(f"\nSaved preview sheet to: {output_path}")
    return True


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python tools/preview_ico.py <icon.ico> [output.png]")
        sys.exit(2)

    icon_path = sys.argv[1]
    output_path = sys.argv[2] if len(sys.argv) > 2 else None

    sys.exit(0 if create_preview_sheet(icon_path, output_path) else 1)
