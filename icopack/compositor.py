"""Render a source image centred on a square transparent canvas."""

import logging

from PIL import Image

from .config import TRANSPARENT_FILL

log = logging.getLogger(__name__)


def placement(width: int, height: int, size: int):
    """Return (dx, dy, dw, dh) for drawing a width x height image into size x size.

    Aspect ratio is kept and the shorter axis is centred. Integer maths only.
    """
    d = max(width, height)
    dw = max(1, size * width // d)
    dh = max(1, size * height // d)
    dx = size * (d - width) // (2 * d)
    dy = size * (d - height) // (2 * d)
    return dx, dy, dw, dh


def square_composite(source: Image.Image, size: int) -> Image.Image:
    """Letterbox `source` into a size x size RGBA image with transparent padding."""
    src = source if source.mode == "RGBA" else source.convert("RGBA")
    dx, dy, dw, dh = placement(src.width, src.height, size)

    canvas = Image.new("RGBA", (size, size), TRANSPARENT_FILL)
    scaled = src.resize((dw, dh), Image.Resampling.LANCZOS)
    canvas.alpha_composite(scaled, dest=(dx, dy))

    log.debug("Composite %dx%d: source %dx%d drawn at (%d, %d) as %dx%d",
              size, size, src.width, src.height, dx, dy, dw, dh)
    return canvas
