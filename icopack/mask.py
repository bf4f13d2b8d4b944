"""
Derive the 1-bit AND mask of an icon entry from a composite's alpha channel.

The alpha channel is turned into an opaque grey image whose brightness is the
complement of alpha (transparent -> white, opaque -> black), then reduced to
a black/white 1-bit image by nearest colour. In BMP output the white palette
entry is index 1, so with the default polarity a set bit means "show the
background", which is how Windows and Pillow's ICO reader interpret the mask.
"""

import enum

import numpy as np
from PIL import Image

from .config import DEFAULT_MASK_POLARITY


class MaskPolarity(enum.Enum):
    TRANSPARENT_SET = "transparent-set"
    OPAQUE_SET = "opaque-set"


def alpha_complement(composite: Image.Image) -> Image.Image:
    """f(alpha) -> (1 - alpha, 1 - alpha, 1 - alpha, 1) for every pixel."""
    alpha = np.asarray(composite.getchannel("A"), dtype=np.uint8)
    inverse = 255 - alpha
    opaque = np.full_like(alpha, 255)
    return Image.fromarray(np.dstack([inverse, inverse, inverse, opaque]), "RGBA")


def opacity_mask(composite: Image.Image, polarity=None) -> Image.Image:
    """Return a mode "1" image, same size as `composite`."""
    polarity = MaskPolarity(polarity or DEFAULT_MASK_POLARITY)

    grey = alpha_complement(composite).convert("L")
    mask = grey.convert("1", dither=Image.Dither.NONE)
    if polarity is MaskPolarity.OPAQUE_SET:
        mask = Image.fromarray(~np.asarray(mask, dtype=bool))
    return mask


def transparent_pixels(mask: Image.Image, polarity=None) -> np.ndarray:
    """Boolean array, True where the mask says the background shows through."""
    polarity = MaskPolarity(polarity or DEFAULT_MASK_POLARITY)
    bits = np.asarray(mask, dtype=bool)
    return bits if polarity is MaskPolarity.TRANSPARENT_SET else ~bits
