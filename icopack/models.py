from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image

from .formats import FormatSpec
from .mask import MaskPolarity, transparent_pixels


@dataclass(frozen=True)
class CompositeSet:
    """Square composite and AND mask for one dimension, shared by its specs."""

    composite: Image.Image
    mask: Image.Image
    polarity: MaskPolarity = MaskPolarity.TRANSPARENT_SET

    def transparent(self):
        return transparent_pixels(self.mask, self.polarity)


@dataclass(frozen=True)
class EncodedEntry:
    spec: FormatSpec
    data: bytes = field(repr=False)
    bit_count: int
    color_count: int
    width: int
    height: int
    kind: str
