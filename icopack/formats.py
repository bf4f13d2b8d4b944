"""
Parse icon format descriptors such as "16", "32x32", "64 24bpp BMP".

Grammar (after trimming):  WIDTH[xHEIGHT] [BPPbpp] [BMP|PNG]
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable, List, Union

from .config import ALLOWED_BIT_DEPTHS, ALLOWED_DIMENSIONS, DEFAULT_BIT_DEPTH
from .errors import (
    MalformedFormatSpec,
    NonSquareFormat,
    UnsupportedBitDepth,
    UnsupportedDimension,
)


class Container(enum.Enum):
    ANY = "Any"
    BMP = "BMP"
    PNG = "PNG"

    @property
    def allows_png(self) -> bool:
        return self in (Container.ANY, Container.PNG)

    @property
    def allows_bmp(self) -> bool:
        return self in (Container.ANY, Container.BMP)


_TOKEN_RE = re.compile(
    r"^(?P<width>[0-9]+)(?:x(?P<height>[0-9]+))?"
    r"(?:\s+(?P<bpp>[0-9]+)bpp)?"
    r"(?:\s+(?P<type>BMP|PNG))?$"
)


@dataclass(frozen=True)
class FormatSpec:
    dimension: int
    bit_depth: int = DEFAULT_BIT_DEPTH
    container: Container = Container.ANY

    def __str__(self):
        text = f"{self.dimension}x{self.dimension} {self.bit_depth}bpp"
        if self.container is not Container.ANY:
            text += f" {self.container.value}"
        return text


def parse_format_spec(token: str) -> FormatSpec:
    """Parse and validate a single format token."""
    text = token.strip()
    match = _TOKEN_RE.match(text)
    if match is None:
        raise MalformedFormatSpec(token)

    width = int(match.group("width"))
    height = int(match.group("height")) if match.group("height") else width
    if width != height:
        raise NonSquareFormat(token)
    if width not in ALLOWED_DIMENSIONS:
        raise UnsupportedDimension(token)

    bpp = int(match.group("bpp")) if match.group("bpp") else DEFAULT_BIT_DEPTH
    if bpp not in ALLOWED_BIT_DEPTHS:
        raise UnsupportedBitDepth(token)

    container = Container(match.group("type")) if match.group("type") else Container.ANY
    return FormatSpec(dimension=width, bit_depth=bpp, container=container)


def parse_format_specs(formats: Union[str, Iterable[str]]) -> List[FormatSpec]:
    """Parse a comma separated string (or already split tokens), keeping order."""
    tokens = formats.split(",") if isinstance(formats, str) else list(formats)
    return [parse_format_spec(token) for token in tokens]
