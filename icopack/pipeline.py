"""
Convert a source image into icon entries and write the .ico file.

    specs -> composite set per unique dimension (built once, on first use)
          -> one EncodedEntry per spec, in request order
          -> container writer
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Iterable, List, Optional, Union

from PIL import Image

from .compositor import square_composite
from .config import DEFAULT_FORMATS, DEFAULT_MASK_POLARITY
from .container import write_icon
from .encoder import encode_entry
from .errors import SourceNotFound, UnreadableSource
from .formats import FormatSpec, parse_format_specs
from .mask import MaskPolarity, opacity_mask
from .models import CompositeSet, EncodedEntry

log = logging.getLogger(__name__)


def build_composite_set(source: Image.Image, size: int, polarity=None) -> CompositeSet:
    composite = square_composite(source, size)
    polarity = MaskPolarity(polarity or DEFAULT_MASK_POLARITY)
    return CompositeSet(composite=composite, mask=opacity_mask(composite, polarity), polarity=polarity)


def encode_entries(
    source: Image.Image,
    specs: Iterable[FormatSpec],
    polarity=None,
    on_entry: Optional[Callable[[EncodedEntry], None]] = None,
    composite_factory: Callable[..., CompositeSet] = build_composite_set,
) -> List[EncodedEntry]:
    """Encode every spec in order, sharing one composite set per dimension.

    A dimension's composite set is dropped right after the last spec that
    needs it has been encoded.
    """
    specs = list(specs)
    last_use = {spec.dimension: i for i, spec in enumerate(specs)}

    composites: Dict[int, CompositeSet] = {}
    entries = []
    for i, spec in enumerate(specs):
        size = spec.dimension
        if size not in composites:
            log.debug("Building composite set for %dx%d", size, size)
            composites[size] = composite_factory(source, size, polarity)

        entry = encode_entry(spec, composites[size])
        log.info("%s -> %s, %d bytes", spec, entry.kind.upper(), len(entry.data))
        entries.append(entry)
        if on_entry is not None:
            on_entry(entry)

        if last_use[size] == i:
            del composites[size]

    return entries


def load_source(path) -> Image.Image:
    if not os.path.isfile(path):
        raise SourceNotFound(path)
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, Image.DecompressionBombError) as e:
        raise UnreadableSource(path, e) from e


def convert(
    input_path,
    output_path,
    formats: Union[str, Iterable[str]] = DEFAULT_FORMATS,
    polarity=None,
    on_entry: Optional[Callable[[EncodedEntry], None]] = None,
) -> List[EncodedEntry]:
    """Build an icon from `input_path` (a path or an already loaded image)
    and write it to `output_path`.

    The output file is only opened once every entry is encoded, so a failed
    conversion never leaves a partial icon behind.
    """
    specs = parse_format_specs(formats)
    source = input_path if isinstance(input_path, Image.Image) else load_source(input_path)
    entries = encode_entries(source, specs, polarity=polarity, on_entry=on_entry)
    write_icon(output_path, entries)
    return entries
