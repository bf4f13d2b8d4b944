"""Build multi-resolution .ico files from a single image."""

from .container import build_icon, read_icon_directory, write_icon
from .encoder import encode_entry
from .errors import (
    IconError,
    InternalInvariantViolation,
    InvalidTargetState,
    MalformedFormatSpec,
    NonSquareFormat,
    SourceNotFound,
    UnreadableSource,
    UnsupportedBitDepth,
    UnsupportedDimension,
)
from .formats import Container, FormatSpec, parse_format_spec, parse_format_specs
from .mask import MaskPolarity, opacity_mask
from .compositor import square_composite
from .pipeline import convert, encode_entries

__version__ = "1.0.0"
