"""
Convert an image to a multi-size ICO file.

Usage: icopack INPUT [OUTPUT] [-f FORMATS] [--force] [--mask-polarity P] [-v]

Defaults:
  output:  INPUT with an .ico extension; " (1)", " (2)", ... is appended
           when that file already exists (unless --force)
  formats: 16,32,48,256 (32bpp, smallest of PNG/BMP per size)

Format tokens: WIDTH[xHEIGHT] [BPPbpp] [BMP|PNG], comma separated, e.g.
  "16,32,48,64"   "64 24bpp BMP"   "16x16 PNG, 32x32"
"""

import argparse
import logging
import os
import sys

from .config import DEFAULT_FORMATS, DEFAULT_MASK_POLARITY, ICON_EXTENSION
from .errors import IconError, InvalidTargetState
from .mask import MaskPolarity
from .pipeline import convert, load_source


def numbered_path(path: str) -> str:
    """First of path, "name (1).ext", "name (2).ext", ... that does not exist."""
    if not os.path.exists(path):
        return path
    stem, ext = os.path.splitext(path)
    n = 1
    while os.path.exists(f"{stem} ({n}){ext}"):
        n += 1
    return f"{stem} ({n}){ext}"


def confirm_overwrite(path: str) -> bool:
    if not sys.stdin.isatty():
        return False
    answer = input(f"Overwrite {path}? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def resolve_output(input_path: str, output_path: str = None, force: bool = False,
                   confirm=None) -> str:
    """Pick the file to write, honouring --force and asking before clobbering."""
    derived_name = os.path.splitext(os.path.basename(input_path))[0] + ICON_EXTENSION

    if output_path is None or os.path.isdir(output_path):
        folder = output_path if output_path is not None else os.path.dirname(os.path.abspath(input_path))
        target = os.path.join(folder, derived_name)
        return target if force else numbered_path(target)

    if os.path.exists(output_path) and not force:
        if not (confirm or confirm_overwrite)(output_path):
            raise InvalidTargetState(output_path)
    return output_path


def build_parser():
    parser = argparse.ArgumentParser(
        prog="icopack",
        description="Convert an image to a multi-size ICO file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n\n", 2)[2],
    )
    parser.add_argument("input", help="Source image (anything Pillow can open)")
    parser.add_argument("output", nargs="?", help="Output .ico file or folder")
    parser.add_argument("-f", "--formats", default=DEFAULT_FORMATS,
                        help=f"Comma separated format list (default: {DEFAULT_FORMATS})")
    parser.add_argument("--force", action="store_true", help="Overwrite existing output without asking")
    parser.add_argument("--mask-polarity", default=DEFAULT_MASK_POLARITY,
                        choices=[p.value for p in MaskPolarity],
                        help="Meaning of a set AND mask bit (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    def report(entry):
        print(f"  Created {entry.spec} as {entry.kind.upper()}: {len(entry.data)} bytes")

    try:
        source = load_source(args.input)
        output_path = resolve_output(args.input, args.output, args.force)
        print(f"Source: {args.input} ({source.size[0]}x{source.size[1]})")

        entries = convert(source, output_path, args.formats,
                          polarity=args.mask_polarity, on_entry=report)
    except IconError as e:
        print(f"Error: {e}")
        return 1

    print(f"\nCreated: {output_path}")
    print(f"  {len(entries)} entries embedded: {', '.join(str(e.spec) for e in entries)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
