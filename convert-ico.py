#!/usr/bin/env python3
"""
Convert an image to a multi-size ICO for Windows icons.

Usage: python convert-ico.py [input.png [output.ico]] [-f FORMATS] [--force]

With no arguments, converts img/icon.png to img/icon.ico, replacing it.
See `icopack --help` for the format list syntax.
Requires: pip install -e .
"""

import os
import sys

from icopack.cli import main

if __name__ == '__main__':
    args = sys.argv[1:]
    if not args:
        script_dir = os.path.dirname(os.path.abspath(__file__))
        args = [os.path.join(script_dir, 'img', 'icon.png'),
                os.path.join(script_dir, 'img', 'icon.ico'), '--force']
    sys.exit(main(args))
