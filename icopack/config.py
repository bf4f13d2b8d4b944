"""Default settings for icon conversion."""

# =============================================================================
# Configuration
# =============================================================================
DEFAULT_FORMATS = "16,32,48,256"   # 16, 32, 48 and 256 at 32bpp, either encoding
ICON_EXTENSION = ".ico"

ALLOWED_DIMENSIONS = (1, 16, 32, 48, 64, 128, 256)
ALLOWED_BIT_DEPTHS = (4, 8, 16, 24, 32)
DEFAULT_BIT_DEPTH = 32

# Canvas fill for letterboxed areas. Alpha is 0, the magenta only shows up
# when debugging a composite with its alpha stripped.
TRANSPARENT_FILL = (255, 0, 255, 0)

# "transparent-set": AND mask bit 1 shows the background (what Windows and
# Pillow's ICO reader expect). "opaque-set" flips it.
DEFAULT_MASK_POLARITY = "transparent-set"
# =============================================================================
