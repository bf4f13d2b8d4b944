from __future__ import annotations

import pytest
from PIL import Image, ImageDraw


@pytest.fixture
def wide_image() -> Image.Image:
    """100x60 opaque red banner with a blue disc in the middle."""
    img = Image.new("RGBA", (100, 60), (200, 30, 30, 255))
    ImageDraw.Draw(img).ellipse((35, 15, 65, 45), fill=(20, 40, 220, 255))
    return img


@pytest.fixture
def source_path(tmp_path, wide_image):
    path = tmp_path / "logo.png"
    wide_image.save(path)
    return path
