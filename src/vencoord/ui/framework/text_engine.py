"""Centralized font loading for overlay labels.

Labels are laid out on a fixed per-glyph advance, so a monospace face
is preferred. Falls back to Pillow's built-in bitmap font when none of
the known system fonts is installed.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from PIL import ImageDraw, ImageFont

_FONT_PATHS_MONO = [
    "/usr/share/fonts/hack/Hack-Regular.ttf",
    "/usr/share/fonts/truetype/hack/Hack-Regular.ttf",
    "/usr/share/fonts/TTF/Hack-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/System/Library/Fonts/Menlo.ttc",
]


@lru_cache(maxsize=32)
def get_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a monospace font at the given size, with caching."""
    for path in _FONT_PATHS_MONO:
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default()


def draw_advanced_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    x: int,
    y: int,
    advance: int,
    fill: tuple[int, ...],
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
) -> int:
    """Draw text one glyph at a time on a fixed advance.

    Returns the pen x position after the last glyph.
    """
    pen_x = x
    for ch in text:
        draw.text((pen_x, y), ch, fill=fill, font=font)
        pen_x += advance
    return pen_x
