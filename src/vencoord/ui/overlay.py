"""Label grid rendering for the overlay surface.

Every cell gets a small square marker at its top-left corner and its
label just below it. Everything else is transparent so the desktop
stays visible underneath.
"""

from __future__ import annotations

import io
import logging

from PIL import Image, ImageDraw

from vencoord.config import OverlayConfig
from vencoord.labels import iter_labels

from .framework.primitives import TRANSPARENT, GridGeometry, with_alpha
from .framework.text_engine import draw_advanced_text, get_font

logger = logging.getLogger(__name__)


def render_overlay(width: int, height: int, config: OverlayConfig) -> Image.Image:
    """Render the label grid for a surface of the given size.

    Labels are generated fresh on every call; a resize changes the grid
    dimensions, so nothing is reused between sizes.
    """
    geometry = GridGeometry(width=width, height=height, gap=config.gap)
    img = Image.new("RGBA", (max(width, 1), max(height, 1)), TRANSPARENT)
    draw = ImageDraw.Draw(img)
    font = get_font(config.font_size)
    color = with_alpha(config.label_color)

    for col, row, label in iter_labels(geometry.columns, geometry.rows):
        if config.marker_size > 0:
            rect = geometry.marker_rect(col, row, config.marker_size)
            draw.rectangle(
                [rect.x, rect.y, rect.x + rect.w - 1, rect.y + rect.h - 1],
                fill=color,
            )
        x, y = geometry.cell_origin(col, row)
        draw_advanced_text(
            draw, label, x, y + config.label_offset,
            advance=config.glyph_advance, fill=color, font=font,
        )

    logger.debug(
        "Rendered %dx%d overlay: %d columns x %d rows",
        width, height, geometry.columns, geometry.rows,
    )
    return img


def get_overlay_bytes(width: int, height: int, config: OverlayConfig) -> bytes:
    """Render the overlay and return PNG bytes."""
    img = render_overlay(width, height, config)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
