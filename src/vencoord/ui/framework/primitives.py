"""Shared grid geometry and small drawing helpers.

The overlay grid is derived from the surface size: one cell every
``gap`` pixels in each direction, with partial cells at the right and
bottom edges dropped.
"""

from __future__ import annotations

from dataclasses import dataclass

TRANSPARENT = (0, 0, 0, 0)


@dataclass
class Rect:
    """Axis-aligned rectangle."""

    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class GridGeometry:
    """Cell layout for a surface of width x height pixels."""

    width: int
    height: int
    gap: int

    @property
    def columns(self) -> int:
        return self.width // self.gap

    @property
    def rows(self) -> int:
        return self.height // self.gap

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    def cell_origin(self, col: int, row: int) -> tuple[int, int]:
        """Top-left pixel of a cell. Also the coordinate a selection reports."""
        return (col * self.gap, row * self.gap)

    def marker_rect(self, col: int, row: int, size: int) -> Rect:
        x, y = self.cell_origin(col, row)
        return Rect(x, y, size, size)


def with_alpha(color: tuple[int, int, int], alpha: int = 255) -> tuple[int, int, int, int]:
    """RGB to RGBA."""
    return (color[0], color[1], color[2], alpha)
