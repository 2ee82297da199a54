"""Selection state model for the overlay.

Tracks whether a selection is still pending, plus the typed input and
the resolved cell once a complete label has been entered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SessionMode = Literal[
    "pending",
    "resolved",
    "cancelled",
]

GridIndex = tuple[int, int]  # (column, row)


@dataclass(frozen=True)
class SessionOutcome:
    """Result of feeding a key to the session."""

    mode: SessionMode = "pending"
    cell: GridIndex | None = None  # decoded (column, row), set when resolved
    point: tuple[int, int] | None = None  # pixel coordinate of the cell origin

    @property
    def is_terminal(self) -> bool:
        return self.mode != "pending"

    def format_point(self) -> str:
        """Coordinate as printed on stdout, e.g. "120, 48"."""
        if self.point is None:
            raise ValueError(f"No coordinate for a {self.mode} outcome")
        x, y = self.point
        return f"{x}, {y}"


@dataclass
class SessionState:
    mode: SessionMode = "pending"

    # Characters typed so far. Append-only while pending.
    buffer: str = ""

    resolved_cell: GridIndex | None = None
    resolved_point: tuple[int, int] | None = None

    def append(self, text: str) -> None:
        self.buffer += text

    def resolve(self, cell: GridIndex, cell_size: int) -> None:
        """Transition to resolved, scaling the cell to pixels."""
        col, row = cell
        self.mode = "resolved"
        self.resolved_cell = cell
        self.resolved_point = (col * cell_size, row * cell_size)

    def cancel(self) -> None:
        self.mode = "cancelled"

    def outcome(self) -> SessionOutcome:
        return SessionOutcome(
            mode=self.mode,
            cell=self.resolved_cell,
            point=self.resolved_point,
        )
