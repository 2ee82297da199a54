"""Thread-safe selection session driven by key events.

Wraps SessionState with an RLock so the surface's key listener thread
and the controller's main thread see consistent state. Every accepted
keystroke is appended to the buffer and the whole buffer is decoded
again; the session resolves as soon as it holds a complete label.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from vencoord.labels import decode
from vencoord.state import SessionMode, SessionOutcome, SessionState

logger = logging.getLogger(__name__)

CANCEL_KEYSYM = "Escape"


@dataclass(frozen=True)
class KeyEvent:
    """A key press as delivered by the surface."""

    keysym: str  # key name, e.g. "a", "A", "5", "Escape", "Shift_L"
    text: str = ""  # printable characters produced by the press, may be empty

    @property
    def is_cancel(self) -> bool:
        return self.keysym == CANCEL_KEYSYM


class SelectionSession:
    """State machine turning typed labels into a pixel coordinate.

    pending -> resolved | cancelled. Terminal states are final: later
    events are ignored and the terminal outcome is returned again.
    """

    def __init__(self, cell_size: int, initial_state: SessionState | None = None) -> None:
        if cell_size <= 0:
            raise ValueError(f"Cell size must be positive, got {cell_size}")
        self._cell_size = cell_size
        self._state = initial_state or SessionState()
        self._lock = threading.RLock()

    @property
    def mode(self) -> SessionMode:
        with self._lock:
            return self._state.mode

    @property
    def buffer(self) -> str:
        with self._lock:
            return self._state.buffer

    @property
    def outcome(self) -> SessionOutcome:
        with self._lock:
            return self._state.outcome()

    @property
    def cell_size(self) -> int:
        return self._cell_size

    def is_terminal(self) -> bool:
        with self._lock:
            return self._state.mode != "pending"

    def on_key(self, event: KeyEvent) -> SessionOutcome:
        """Feed one key press and return the resulting outcome."""
        with self._lock:
            s = self._state
            if s.mode != "pending":
                return s.outcome()

            if event.is_cancel:
                s.cancel()
                logger.info("Selection cancelled")
                return s.outcome()

            if not event.text:
                # Modifiers and other non-printing keys
                return s.outcome()

            s.append(event.text)
            cell = decode(s.buffer)
            if cell is None:
                logger.debug("No label yet in %r", s.buffer)
                return s.outcome()

            s.resolve(cell, self._cell_size)
            logger.info("Resolved %r to cell %s at %s", s.buffer, cell, s.resolved_point)
            return s.outcome()
