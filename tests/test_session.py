"""Tests for the SelectionSession state machine."""

import threading

import pytest

from vencoord.labels import encode
from vencoord.session import CANCEL_KEYSYM, KeyEvent, SelectionSession
from vencoord.state import SessionState


def _char(ch: str) -> KeyEvent:
    return KeyEvent(keysym=ch, text=ch)


ESCAPE = KeyEvent(keysym=CANCEL_KEYSYM)


class TestResolve:
    def test_pending_until_last_character(self):
        session = SelectionSession(cell_size=24)
        label = encode(3, 1)
        for ch in label[:-1]:
            outcome = session.on_key(_char(ch))
            assert outcome.mode == "pending"
            assert not session.is_terminal()
        outcome = session.on_key(_char(label[-1]))
        assert outcome.mode == "resolved"
        assert outcome.cell == (3, 1)
        assert outcome.point == (72, 24)
        assert session.is_terminal()

    def test_scales_by_cell_size(self):
        session = SelectionSession(cell_size=10)
        for ch in encode(52, 7):
            outcome = session.on_key(_char(ch))
        assert outcome.cell == (52, 7)
        assert outcome.point == (520, 70)

    def test_multi_character_event(self):
        session = SelectionSession(cell_size=24)
        outcome = session.on_key(KeyEvent(keysym="d", text="db"))
        assert outcome.mode == "resolved"
        assert outcome.cell == (3, 1)

    def test_trailing_characters_in_one_event_ignored(self):
        session = SelectionSession(cell_size=1)
        outcome = session.on_key(KeyEvent(keysym="a", text="abzzz"))
        assert outcome.cell == (0, 1)


class TestCancel:
    def test_escape_cancels_immediately(self):
        session = SelectionSession(cell_size=24)
        outcome = session.on_key(ESCAPE)
        assert outcome.mode == "cancelled"
        assert outcome.point is None
        assert session.is_terminal()

    def test_escape_after_partial_input(self):
        session = SelectionSession(cell_size=24)
        session.on_key(_char("1"))
        session.on_key(_char("a"))
        assert session.on_key(ESCAPE).mode == "cancelled"

    def test_no_events_processed_after_cancel(self):
        session = SelectionSession(cell_size=24)
        session.on_key(ESCAPE)
        outcome = session.on_key(KeyEvent(keysym="a", text="ab"))
        assert outcome.mode == "cancelled"
        assert session.buffer == ""


class TestBuffer:
    def test_non_printing_keys_ignored(self):
        session = SelectionSession(cell_size=24)
        session.on_key(KeyEvent(keysym="Shift_L"))
        session.on_key(_char("d"))
        session.on_key(KeyEvent(keysym="Control_L", text=""))
        assert session.buffer == "d"
        assert session.on_key(_char("b")).cell == (3, 1)

    def test_buffer_is_append_only(self):
        session = SelectionSession(cell_size=24)
        for ch in "5!":
            session.on_key(_char(ch))
        assert session.buffer == "5!"
        # A bad prefix never goes away, so no later label can match
        for ch in "aa":
            outcome = session.on_key(_char(ch))
        assert outcome.mode == "pending"
        assert session.buffer == "5!aa"

    def test_events_after_resolve_ignored(self):
        session = SelectionSession(cell_size=24)
        session.on_key(KeyEvent(keysym="a", text="aa"))
        outcome = session.on_key(_char("c"))
        assert outcome.cell == (0, 0)
        assert session.buffer == "aa"
        assert session.on_key(ESCAPE).mode == "resolved"


class TestConstruction:
    @pytest.mark.parametrize("size", [0, -5])
    def test_invalid_cell_size(self, size):
        with pytest.raises(ValueError):
            SelectionSession(cell_size=size)

    def test_initial_state_is_pending(self):
        session = SelectionSession(cell_size=24)
        assert session.mode == "pending"
        assert session.outcome.cell is None
        assert session.cell_size == 24

    def test_uses_provided_state(self):
        state = SessionState(buffer="1")
        session = SelectionSession(cell_size=1, initial_state=state)
        assert session.on_key(_char("a")).mode == "pending"
        assert session.on_key(_char("b")).cell == (52, 1)


class TestThreadSafety:
    def test_concurrent_keys_resolve_once(self):
        session = SelectionSession(cell_size=1)
        outcomes = []
        lock = threading.Lock()

        def _press():
            outcome = session.on_key(KeyEvent(keysym="a", text="ab"))
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=_press) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.buffer == "ab"
        assert all(o.cell == (0, 1) for o in outcomes)
