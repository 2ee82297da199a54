"""Tests for the stub surface and stream key mapping."""

import io
import threading

from PIL import Image

from vencoord.session import CANCEL_KEYSYM, KeyEvent
from vencoord.surface import StubSurface, key_event_for_char


class TestKeyEventForChar:
    def test_printable(self):
        assert key_event_for_char("a") == KeyEvent(keysym="a", text="a")
        assert key_event_for_char("7") == KeyEvent(keysym="7", text="7")

    def test_escape_cancels(self):
        event = key_event_for_char("\x1b")
        assert event.keysym == CANCEL_KEYSYM
        assert event.is_cancel

    def test_newline_has_no_text(self):
        assert key_event_for_char("\n").text == ""
        assert key_event_for_char("\r").text == ""


class TestStubSurface:
    def test_reports_size(self):
        surface = StubSurface(width=640, height=480)
        assert surface.open()
        assert surface.size() == (640, 480)

    def test_keeps_overlay_image(self):
        surface = StubSurface()
        img = Image.new("RGBA", (4, 4))
        surface.set_overlay_image(img)
        assert surface.image is img

    def test_simulate_key(self):
        surface = StubSurface()
        events = []
        surface.set_key_callback(events.append)
        surface.simulate_key("a")
        surface.simulate_key("Escape")
        surface.simulate_key("Shift_L")
        assert events == [
            KeyEvent(keysym="a", text="a"),
            KeyEvent(keysym="Escape", text=""),
            KeyEvent(keysym="Shift_L", text=""),
        ]

    def test_simulate_resize(self):
        surface = StubSurface(width=100, height=100)
        sizes = []
        surface.set_resize_callback(lambda w, h: sizes.append((w, h)))
        surface.simulate_resize(200, 50)
        assert sizes == [(200, 50)]
        assert surface.size() == (200, 50)

    def test_stream_feeds_keys_then_closes(self):
        surface = StubSurface(stream=io.StringIO("1a\nb"))
        events = []
        closed = threading.Event()
        surface.set_key_callback(events.append)
        surface.set_close_callback(closed.set)
        surface.start_listening()
        assert closed.wait(timeout=5.0)
        assert [e.text for e in events] == ["1", "a", "", "b"]

    def test_run_returns_on_shutdown(self):
        surface = StubSurface()
        shutdown = threading.Event()
        shutdown.set()
        surface.run(shutdown)
