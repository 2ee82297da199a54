"""Overlay surfaces: where the label grid is shown and keys come from.

TkSurface is a fullscreen, topmost, translucent Tk window that grabs
the keyboard. StubSurface has no window at all; it reports a fixed
size and takes keys from a text stream (or from tests via
simulate_key), which is what --headless runs on.

Both expose the same small interface to the controller:
  open() -> bool, size() -> (w, h), set_overlay_image(img),
  set_key_callback(cb), set_resize_callback(cb), set_close_callback(cb),
  start_listening(), run(shutdown_event), close()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, TextIO

from PIL import Image

from vencoord.session import CANCEL_KEYSYM, KeyEvent

logger = logging.getLogger(__name__)

KeyCallback = Callable[[KeyEvent], None]
ResizeCallback = Callable[[int, int], None]
CloseCallback = Callable[[], None]

_POLL_MS = 50  # how often the Tk loop checks the shutdown event


class SurfaceError(Exception):
    pass


class TkSurface:
    """Fullscreen Tk overlay window.

    Tk must be driven from the thread that created it, so run() blocks
    in mainloop and polls the shutdown event with after().
    """

    def __init__(self, opacity: float = 0.8) -> None:
        self._opacity = opacity
        self._root = None
        self._canvas = None
        self._photo = None  # keep a reference or Tk drops the image
        self._key_callback: KeyCallback | None = None
        self._resize_callback: ResizeCallback | None = None
        self._close_callback: CloseCallback | None = None

    @property
    def connected(self) -> bool:
        return self._root is not None

    def open(self) -> bool:
        """Create the window. Returns False when no display is available."""
        try:
            import tkinter as tk
        except ImportError:
            logger.warning("tkinter is not available")
            return False

        try:
            root = tk.Tk()
        except tk.TclError as e:
            logger.warning("Cannot open display: %s", e)
            return False

        root.title("vencoord")
        root.configure(background="black")
        root.attributes("-fullscreen", True)
        root.attributes("-topmost", True)
        try:
            root.attributes("-alpha", self._opacity)
        except tk.TclError:
            logger.debug("Window manager does not support -alpha")

        canvas = tk.Canvas(root, bd=0, highlightthickness=0, background="black")
        canvas.pack(fill="both", expand=True)

        root.bind("<KeyPress>", self._handle_key)
        root.bind("<Configure>", self._handle_configure)
        root.protocol("WM_DELETE_WINDOW", self._handle_close)

        self._root = root
        self._canvas = canvas
        root.update_idletasks()
        logger.info("Tk overlay window opened")
        return True

    def size(self) -> tuple[int, int]:
        if self._root is None:
            raise SurfaceError("Surface not open")
        self._root.update_idletasks()
        width = self._root.winfo_width()
        height = self._root.winfo_height()
        if width <= 1 or height <= 1:
            # Not mapped yet, fall back to the screen size
            width = self._root.winfo_screenwidth()
            height = self._root.winfo_screenheight()
        return width, height

    def set_overlay_image(self, image: Image.Image) -> None:
        if self._canvas is None:
            raise SurfaceError("Surface not open")
        from PIL import ImageTk

        self._photo = ImageTk.PhotoImage(image)
        self._canvas.delete("all")
        self._canvas.create_image(0, 0, image=self._photo, anchor="nw")

    def set_key_callback(self, callback: KeyCallback) -> None:
        self._key_callback = callback

    def set_resize_callback(self, callback: ResizeCallback) -> None:
        self._resize_callback = callback

    def set_close_callback(self, callback: CloseCallback) -> None:
        self._close_callback = callback

    def start_listening(self) -> None:
        """Take keyboard focus so every key press lands on the overlay."""
        if self._root is None:
            raise SurfaceError("Surface not open")
        self._root.focus_force()
        logger.info("Tk key listener started")

    def run(self, shutdown: threading.Event) -> None:
        """Run the Tk event loop until shutdown is set."""
        if self._root is None:
            raise SurfaceError("Surface not open")

        def _poll() -> None:
            if shutdown.is_set():
                self._root.quit()
                return
            self._root.after(_POLL_MS, _poll)

        self._root.after(_POLL_MS, _poll)
        self._root.mainloop()

    def close(self) -> None:
        if self._root is None:
            return
        root, self._root = self._root, None
        self._canvas = None
        self._photo = None
        root.destroy()
        logger.info("Tk overlay window closed")

    def _handle_key(self, event) -> None:
        if self._key_callback is not None:
            self._key_callback(KeyEvent(keysym=event.keysym, text=event.char or ""))

    def _handle_configure(self, event) -> None:
        # <Configure> fires for every child widget too; only the root matters
        if event.widget is not self._root:
            return
        if self._resize_callback is not None:
            self._resize_callback(event.width, event.height)

    def _handle_close(self) -> None:
        if self._close_callback is not None:
            self._close_callback()


def key_event_for_char(ch: str) -> KeyEvent:
    """Map one character read from a text stream to a key event."""
    if ch == "\x1b":
        return KeyEvent(keysym=CANCEL_KEYSYM)
    if ch in ("\n", "\r"):
        return KeyEvent(keysym="Return")
    return KeyEvent(keysym=ch, text=ch)


class StubSurface:
    """Window-less surface for headless runs and tests."""

    def __init__(
        self,
        width: int = 1920,
        height: int = 1080,
        stream: TextIO | None = None,
    ) -> None:
        self._width = width
        self._height = height
        self._stream = stream
        self._key_callback: KeyCallback | None = None
        self._resize_callback: ResizeCallback | None = None
        self._close_callback: CloseCallback | None = None
        self._reader_thread: threading.Thread | None = None
        self.image: Image.Image | None = None

    @property
    def connected(self) -> bool:
        return True

    def open(self) -> bool:
        logger.info("Stub surface opened (%dx%d)", self._width, self._height)
        return True

    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def set_overlay_image(self, image: Image.Image) -> None:
        self.image = image
        logger.debug("Stub: overlay image set (%dx%d)", image.width, image.height)

    def set_key_callback(self, callback: KeyCallback) -> None:
        self._key_callback = callback

    def set_resize_callback(self, callback: ResizeCallback) -> None:
        self._resize_callback = callback

    def set_close_callback(self, callback: CloseCallback) -> None:
        self._close_callback = callback

    def start_listening(self) -> None:
        if self._stream is None:
            logger.info("Stub: key listener started (no-op)")
            return
        self._reader_thread = threading.Thread(
            target=self._read_loop,
            daemon=True,
            name="stub-key-reader",
        )
        self._reader_thread.start()

    def run(self, shutdown: threading.Event) -> None:
        while not shutdown.is_set():
            shutdown.wait(timeout=1.0)

    def close(self) -> None:
        logger.info("Stub surface closed")

    def simulate_key(self, keysym: str, text: str | None = None) -> None:
        """For testing: simulate a key press event."""
        if self._key_callback:
            if text is None:
                text = keysym if len(keysym) == 1 else ""
            self._key_callback(KeyEvent(keysym=keysym, text=text))

    def simulate_resize(self, width: int, height: int) -> None:
        """For testing: simulate the surface being resized."""
        self._width = width
        self._height = height
        if self._resize_callback:
            self._resize_callback(width, height)

    def simulate_close(self) -> None:
        if self._close_callback:
            self._close_callback()

    def _read_loop(self) -> None:
        """Feed characters from the stream as key presses until EOF."""
        for line in self._stream:
            for ch in line:
                if self._key_callback:
                    self._key_callback(key_event_for_char(ch))
        logger.info("Stub: input stream closed")
        if self._close_callback:
            self._close_callback()
