"""Main entry point for the vencoord label-grid overlay."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Any, TextIO

import yaml
from pydantic import ValidationError

from vencoord.config import OverlayConfig, load_config
from vencoord.session import KeyEvent, SelectionSession
from vencoord.state import SessionOutcome
from vencoord.surface import StubSurface, TkSurface
from vencoord.ui.overlay import render_overlay

logger = logging.getLogger(__name__)

__version__ = "0.1.0"


class OverlayController:
    """Orchestrates the overlay surface, label rendering and the selection session."""

    def __init__(
        self,
        config: OverlayConfig,
        surface: Any | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.config = config
        self.session = SelectionSession(cell_size=config.gap)
        self._shutdown = threading.Event()
        self._out = out if out is not None else sys.stdout
        self._reported = False

        # Last size rendered, to skip redundant re-renders
        self._size: tuple[int, int] | None = None

        # Surface (try a real window, fall back to stub)
        self._surface = surface if surface is not None else TkSurface(opacity=config.opacity)

    @property
    def outcome(self) -> SessionOutcome:
        return self.session.outcome

    def start(self) -> None:
        """Open the surface, render the label grid, start listening."""
        logger.info("Starting overlay (gap=%dpx)", self.config.gap)

        if not self._surface.open():
            logger.info("Using stub surface (no display), reading keys from stdin")
            self._surface = StubSurface(stream=sys.stdin)
            self._surface.open()

        width, height = self._surface.size()
        self._render(width, height)

        self._surface.set_key_callback(self._on_key_press)
        self._surface.set_resize_callback(self._on_resize)
        self._surface.set_close_callback(self._on_close)
        self._surface.start_listening()

        logger.info("Overlay running")

    def request_stop(self) -> None:
        """Ask the event loop to exit. Safe from any thread."""
        self._shutdown.set()

    def stop(self) -> None:
        """Clean shutdown."""
        logger.info("Shutting down overlay")
        self._shutdown.set()
        self._surface.close()

    def wait(self) -> None:
        """Block until the session ends or shutdown is requested."""
        try:
            self._surface.run(self._shutdown)
        except KeyboardInterrupt:
            pass

    def _render(self, width: int, height: int) -> None:
        image = render_overlay(width, height, self.config)
        self._surface.set_overlay_image(image)
        self._size = (width, height)
        logger.info(
            "Label grid rendered for %dx%d (%d x %d cells)",
            width, height, width // self.config.gap, height // self.config.gap,
        )

    def _on_resize(self, width: int, height: int) -> None:
        if self._size == (width, height):
            return
        self._render(width, height)

    def _on_key_press(self, event: KeyEvent) -> None:
        """Handle a key press event from the surface."""
        if self._shutdown.is_set():
            return

        outcome = self.session.on_key(event)
        logger.debug("Key %s (%r): %s", event.keysym, event.text, outcome.mode)

        if outcome.mode == "resolved":
            self._report(outcome)
            self._shutdown.set()
        elif outcome.mode == "cancelled":
            self._shutdown.set()

    def _report(self, outcome: SessionOutcome) -> None:
        """Write the resolved coordinate to stdout, once."""
        if self._reported:
            return
        self._reported = True
        self._out.write(outcome.format_point() + "\n")
        self._out.flush()

    def _on_close(self) -> None:
        logger.info("Overlay surface closed")
        self._shutdown.set()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vencoord",
        description="Overlay a labelled grid and print the coordinate of the typed label.",
    )
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--gap", type=int, help="Cell size in pixels (overrides config)")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Do not open a window; read keys from stdin",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
        if args.gap is not None:
            config = OverlayConfig(**{**config.model_dump(), "gap": args.gap})
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    logging.getLogger().setLevel(config.logging_level)
    logger.debug("vencoord v%s", __version__)

    surface = StubSurface(stream=sys.stdin) if args.headless else None
    controller = OverlayController(config, surface=surface)

    # Handle signals for clean shutdown
    def _signal_handler(sig: int, frame: Any) -> None:
        logger.info("Received signal %d, shutting down", sig)
        controller.request_stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    controller.start()
    controller.wait()
    controller.stop()


if __name__ == "__main__":
    main()
