"""Render the label grid to a PNG for checking layout without a display.

Usage: python tools/render_overlay.py <width> <height> [output.png] [--config PATH]

Writes overlay.png by default. Uses the same config resolution as the
overlay itself, so gap, font size and colors match what you would see.
"""

import sys
from pathlib import Path

from vencoord.config import load_config
from vencoord.labels import encode
from vencoord.ui.overlay import get_overlay_bytes

args = sys.argv[1:]
config_path = None
if "--config" in args:
    idx = args.index("--config")
    config_path = args[idx + 1]
    del args[idx:idx + 2]

if len(args) < 2:
    print("Usage: render_overlay.py <width> <height> [output.png] [--config PATH]", flush=True)
    sys.exit(1)

width, height = int(args[0]), int(args[1])
output = Path(args[2]) if len(args) > 2 else Path("overlay.png")

config = load_config(config_path)
output.write_bytes(get_overlay_bytes(width, height, config))

cols, rows = width // config.gap, height // config.gap
last = encode(cols - 1, rows - 1) if cols and rows else "-"
print(f"Wrote {output}: {cols} x {rows} cells, last label {last}", flush=True)
