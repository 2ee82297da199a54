"""YAML config loader with Pydantic validation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "vencoord" / "config.yaml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class OverlayConfig(BaseModel):
    gap: int = Field(default=24, ge=4, le=512)  # cell size in pixels
    font_size: int = Field(default=10, ge=4, le=96)
    glyph_advance: int = Field(default=6, ge=1, le=96)
    label_offset: int = Field(default=10, ge=0, le=512)
    marker_size: int = Field(default=2, ge=0, le=64)
    label_color: tuple[int, int, int] = (255, 0, 0)
    opacity: float = Field(default=0.8, ge=0.1, le=1.0)
    log_level: str = "INFO"

    @field_validator("label_color", mode="before")
    @classmethod
    def parse_color(cls, v: Any) -> tuple[int, int, int]:
        if isinstance(v, (list, tuple)) and len(v) == 3:
            r, g, b = v
            if all(isinstance(c, int) and 0 <= c <= 255 for c in (r, g, b)):
                return (r, g, b)
        raise ValueError(f"Invalid RGB color: {v}. Expected [R, G, B] with 0-255 values.")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> str:
        level = str(v).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Expected one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def load_config(config_path: str | Path | None = None) -> OverlayConfig:
    """Load and validate config from YAML file.

    Resolution order:
    1. Explicit path argument (must exist)
    2. VENCOORD_CONFIG env var (must exist)
    3. ~/.config/vencoord/config.yaml (optional)
    4. Built-in defaults
    """
    if config_path is None:
        env_path = os.environ.get("VENCOORD_CONFIG")
        if env_path:
            config_path = Path(env_path)
        elif DEFAULT_CONFIG_PATH.exists():
            config_path = DEFAULT_CONFIG_PATH
        else:
            return OverlayConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    return OverlayConfig(**raw)
