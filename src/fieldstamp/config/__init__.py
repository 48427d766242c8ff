"""
Configuration: font locations and shared layout constants.

Import from this package directly instead of the individual submodules.
"""

from __future__ import annotations

from .config import (
    CONFIG_FILE,
    get_font_sources,
    get_layout_config,
    save_font_sources,
    save_layout_overrides,
)
from .layout import DEFAULT_LAYOUT, LayoutConfig

__all__ = [
    "CONFIG_FILE",
    "DEFAULT_LAYOUT",
    "LayoutConfig",
    "get_font_sources",
    "get_layout_config",
    "save_font_sources",
    "save_layout_overrides",
]
