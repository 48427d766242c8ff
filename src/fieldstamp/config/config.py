"""
Configuration management for Fieldstamp.

Stores font locations and layout overrides in ~/.fieldstamp/config.json.
Environment variables take priority over the file for font locations.
"""

from __future__ import annotations

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "get_font_sources",
    "get_layout_config",
    "save_font_sources",
    "save_layout_overrides",
]

import logging
import os
from dataclasses import fields, replace

from ..constants import ENV_HANDWRITING_FONT, ENV_STANDARD_FONT
from ..errors import ConfigError
from ._storage import CONFIG_DIR, CONFIG_FILE, load_config, load_raw_config, save_config
from .layout import DEFAULT_LAYOUT, LayoutConfig

_logger = logging.getLogger(__name__)

_LAYOUT_KEYS = frozenset(f.name for f in fields(LayoutConfig))


# ── Fonts ────────────────────────────────────────────────────────────


def get_font_sources() -> tuple[str, str]:
    """
    Resolve where the handwriting and standard fonts live.

    Priority: env vars > config file.

    Returns:
        (handwriting_uri, standard_uri)

    Raises:
        ConfigError: If either font is not configured anywhere.
    """
    config = load_config()

    handwriting = os.environ.get(ENV_HANDWRITING_FONT, "").strip()
    standard = os.environ.get(ENV_STANDARD_FONT, "").strip()

    if not handwriting:
        handwriting = config.get("handwriting_font", "")
    if not standard:
        standard = config.get("standard_font", "")

    missing = [
        env
        for env, value in ((ENV_HANDWRITING_FONT, handwriting), (ENV_STANDARD_FONT, standard))
        if not value
    ]
    if missing:
        raise ConfigError(
            f"Font location not configured: set {' and '.join(missing)} "
            f"or add it to {CONFIG_FILE}"
        )
    return handwriting, standard


def save_font_sources(handwriting: str | None = None, standard: str | None = None) -> None:
    """Save font locations to the config file, keeping other keys."""
    config = load_raw_config()
    if handwriting:
        config["handwriting_font"] = handwriting
    if standard:
        config["standard_font"] = standard
    save_config(config)


# ── Layout ───────────────────────────────────────────────────────────


def get_layout_config() -> LayoutConfig:
    """
    Build the effective layout: defaults with config file overrides.

    Unknown keys are ignored.  If the overrides together are invalid
    (e.g. a minimum above its maximum), all of them are discarded.
    """
    overrides = load_config().get("layout", {})
    known: dict[str, float] = {}
    for key, value in overrides.items():
        if key not in _LAYOUT_KEYS:
            _logger.warning("Unknown layout setting %r in config, ignoring", key)
            continue
        known[key] = value

    if not known:
        return DEFAULT_LAYOUT
    try:
        return replace(DEFAULT_LAYOUT, **known)
    except ConfigError as e:
        _logger.warning("Invalid layout overrides in config, using defaults: %s", e)
        return DEFAULT_LAYOUT


def save_layout_overrides(**overrides: float) -> LayoutConfig:
    """
    Validate and persist layout overrides.

    Returns:
        The resulting layout.

    Raises:
        ConfigError: If a key is unknown or the result is invalid.
    """
    unknown = sorted(set(overrides) - _LAYOUT_KEYS)
    if unknown:
        raise ConfigError(f"Unknown layout setting(s): {', '.join(unknown)}")

    config = load_raw_config()
    current = config.get("layout")
    merged: dict[str, object] = dict(current) if isinstance(current, dict) else {}
    merged.update(overrides)
    layout = replace(
        DEFAULT_LAYOUT, **{k: v for k, v in merged.items() if k in _LAYOUT_KEYS}
    )
    config["layout"] = merged
    save_config(config)
    return layout
