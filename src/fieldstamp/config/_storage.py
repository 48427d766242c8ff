"""
On-disk config file for Fieldstamp.

``~/.fieldstamp/config.json`` holds font locations and layout
overrides.  Reads never fail (a missing or broken file is an empty
config); writes replace the file atomically with owner-only permissions.
"""

from __future__ import annotations

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "load_config",
    "load_raw_config",
    "save_config",
]

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypedDict, cast

_logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".fieldstamp"
CONFIG_FILE = CONFIG_DIR / "config.json"

_FONT_KEYS = ("handwriting_font", "standard_font")


class ConfigDict(TypedDict, total=False):
    """Known keys of config.json, after type checks."""

    handwriting_font: str
    standard_font: str
    layout: dict[str, float]


def load_raw_config() -> dict[str, object]:
    """Return the config file as parsed, unknown keys included.

    Callers that rewrite the file start from this so keys written by a
    newer version survive.
    """
    try:
        text = CONFIG_FILE.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        _logger.warning("Cannot read config file %s: %s", CONFIG_FILE, e)
        return {}

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        _logger.warning("Config file %s is not valid JSON, ignoring: %s", CONFIG_FILE, e)
        return {}
    if not isinstance(data, dict):
        _logger.warning("Config file %s is not a JSON object, ignoring", CONFIG_FILE)
        return {}
    return cast("dict[str, object]", data)


def _layout_numbers(raw: object) -> dict[str, float]:
    """Numeric entries of the layout object; range checks belong to LayoutConfig."""
    if not isinstance(raw, dict):
        _logger.warning("Config layout must be an object, ignoring")
        return {}
    numbers: dict[str, float] = {}
    for key, val in cast("dict[str, object]", raw).items():
        if isinstance(val, (int, float)) and not isinstance(val, bool):
            numbers[key] = float(val)
        else:
            _logger.warning("Config layout.%s=%r is not a number, ignoring", key, val)
    return numbers


def load_config() -> ConfigDict:
    """Load the config file keeping only known keys of the right type."""
    raw = load_raw_config()
    config: ConfigDict = {}
    for key in _FONT_KEYS:
        val = raw.get(key)
        if isinstance(val, str) and val.strip():
            config[key] = val  # type: ignore[literal-required]  # key from _FONT_KEYS
    if "layout" in raw:
        layout = _layout_numbers(raw["layout"])
        if layout:
            config["layout"] = layout
    return config


def save_config(config: dict[str, object]) -> None:
    """Replace the config file with *config*.

    The new content goes to a 0600 temp file in the same directory,
    which is then renamed over the old file.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True, mode=0o700)
    payload = (json.dumps(config, indent=2, ensure_ascii=False) + "\n").encode("utf-8")

    fd, tmp_name = tempfile.mkstemp(dir=CONFIG_DIR, prefix=".config-", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            if os.name != "nt":
                os.fchmod(f.fileno(), 0o600)
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(CONFIG_FILE)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    _logger.debug("Saved config to %s", CONFIG_FILE)
