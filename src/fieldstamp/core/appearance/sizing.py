"""Auto-fit font sizing for text drawn inside a field box."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .fonts import Font

__all__ = ["compute_font_size", "split_lines"]

_logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """Split on explicit line breaks; CRLF and CR count as breaks too."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def compute_font_size(
    font: Font,
    lines: Sequence[str],
    box_width: float,
    box_height: float,
    min_size: float,
    max_size: float,
    custom_size: float | None = None,
) -> float:
    """Pick the font size for a block of lines inside a box.

    An explicit *custom_size* is returned unmodified.  Otherwise the block
    is measured at *max_size* and scaled down until the widest line and
    the stacked line height both fit, never below *min_size*.  When even
    *min_size* overflows, the floor wins.

    Args:
        font: Font to measure with.
        lines: Text lines of the block (at least one).
        box_width: Field width in PDF points.
        box_height: Field height in PDF points.
        min_size: Legibility floor for this font kind.
        max_size: Ceiling (and starting size) for this font kind.
        custom_size: Size override from the field meta.

    Returns:
        Font size in points.
    """
    if custom_size:
        return custom_size

    widest = max((font.text_width(line, max_size) for line in lines), default=0.0)
    block_height = max(len(lines), 1) * font.height_at_size(max_size)

    scale = 1.0
    if widest > 0:
        scale = min(scale, box_width / widest)
    if block_height > 0:
        scale = min(scale, box_height / block_height)

    size = max(min(max_size * scale, max_size), min_size)
    if max_size * scale < min_size:
        _logger.warning(
            "Text does not fit %.1fx%.1f pt even at %.1f pt, accepting overflow",
            box_width,
            box_height,
            min_size,
        )
    return size
