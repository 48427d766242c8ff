"""
Script direction detection for field text.

Text containing Hebrew letters or an explicit directional mark is laid
out right-to-left.  The text-drawing layer only knows left-to-right
glyph runs, so RTL text is reversed before drawing.  That is not a
bidi implementation (numbers, punctuation and mixed scripts come out
mirrored); ``shape_for_display`` is the single seam to replace it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

__all__ = [
    "TextDirection",
    "classify",
    "group_direction",
    "is_rtl",
    "shape_for_display",
]


class TextDirection(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


# Hebrew block, LEFT-TO-RIGHT MARK, RIGHT-TO-LEFT MARK
_RTL_PATTERN = re.compile("[\u0590-\u05ff\u200e\u200f]")


def classify(text: str) -> TextDirection:
    """Return RTL if *text* holds any Hebrew code point or directional mark.

    >>> classify("Hello")
    <TextDirection.LTR: 'ltr'>
    >>> classify("שלום")
    <TextDirection.RTL: 'rtl'>
    """
    return TextDirection.RTL if _RTL_PATTERN.search(text) else TextDirection.LTR


def is_rtl(text: str) -> bool:
    return classify(text) is TextDirection.RTL


def group_direction(texts: Iterable[str]) -> TextDirection:
    """Direction for a group of items laid out in one column.

    Any RTL item makes the whole group RTL so boxes line up.
    """
    return TextDirection.RTL if any(is_rtl(t) for t in texts) else TextDirection.LTR


def shape_for_display(text: str) -> str:
    """Return the glyph run to hand to a left-to-right text primitive."""
    if is_rtl(text):
        return text[::-1]
    return text
