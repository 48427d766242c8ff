"""
Draw calls produced by the field renderers.

Renderers are pure: they turn a field into a list of these records.
Coordinates are final PDF user-space points of the stored page (Y up,
rotation already compensated); ``rotation`` is the counter-clockwise
angle the primitive must be turned by.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .appearance.fonts import Font
    from .appearance.image import SignatureImage

__all__ = ["CheckboxDraw", "DrawCall", "ImageDraw", "RadioDraw", "TextDraw"]


@dataclass(frozen=True)
class TextDraw:
    """One glyph run; ``(x, y)`` is the baseline origin."""

    text: str
    x: float
    y: float
    size: float
    font: Font
    rotation: int = 0


@dataclass(frozen=True)
class ImageDraw:
    image: SignatureImage
    x: float
    y: float
    width: float
    height: float
    rotation: int = 0


@dataclass(frozen=True)
class CheckboxDraw:
    """Interactive checkbox widget, named ``checkbox.<fieldId>.<index>``."""

    name: str
    x: float
    y: float
    size: float
    checked: bool
    rotation: int = 0


@dataclass(frozen=True)
class RadioDraw:
    """Interactive radio button, one group per option row."""

    name: str
    value: str
    x: float
    y: float
    size: float
    selected: bool
    rotation: int = 0


DrawCall = Union[TextDraw, ImageDraw, CheckboxDraw, RadioDraw]
