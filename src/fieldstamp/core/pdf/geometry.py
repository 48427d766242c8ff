"""
Page geometry and field placement.

Converts a field's percentage rectangle (top-left origin, relative to
the page as displayed) into PDF points, and reads the page size and
rotation the conversion depends on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...errors import PDFError
from .rotation import adjust_position_for_rotation

if TYPE_CHECKING:
    import pikepdf

    from ..fields import Field

__all__ = [
    "FieldBox",
    "PageGeometry",
    "compute_field_box",
    "get_page_geometry",
    "normalize_rotation",
]

_logger = logging.getLogger(__name__)


def normalize_rotation(angle: float) -> int:
    """Round an angle to the nearest multiple of 90 and wrap into [0, 360).

    >>> normalize_rotation(-90)
    270
    >>> normalize_rotation(89.6)
    90
    """
    return int(round(angle / 90) * 90) % 360


@dataclass(frozen=True)
class PageGeometry:
    """Stored page size (MediaBox) and its /Rotate, normalized."""

    width: float
    height: float
    rotation: int = 0
    origin_x: float = 0.0
    origin_y: float = 0.0

    @property
    def is_landscape_rotation(self) -> bool:
        return self.rotation in (90, 270)

    @property
    def display_size(self) -> tuple[float, float]:
        """(width, height) of the page as a viewer shows it."""
        if self.is_landscape_rotation:
            return self.height, self.width
        return self.width, self.height


def _inherited(page_obj: pikepdf.Dictionary, key: str) -> pikepdf.Object | None:
    """Look up a page attribute, walking /Parent for inheritable keys."""
    node: pikepdf.Object | None = page_obj
    seen = 0
    while node is not None and seen < 64:
        value = node.get(key)
        if value is not None:
            return value
        node = node.get("/Parent")
        seen += 1
    return None


def get_page_geometry(pdf: pikepdf.Pdf, page_number: int) -> PageGeometry:
    """Read size and rotation of a 1-based page.

    Raises:
        PDFError: If the page does not exist or has no usable MediaBox.
    """
    total = len(pdf.pages)
    if page_number < 1 or page_number > total:
        raise PDFError(f"Page {page_number} does not exist (document has {total} page(s))")

    page_obj = pdf.pages[page_number - 1].obj

    box = _inherited(page_obj, "/MediaBox")
    if box is None or len(box) != 4:
        raise PDFError(f"Page {page_number} has no valid /MediaBox")
    x0, y0, x1, y1 = (float(v) for v in box)

    rotate_val = _inherited(page_obj, "/Rotate")
    raw_rotation = float(rotate_val) if rotate_val is not None else 0.0
    rotation = normalize_rotation(raw_rotation)
    if rotation != raw_rotation % 360:
        _logger.debug("Page %d: /Rotate %s normalized to %d", page_number, raw_rotation, rotation)

    return PageGeometry(
        width=abs(x1 - x0),
        height=abs(y1 - y0),
        rotation=rotation,
        origin_x=min(x0, x1),
        origin_y=min(y0, y1),
    )


@dataclass(frozen=True)
class FieldBox:
    """A field's rectangle in display-space points.

    ``x``/``y`` are measured from the top-left of the displayed page.
    ``page_width``/``page_height`` are display dimensions.  Vertical
    flipping into PDF space is left to each renderer, which knows the
    height of the element it is placing.
    """

    page_width: float
    page_height: float
    x: float
    y: float
    width: float
    height: float
    rotation: int = 0

    def flip_y(self, top: float, element_height: float) -> float:
        """Bottom-left-origin y of an element whose top edge is at *top*."""
        return self.page_height - (top + element_height)

    def to_draw_point(self, x: float, y: float) -> tuple[float, float]:
        """Map a display-space point (bottom-left origin) for the draw call."""
        if self.rotation == 0:
            return x, y
        return adjust_position_for_rotation(self.page_width, self.page_height, x, y, self.rotation)


def compute_field_box(field: Field, page: PageGeometry) -> FieldBox:
    """Convert a field's percentage rectangle into points.

    Fields are authored against the page as displayed, so for pages
    rotated by 90 or 270 degrees the stored width and height are swapped
    before the percentages are applied.
    """
    page_width, page_height = page.display_size
    return FieldBox(
        page_width=page_width,
        page_height=page_height,
        x=page_width * field.position_x / 100,
        y=page_height * field.position_y / 100,
        width=page_width * field.width / 100,
        height=page_height * field.height / 100,
        rotation=page.rotation,
    )
