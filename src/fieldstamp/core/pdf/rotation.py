"""
Coordinate remapping for pages that carry a /Rotate entry.

Fields are laid out as if the page were upright (display space).  A
page with /Rotate stores its content unrotated and the viewer turns it
clockwise on screen, so every point handed to a drawing call has to be
mapped back into the stored page's space.  The drawing call itself is
also told to rotate its glyphs or image counter-clockwise by the same
angle so they read upright once the viewer applies /Rotate.

``page_width`` and ``page_height`` are always display-space dimensions
(already swapped for 90 and 270 degrees).
"""

from __future__ import annotations

__all__ = [
    "adjust_position_for_rotation",
    "apply_page_rotation",
    "rotated_bbox",
    "rotation_matrix",
]

# (cos, sin) for the quarter turns; exact to keep -0.0 out of streams
_QUARTER_TURNS = {0: (1, 0), 90: (0, 1), 180: (-1, 0), 270: (0, -1)}


def adjust_position_for_rotation(
    page_width: float,
    page_height: float,
    x: float,
    y: float,
    rotation: int,
) -> tuple[float, float]:
    """Map a display-space point (bottom-left origin) into stored page space.

    >>> adjust_position_for_rotation(800, 600, 0, 0, 90)
    (600, 0)
    """
    if rotation == 90:
        return page_height - y, x
    if rotation == 270:
        return y, page_width - x
    if rotation == 180:
        return page_width - x, page_height - y
    return x, y


def apply_page_rotation(
    page_width: float,
    page_height: float,
    x: float,
    y: float,
    rotation: int,
) -> tuple[float, float]:
    """Map a stored-space point to where the viewer shows it.

    Inverse of :func:`adjust_position_for_rotation`.
    """
    if rotation == 90:
        return y, page_height - x
    if rotation == 270:
        return page_width - y, x
    if rotation == 180:
        return page_width - x, page_height - y
    return x, y


def rotated_bbox(
    x: float,
    y: float,
    width: float,
    height: float,
    rotation: int,
) -> tuple[float, float, float, float]:
    """Axis-aligned rectangle covered by a box rotated about its origin.

    The box spans ``width`` x ``height`` from ``(x, y)`` and is turned
    counter-clockwise by *rotation* degrees around that origin.

    Returns:
        (x0, y0, x1, y1)
    """
    if rotation == 90:
        return x - height, y, x, y + width
    if rotation == 180:
        return x - width, y - height, x, y
    if rotation == 270:
        return x, y - width, x + height, y
    return x, y, x + width, y + height


def rotation_matrix(rotation: int) -> tuple[int, int, int, int]:
    """(a, b, c, d) of a counter-clockwise quarter-turn matrix.

    >>> rotation_matrix(90)
    (0, 1, -1, 0)
    """
    cos, sin = _QUARTER_TURNS.get(rotation % 360, (1, 0))
    return cos, sin, -sin, cos
