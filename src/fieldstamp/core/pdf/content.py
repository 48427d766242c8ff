"""
Content stream operators for field drawing.

Pure string builders: the canvas decides where the operators go, these
only decide what they say.  Every primitive is wrapped in its own q/Q
pair so it cannot leak graphics state into the page.
"""

from __future__ import annotations

from .rotation import rotation_matrix

__all__ = [
    "checkbox_appearance",
    "format_number",
    "image_operators",
    "radio_appearance",
    "text_operators",
]

# Cubic Bezier control distance for a quarter circle
_KAPPA = 0.5523

_BORDER_WIDTH = 1.0


def format_number(value: float) -> str:
    """Compact PDF number: at most 3 decimals, no trailing zeros.

    >>> format_number(12.5)
    '12.5'
    >>> format_number(-0.0001)
    '0'
    """
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _nums(*values: float) -> str:
    return " ".join(format_number(v) for v in values)


def text_operators(
    font_name: str,
    size: float,
    hex_glyphs: str,
    x: float,
    y: float,
    rotation: int = 0,
) -> str:
    """Show Identity-H glyphs with the baseline origin at (x, y)."""
    a, b, c, d = rotation_matrix(rotation)
    return (
        "q\nBT\n0 g\n"
        f"{font_name} {format_number(size)} Tf\n"
        f"{_nums(a, b, c, d, x, y)} Tm\n"
        f"<{hex_glyphs}> Tj\n"
        "ET\nQ"
    )


def image_operators(
    image_name: str,
    x: float,
    y: float,
    width: float,
    height: float,
    rotation: int = 0,
) -> str:
    """Paint an image XObject into a (rotated) width x height box at (x, y)."""
    a, b, c, d = rotation_matrix(rotation)
    return (
        f"q\n{_nums(width * a, width * b, height * c, height * d, x, y)} cm\n"
        f"{image_name} Do\nQ"
    )


def _square(size: float) -> str:
    inset = _BORDER_WIDTH / 2
    return (
        f"0 G {format_number(_BORDER_WIDTH)} w\n"
        f"{_nums(inset, inset, size - _BORDER_WIDTH, size - _BORDER_WIDTH)} re S"
    )


def checkbox_appearance(size: float, checked: bool) -> bytes:
    """Square border, plus a check mark when *checked*."""
    parts = ["q", _square(size)]
    if checked:
        parts += [
            f"{format_number(size * 0.12)} w 1 J 1 j",
            f"{_nums(size * 0.2, size * 0.52)} m",
            f"{_nums(size * 0.42, size * 0.25)} l",
            f"{_nums(size * 0.8, size * 0.78)} l S",
        ]
    parts.append("Q")
    return "\n".join(parts).encode("ascii")


def _circle(cx: float, cy: float, r: float) -> str:
    k = r * _KAPPA
    return "\n".join(
        [
            f"{_nums(cx + r, cy)} m",
            f"{_nums(cx + r, cy + k, cx + k, cy + r, cx, cy + r)} c",
            f"{_nums(cx - k, cy + r, cx - r, cy + k, cx - r, cy)} c",
            f"{_nums(cx - r, cy - k, cx - k, cy - r, cx, cy - r)} c",
            f"{_nums(cx + k, cy - r, cx + r, cy - k, cx + r, cy)} c",
        ]
    )


def radio_appearance(size: float, selected: bool) -> bytes:
    """Circle border, plus a filled dot when *selected*."""
    centre = size / 2
    parts = [
        "q",
        f"0 G {format_number(_BORDER_WIDTH)} w",
        _circle(centre, centre, centre - _BORDER_WIDTH / 2),
        "S",
    ]
    if selected:
        parts += ["0 g", _circle(centre, centre, size * 0.25), "f"]
    parts.append("Q")
    return "\n".join(parts).encode("ascii")
