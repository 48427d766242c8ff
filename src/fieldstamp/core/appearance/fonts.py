"""
TrueType font metrics for text layout and Identity-H encoding.

Fonts arrive as raw bytes (handwriting font for signatures, a Unicode
font for everything else).  Metrics are read once with fontTools and
reused for every field of an export.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...errors import FontError
from ..fields import FieldType, is_signature_field_type

if TYPE_CHECKING:
    from fontTools.ttLib import TTFont

__all__ = [
    "Font",
    "FontResources",
    "load_font_resources",
    "resolve_font",
]

_logger = logging.getLogger(__name__)

# PDF names allow only regular characters; strip the rest from PostScript names
_PS_NAME_STRIP = re.compile(r"[^A-Za-z0-9_.+-]")

# Glyph id of .notdef, used for unmapped characters
_NOTDEF_GID = 0


class Font:
    """Metrics and glyph mapping of one TrueType font.

    Construct with :meth:`from_bytes`.  Instances are immutable and safe
    to share across fields; embedding into a document is done by the
    canvas, which keeps its own record of the glyphs it used.
    """

    def __init__(self, tt: TTFont, data: bytes, name: str) -> None:
        self.name = name
        self.data = data
        self.units_per_em: int = tt["head"].unitsPerEm
        hhea = tt["hhea"]
        self.ascent: int = hhea.ascent
        self.descent: int = hhea.descent
        head = tt["head"]
        self.bbox = (head.xMin, head.yMin, head.xMax, head.yMax)
        post = tt["post"]
        self.italic_angle: float = float(post.italicAngle)
        os2 = tt["OS/2"] if "OS/2" in tt else None
        self.cap_height: int = getattr(os2, "sCapHeight", 0) or self.ascent

        glyph_order = tt.getGlyphOrder()
        hmtx = tt["hmtx"].metrics
        self._advances: list[int] = [hmtx[name][0] for name in glyph_order]
        gid_by_name = {name: gid for gid, name in enumerate(glyph_order)}
        self._cmap: dict[int, int] = {
            cp: gid_by_name[gname] for cp, gname in (tt.getBestCmap() or {}).items()
        }

    @classmethod
    def from_bytes(cls, data: bytes, name: str | None = None) -> Font:
        """Parse a TrueType font program.

        Args:
            data: Raw TTF bytes.
            name: PDF base font name.  Defaults to the font's PostScript name.

        Raises:
            FontError: If the bytes are not a TrueType font with glyf outlines.
        """
        from fontTools.ttLib import TTFont, TTLibError

        try:
            tt = TTFont(io.BytesIO(data))
        except (TTLibError, OSError, AssertionError) as exc:
            raise FontError(f"Cannot parse font: {exc}") from exc

        try:
            if "glyf" not in tt:
                raise FontError("Only TrueType (glyf) fonts can be embedded")
            for table in ("head", "hhea", "hmtx", "post", "cmap"):
                if table not in tt:
                    raise FontError(f"Font is missing the {table!r} table")

            if name is None:
                ps_name = tt["name"].getDebugName(6) if "name" in tt else None
                name = _PS_NAME_STRIP.sub("", ps_name or "") or "EmbeddedFont"
            font = cls(tt, data, name)
        finally:
            tt.close()

        _logger.debug(
            "Loaded font %s (%d glyphs, %d mapped code points)",
            font.name,
            len(font._advances),
            len(font._cmap),
        )
        return font

    @property
    def num_glyphs(self) -> int:
        return len(self._advances)

    def glyph_id(self, char: str) -> int:
        return self._cmap.get(ord(char), _NOTDEF_GID)

    def glyph_width(self, gid: int) -> int:
        """Advance width of a glyph in 1/1000 text-space units."""
        return round(self._advances[gid] * 1000 / self.units_per_em)

    def text_width(self, text: str, size: float) -> float:
        """Rendered width of *text* at *size* points (no kerning)."""
        if not text:
            return 0.0
        units = sum(self._advances[self.glyph_id(ch)] for ch in text)
        return units / self.units_per_em * size

    def height_at_size(self, size: float) -> float:
        """Line height at *size*: ascent to descent."""
        return (self.ascent - self.descent) / self.units_per_em * size

    def encode(self, text: str) -> str:
        """Encode *text* as concatenated 4-hex-digit glyph ids (Identity-H)."""
        return "".join(f"{self.glyph_id(ch):04X}" for ch in text)

    def __repr__(self) -> str:
        return f"Font({self.name!r})"


@dataclass(frozen=True)
class FontResources:
    """The two fonts an export draws with."""

    handwriting: Font
    standard: Font


def load_font_resources(handwriting: bytes, standard: bytes) -> FontResources:
    """Parse both font byte streams once, before the per-field loop."""
    return FontResources(
        handwriting=Font.from_bytes(handwriting),
        standard=Font.from_bytes(standard),
    )


def resolve_font(field_type: FieldType, fonts: FontResources) -> Font:
    """Handwriting font for signature kinds, the standard font for the rest."""
    return fonts.handwriting if is_signature_field_type(field_type) else fonts.standard
