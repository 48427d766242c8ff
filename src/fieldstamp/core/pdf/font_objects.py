"""Embedded font construction for drawn field text.

Builds the Type0 font chain a content stream needs to show Identity-H
encoded glyph ids:

  Type0 -> CIDFontType2 -> FontDescriptor -> FontFile2 (TTF subset)
  Type0 -> ToUnicode CMap

The Type0 dictionary is created when a font is first drawn with, so
content streams can reference it; the rest is filled in by
``EmbeddedFont.finalize`` once every glyph the document uses is known.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from .. import require_pikepdf as _require_pikepdf

if TYPE_CHECKING:
    import pikepdf

    from ..appearance.fonts import Font

__all__ = ["EmbeddedFont", "build_tounicode_cmap"]

_logger = logging.getLogger(__name__)

# PDF Reference Table 123: Font flags. Bit 6 (value 32) = Nonsymbolic.
_FONT_FLAGS_NONSYMBOLIC = 32

# Nominal vertical stem width; not derivable from TrueType tables
_DEFAULT_STEM_V = 80

# bfchar entries per block (PDF limit is 100)
_CMAP_BLOCK = 100


def _utf16_hex(text: str) -> str:
    return text.encode("utf-16-be").hex().upper()


def build_tounicode_cmap(mapping: dict[int, str]) -> bytes:
    """Build a ToUnicode CMap for glyph id -> Unicode text."""
    lines = [
        "/CIDInit /ProcSet findresource begin",
        "12 dict begin",
        "begincmap",
        "/CIDSystemInfo << /Registry (Adobe) /Ordering (UCS) /Supplement 0 >> def",
        "/CMapName /Adobe-Identity-UCS def",
        "/CMapType 2 def",
        "1 begincodespacerange",
        "<0000> <FFFF>",
        "endcodespacerange",
    ]
    items = sorted(mapping.items())
    for start in range(0, len(items), _CMAP_BLOCK):
        block = items[start : start + _CMAP_BLOCK]
        lines.append(f"{len(block)} beginbfchar")
        lines.extend(f"<{gid:04X}> <{_utf16_hex(text)}>" for gid, text in block)
        lines.append("endbfchar")
    lines += [
        "endcmap",
        "CMapName currentdict /CMap defineresource pop",
        "end",
        "end",
    ]
    return "\n".join(lines).encode("ascii")


def _subset_font_program(font: Font, gids: list[int]) -> bytes:
    """Subset the TTF to *gids*, keeping glyph ids stable."""
    from fontTools.subset import Options, Subsetter
    from fontTools.ttLib import TTFont, TTLibError

    options = Options()
    options.retain_gids = True
    options.notdef_outline = True
    options.layout_features = []
    options.name_IDs = [0, 1, 2, 3, 4, 5, 6]

    try:
        tt = TTFont(io.BytesIO(font.data))
        try:
            subsetter = Subsetter(options=options)
            subsetter.populate(gids=gids)
            subsetter.subset(tt)
            buf = io.BytesIO()
            tt.save(buf)
        finally:
            tt.close()
    except (TTLibError, KeyError, ValueError, AssertionError) as exc:
        _logger.warning("Cannot subset font %s, embedding it whole: %s", font.name, exc)
        return font.data
    return buf.getvalue()


class EmbeddedFont:
    """One font embedded into one document."""

    def __init__(self, pdf: pikepdf.Pdf, font: Font) -> None:
        pikepdf = _require_pikepdf()
        Dictionary, Name = pikepdf.Dictionary, pikepdf.Name
        self.font = font
        self._pdf = pdf
        self._used: dict[int, str] = {0: ""}
        self.type0 = pdf.make_indirect(
            Dictionary(
                Type=Name.Font,
                Subtype=Name.Type0,
                BaseFont=Name("/" + font.name),
                Encoding=Name("/Identity-H"),
            )
        )

    def encode(self, text: str) -> str:
        """Hex-encode *text* and record its glyphs for the subset."""
        for ch in text:
            gid = self.font.glyph_id(ch)
            if gid and gid not in self._used:
                self._used[gid] = ch
        return self.font.encode(text)

    def finalize(self) -> None:
        """Write descendant font, descriptor, font program and ToUnicode."""
        pikepdf = _require_pikepdf()
        Array, Dictionary, Name = pikepdf.Array, pikepdf.Dictionary, pikepdf.Name
        pdf = self._pdf
        font = self.font
        gids = sorted(self._used)
        scale = 1000 / font.units_per_em

        program = _subset_font_program(font, gids)
        font_file = pikepdf.Stream(pdf, program)
        font_file.Length1 = len(program)

        x0, y0, x1, y1 = font.bbox
        descriptor = pdf.make_indirect(
            Dictionary(
                Type=Name.FontDescriptor,
                FontName=Name("/" + font.name),
                Flags=_FONT_FLAGS_NONSYMBOLIC,
                FontBBox=Array([round(v * scale) for v in (x0, y0, x1, y1)]),
                ItalicAngle=font.italic_angle,
                Ascent=round(font.ascent * scale),
                Descent=round(font.descent * scale),
                CapHeight=round(font.cap_height * scale),
                StemV=_DEFAULT_STEM_V,
                FontFile2=pdf.make_indirect(font_file),
            )
        )

        widths = Array()
        for gid in gids:
            widths.append(gid)
            widths.append(Array([font.glyph_width(gid)]))

        cidfont = pdf.make_indirect(
            Dictionary(
                Type=Name.Font,
                Subtype=Name.CIDFontType2,
                BaseFont=Name("/" + font.name),
                CIDSystemInfo=Dictionary(
                    Registry=pikepdf.String("Adobe"),
                    Ordering=pikepdf.String("Identity"),
                    Supplement=0,
                ),
                FontDescriptor=descriptor,
                DW=1000,
                W=widths,
                CIDToGIDMap=Name.Identity,
            )
        )

        mapping = {gid: ch for gid, ch in self._used.items() if ch}
        tounicode = pdf.make_indirect(pikepdf.Stream(pdf, build_tounicode_cmap(mapping)))

        self.type0.DescendantFonts = Array([cidfont])
        self.type0.ToUnicode = tounicode
        _logger.debug("Embedded font %s with %d glyph(s)", font.name, len(gids))
