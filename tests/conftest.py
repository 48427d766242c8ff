"""Shared test fixtures for Fieldstamp test suite."""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest

# Synthetic font metrics: every glyph advances 500/1000 em and the line
# height is exactly one em, so widths and heights are easy to predict.
UNITS_PER_EM = 1000
ADVANCE = 500
ASCENT = 800
DESCENT = -200

_HEBREW = [chr(cp) for cp in range(0x05D0, 0x05EB)]
_ASCII = [chr(cp) for cp in range(0x20, 0x7F)]


def _box_glyph():
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((450, 700))
    pen.lineTo((450, 0))
    pen.closePath()
    return pen.glyph()


def _empty_glyph():
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    return TTGlyphPen(None).glyph()


def build_test_font(ps_name: str = "TestSans-Regular") -> bytes:
    """Build a small TrueType font covering ASCII and Hebrew letters."""
    from fontTools.fontBuilder import FontBuilder

    chars = _ASCII + _HEBREW
    glyph_names = [f"uni{ord(ch):04X}" for ch in chars]
    glyph_order = [".notdef", *glyph_names]

    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({ord(ch): name for ch, name in zip(chars, glyph_names)})

    glyphs = {name: _box_glyph() for name in glyph_order}
    glyphs["uni0020"] = _empty_glyph()
    fb.setupGlyf(glyphs)

    metrics = {name: (ADVANCE, 50) for name in glyph_order}
    metrics["uni0020"] = (ADVANCE, 0)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable(
        {"familyName": ps_name.split("-")[0], "styleName": "Regular", "psName": ps_name}
    )
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
        sCapHeight=700,
    )
    fb.setupPost()

    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture(scope="session")
def font_bytes():
    return build_test_font()


@pytest.fixture(scope="session")
def handwriting_font_bytes():
    return build_test_font("TestScript-Regular")


@pytest.fixture(scope="session")
def font(font_bytes):
    from fieldstamp.core.appearance.fonts import Font

    return Font.from_bytes(font_bytes)


@pytest.fixture(scope="session")
def fonts(font_bytes, handwriting_font_bytes):
    from fieldstamp.core.appearance.fonts import load_font_resources

    return load_font_resources(handwriting_font_bytes, font_bytes)


def make_pdf_bytes(
    pages: int = 1,
    size: tuple[float, float] = (600, 800),
    rotate: int | None = None,
) -> bytes:
    """Create a blank PDF using pikepdf."""
    import pikepdf

    pdf = pikepdf.Pdf.new()
    for _ in range(pages):
        pdf.add_blank_page(page_size=size)
        if rotate is not None:
            pdf.pages[-1].obj.Rotate = rotate
    buf = io.BytesIO()
    pdf.save(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes():
    """A single blank 600x800 pt page."""
    return make_pdf_bytes()


@pytest.fixture
def blank_pdf():
    """An open in-memory pikepdf document with one 600x800 pt page."""
    import pikepdf

    pdf = pikepdf.Pdf.new()
    pdf.add_blank_page(page_size=(600, 800))
    yield pdf
    pdf.close()


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Redirect config to a temp directory and clear font env vars."""
    monkeypatch.delenv("FIELDSTAMP_HANDWRITING_FONT", raising=False)
    monkeypatch.delenv("FIELDSTAMP_STANDARD_FONT", raising=False)
    config_file = tmp_path / "config.json"
    with (
        patch("fieldstamp.config._storage.CONFIG_DIR", tmp_path),
        patch("fieldstamp.config._storage.CONFIG_FILE", config_file),
        patch("fieldstamp.config.config.CONFIG_FILE", config_file),
    ):
        yield tmp_path, config_file


@pytest.fixture
def make_pdf():
    """Factory for blank PDFs with a given page count, size and /Rotate."""
    return make_pdf_bytes
