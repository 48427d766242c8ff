"""Tests for fieldstamp.api -- export entry points and font resolution."""

import io
from unittest.mock import patch

import pikepdf
import pytest

from fieldstamp import api
from fieldstamp.api import (
    fetch_font_resources,
    insert_field_in_pdf,
    insert_fields_in_pdf,
    insert_text_in_pdf,
)
from fieldstamp.config import DEFAULT_LAYOUT
from fieldstamp.core.fields import Field, FieldType
from fieldstamp.core.pdf.canvas import FieldCanvas
from fieldstamp.errors import ConfigError, ExportError, FieldError, FieldMetaError, PDFError

SHALOM = "שלום"


def _field(field_id=1, field_type=FieldType.TEXT, **overrides):
    base = {
        "id": field_id,
        "type": field_type,
        "page": 1,
        "position_x": 10,
        "position_y": 10,
        "width": 50,
        "height": 10,
    }
    base.update(overrides)
    return Field(**base)


def _content(page):
    contents = page.obj.Contents
    if isinstance(contents, pikepdf.Array):
        return b"".join(s.read_bytes() for s in contents)
    return contents.read_bytes()


def _open(data):
    return pikepdf.open(io.BytesIO(data))


# ── insert_fields_in_pdf ───────────────────────────────────────────


def test_insert_fields_mixed_kinds(pdf_bytes, fonts):
    fields = [
        _field(1, custom_text="Hello"),
        _field(
            2,
            FieldType.CHECKBOX,
            position_y=30,
            custom_text="A,C",
            field_meta={
                "type": "checkbox",
                "values": [
                    {"id": 1, "value": "A", "checked": True},
                    {"id": 2, "value": "B", "checked": False},
                    {"id": 3, "value": "C", "checked": True},
                ],
            },
        ),
    ]
    result = insert_fields_in_pdf(pdf_bytes, fields, fonts, DEFAULT_LAYOUT)
    assert result.startswith(b"%PDF-")

    with _open(result) as pdf:
        states = [str(w.AS) for w in pdf.Root.AcroForm.Fields]
        assert states == ["/Yes", "/Off", "/Yes"]
        assert len(pdf.pages[0].Annots) == 3
        assert b"1 0 0 1 60 674 Tm" in _content(pdf.pages[0])


def test_insert_fields_on_rotated_page(make_pdf, fonts):
    data = make_pdf(rotate=90)
    result = insert_fields_in_pdf(data, [_field(custom_text="Hello")], fonts, DEFAULT_LAYOUT)
    with _open(result) as pdf:
        assert b"0 1 -1 0 96 80 Tm" in _content(pdf.pages[0])


def test_insert_fields_second_page(make_pdf, fonts):
    data = make_pdf(pages=2)
    result = insert_fields_in_pdf(data, [_field(page=2, custom_text="x")], fonts, DEFAULT_LAYOUT)
    with _open(result) as pdf:
        assert b"Tj" in _content(pdf.pages[1])
        assert b"Tj" not in _content(pdf.pages[0])


def test_insert_fields_no_fields_returns_document(pdf_bytes, fonts):
    result = insert_fields_in_pdf(pdf_bytes, [], fonts, DEFAULT_LAYOUT)
    with _open(result) as pdf:
        assert len(pdf.pages) == 1


def test_missing_page_aborts_export(pdf_bytes, fonts):
    fields = [_field(1, custom_text="ok"), _field(7, page=3, custom_text="nope")]
    with pytest.raises(ExportError) as exc_info:
        insert_fields_in_pdf(pdf_bytes, fields, fonts, DEFAULT_LAYOUT)
    assert exc_info.value.field_id == 7
    assert isinstance(exc_info.value.__cause__, PDFError)


def test_bad_option_meta_aborts_export(pdf_bytes, fonts):
    fields = [_field(5, FieldType.RADIO, field_meta={"type": "radio", "values": "A,B"})]
    with pytest.raises(ExportError) as exc_info:
        insert_fields_in_pdf(pdf_bytes, fields, fonts, DEFAULT_LAYOUT)
    assert exc_info.value.field_id == 5
    assert isinstance(exc_info.value.__cause__, FieldMetaError)


def test_duplicate_field_ids_abort_export(pdf_bytes, fonts):
    meta = {"type": "checkbox", "values": [{"id": 1, "value": "A", "checked": False}]}
    fields = [
        _field(9, FieldType.CHECKBOX, field_meta=meta),
        _field(9, FieldType.CHECKBOX, field_meta=meta),
    ]
    with pytest.raises(ExportError, match="already exists"):
        insert_fields_in_pdf(pdf_bytes, fields, fonts, DEFAULT_LAYOUT)


def test_not_a_pdf_raises(fonts):
    with pytest.raises(PDFError, match="not a PDF"):
        insert_fields_in_pdf(b"hello world", [], fonts, DEFAULT_LAYOUT)


def test_corrupt_pdf_raises(fonts):
    with pytest.raises(PDFError, match="Cannot open PDF"):
        insert_fields_in_pdf(b"%PDF-1.7\ngarbage", [], fonts, DEFAULT_LAYOUT)


def test_layout_defaults_to_config(pdf_bytes, fonts):
    with patch.object(api, "get_layout_config", return_value=DEFAULT_LAYOUT) as mock_layout:
        insert_fields_in_pdf(pdf_bytes, [], fonts)
    mock_layout.assert_called_once()


# ── insert_field_in_pdf ────────────────────────────────────────────


def test_insert_field_on_open_canvas(blank_pdf, fonts):
    canvas = FieldCanvas(blank_pdf)
    insert_field_in_pdf(canvas, _field(custom_text=SHALOM), fonts)
    canvas.finish()
    # right-aligned: 4 glyphs x 6 pt end at x = 360
    assert b"1 0 0 1 336 674 Tm" in _content(blank_pdf.pages[0])


# ── insert_text_in_pdf ─────────────────────────────────────────────


def test_insert_text_right_aligned(pdf_bytes, fonts):
    result = insert_text_in_pdf(
        pdf_bytes, "Hi", 100, 50, fonts=fonts, use_handwriting_font=False
    )
    with _open(result) as pdf:
        content = _content(pdf.pages[0])
    # width 2 x 7.5 = 15; baseline 800 - 50 - (64 + 7.5) / 2
    assert b"/F" in content
    assert b" 15 Tf" in content
    assert b"1 0 0 1 335 714.25 Tm" in content


def test_insert_text_handwriting_default_size(pdf_bytes, fonts):
    result = insert_text_in_pdf(pdf_bytes, "Jane", 0, 0, fonts=fonts)
    with _open(result) as pdf:
        assert b" 50 Tf" in _content(pdf.pages[0])


def test_insert_text_custom_size(pdf_bytes, fonts):
    result = insert_text_in_pdf(pdf_bytes, "Jane", 0, 0, fonts=fonts, custom_font_size=22)
    with _open(result) as pdf:
        assert b" 22 Tf" in _content(pdf.pages[0])


@pytest.mark.parametrize("size", [0, -12, 1000], ids=["zero", "negative", "too-large"])
def test_insert_text_rejects_bad_size(pdf_bytes, fonts, size):
    with pytest.raises(FieldError, match="Font size"):
        insert_text_in_pdf(pdf_bytes, "Jane", 0, 0, fonts=fonts, custom_font_size=size)


def test_insert_text_missing_page(pdf_bytes, fonts):
    with pytest.raises(PDFError, match="Page 2 does not exist"):
        insert_text_in_pdf(pdf_bytes, "x", 0, 0, page=1, fonts=fonts)


# ── fetch_font_resources ───────────────────────────────────────────


def test_fetch_font_resources_explicit_paths(tmp_path, font_bytes, handwriting_font_bytes):
    hw = tmp_path / "script.ttf"
    std = tmp_path / "sans.ttf"
    hw.write_bytes(handwriting_font_bytes)
    std.write_bytes(font_bytes)

    fonts = fetch_font_resources(str(hw), std.as_uri())
    assert fonts.handwriting.name == "TestScript-Regular"
    assert fonts.standard.name == "TestSans-Regular"


def test_fetch_font_resources_shared_uri_fetched_once(font_bytes):
    with patch.object(api, "fetch_bytes", return_value=font_bytes) as mock_fetch:
        fonts = fetch_font_resources("https://cdn.example.com/f.ttf", "https://cdn.example.com/f.ttf")
    mock_fetch.assert_called_once()
    assert fonts.handwriting.name == fonts.standard.name


def test_fetch_font_resources_from_env(config_dir, monkeypatch, tmp_path, font_bytes):
    path = tmp_path / "f.ttf"
    path.write_bytes(font_bytes)
    monkeypatch.setenv("FIELDSTAMP_HANDWRITING_FONT", str(path))
    monkeypatch.setenv("FIELDSTAMP_STANDARD_FONT", str(path))
    fonts = fetch_font_resources()
    assert fonts.standard.units_per_em == 1000


def test_fetch_font_resources_unconfigured(config_dir):
    with pytest.raises(ConfigError, match="FIELDSTAMP_HANDWRITING_FONT"):
        fetch_font_resources()
