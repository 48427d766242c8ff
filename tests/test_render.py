"""Tests for fieldstamp.core.render -- field renderers and dispatch."""

import base64
import io

import pytest
from PIL import Image

from fieldstamp.config import DEFAULT_LAYOUT
from fieldstamp.core.appearance.direction import TextDirection
from fieldstamp.core.draw import CheckboxDraw, ImageDraw, RadioDraw, TextDraw
from fieldstamp.core.fields import Field, FieldType, Signature, parse_option_meta
from fieldstamp.core.pdf.geometry import PageGeometry, compute_field_box
from fieldstamp.core.render import plan_option_rows, render_field
from fieldstamp.errors import FieldMetaError

SHALOM = "שלום"
PAGE = PageGeometry(600, 800)


def _field(field_type=FieldType.TEXT, **overrides):
    base = {
        "id": 1,
        "type": field_type,
        "page": 1,
        "position_x": 10,
        "position_y": 10,
        "width": 50,
        "height": 10,
    }
    base.update(overrides)
    return Field(**base)


def _render(field, fonts, page=PAGE):
    return render_field(field, compute_field_box(field, page), fonts, DEFAULT_LAYOUT)


def _options(*values, field_type=FieldType.CHECKBOX):
    return {
        "type": field_type.value.lower(),
        "values": [{"id": i + 1, "value": v, "checked": False} for i, v in enumerate(values)],
    }


def _png_base64(width, height):
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), (0, 0, 0, 255)).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


# ── text fields ────────────────────────────────────────────────────


def test_text_field_placement(fonts):
    (call,) = _render(_field(custom_text="Hello"), fonts)
    assert isinstance(call, TextDraw)
    assert call.text == "Hello"
    assert call.size == 12
    assert call.x == pytest.approx(60)
    # field spans y 640..720 in PDF space; the single line is centred in it
    assert 640 <= call.y <= 720
    assert call.y == pytest.approx(674)
    assert call.font is fonts.standard


def test_rtl_text_right_aligned(fonts):
    (call,) = _render(_field(custom_text=SHALOM), fonts)
    assert call.text == SHALOM[::-1]
    width = fonts.standard.text_width(SHALOM, call.size)
    assert call.x + width == pytest.approx(360)


def test_multiline_mixed_direction(fonts):
    first, second = _render(_field(custom_text="Hello\n" + SHALOM), fonts)
    assert first.x == pytest.approx(60)
    assert second.x + fonts.standard.text_width(SHALOM, second.size) == pytest.approx(360)
    assert first.y - second.y == pytest.approx(12)


def test_empty_lines_are_not_drawn(fonts):
    calls = _render(_field(custom_text="a\n\nb"), fonts)
    assert [c.text for c in calls] == ["a", "b"]
    assert _render(_field(custom_text=""), fonts) == []


def test_meta_font_size_overrides_auto_fit(fonts):
    f = _field(custom_text="Hello", field_meta={"type": "text", "fontSize": 20})
    (call,) = _render(f, fonts)
    assert call.size == 20


def test_long_text_shrinks_to_floor(fonts):
    (call,) = _render(_field(custom_text="x" * 400), fonts)
    assert call.size == DEFAULT_LAYOUT.min_standard_font_size


@pytest.mark.parametrize(
    "field_type",
    [FieldType.NUMBER, FieldType.DATE, FieldType.EMAIL, FieldType.NAME, FieldType.INITIALS],
    ids=lambda t: t.value,
)
def test_text_like_fields_use_standard_font(fonts, field_type):
    (call,) = _render(_field(field_type, custom_text="42"), fonts)
    assert call.font is fonts.standard


def test_rotated_page_text_is_turned(fonts):
    page = PageGeometry(600, 800, rotation=90)
    (call,) = _render(_field(custom_text="Hello"), fonts, page)
    assert call.rotation == 90
    # display box: x=80, width 400 of an 800 x 600 display page
    box = compute_field_box(_field(), page)
    baseline = box.flip_y(box.y + (box.height - 12) / 2, 12)
    assert (call.x, call.y) == pytest.approx((600 - baseline, 80))


# ── signatures ─────────────────────────────────────────────────────


def test_typed_signature_uses_handwriting_font(fonts):
    f = _field(FieldType.SIGNATURE, signature=Signature(typed_signature="Jane"))
    (call,) = _render(f, fonts)
    assert call.font is fonts.handwriting
    assert call.size == DEFAULT_LAYOUT.handwriting_font_size


def test_typed_signature_shrinks_to_fit(fonts):
    f = _field(FieldType.FREE_SIGNATURE, signature=Signature(typed_signature="J" * 16))
    (call,) = _render(f, fonts)
    # 16 glyphs at 50 pt = 400 pt; box is 300 pt wide
    assert call.size == pytest.approx(37.5)


def test_image_signature_fitted_and_centred(fonts):
    f = _field(FieldType.SIGNATURE, signature=Signature(image_as_base64=_png_base64(100, 50)))
    (call,) = _render(f, fonts)
    assert isinstance(call, ImageDraw)
    assert (call.width, call.height) == (100, 50)
    assert (call.x, call.y) == pytest.approx((160, 655))


def test_large_image_scaled_down(fonts):
    f = _field(FieldType.SIGNATURE, signature=Signature(image_as_base64=_png_base64(600, 160)))
    (call,) = _render(f, fonts)
    # box 300 x 80: both ratios give 0.5
    assert (call.width, call.height) == pytest.approx((300, 80))


def test_image_wins_over_typed_text(fonts):
    sig = Signature(image_as_base64=_png_base64(10, 10), typed_signature="Jane")
    (call,) = _render(_field(FieldType.SIGNATURE, signature=sig), fonts)
    assert isinstance(call, ImageDraw)


def test_missing_signature_draws_nothing(fonts):
    assert _render(_field(FieldType.SIGNATURE), fonts) == []


# ── checkbox / radio ───────────────────────────────────────────────


def test_checkbox_selection_from_custom_text(fonts):
    f = _field(FieldType.CHECKBOX, custom_text="A,C", field_meta=_options("A", "B", "C"))
    boxes = [c for c in _render(f, fonts) if isinstance(c, CheckboxDraw)]
    assert [b.checked for b in boxes] == [True, False, True]
    assert [b.name for b in boxes] == ["checkbox.1.0", "checkbox.1.1", "checkbox.1.2"]


def test_checkbox_rows_stack_down_the_page(fonts):
    f = _field(FieldType.CHECKBOX, field_meta=_options("A", "B", "C"))
    calls = _render(f, fonts)
    boxes = [c for c in calls if isinstance(c, CheckboxDraw)]
    labels = [c for c in calls if isinstance(c, TextDraw)]
    assert [b.y for b in boxes] == pytest.approx([720, 704, 688])
    assert all(b.x == pytest.approx(60) for b in boxes)
    assert all(b.size == DEFAULT_LAYOUT.box_size for b in boxes)
    assert [label.text for label in labels] == ["A", "B", "C"]
    assert all(label.x == pytest.approx(78) for label in labels)


def test_placeholder_row_has_box_but_no_label(fonts):
    f = _field(FieldType.CHECKBOX, field_meta=_options("A", ""))
    calls = _render(f, fonts)
    assert len([c for c in calls if isinstance(c, CheckboxDraw)]) == 2
    assert [c.text for c in calls if isinstance(c, TextDraw)] == ["A"]


def test_placeholder_checkbox_keeps_spacing_and_selection(fonts):
    f = _field(FieldType.CHECKBOX, field_meta=_options("A", ""), custom_text="empty-value-2")
    boxes = [c for c in _render(f, fonts) if isinstance(c, CheckboxDraw)]
    assert [b.checked for b in boxes] == [False, True]
    assert boxes[1].y == pytest.approx(704)


def test_placeholder_radio_keeps_spacing_and_selection(fonts):
    f = _field(
        FieldType.RADIO,
        field_meta=_options("A", "", field_type=FieldType.RADIO),
        custom_text="empty-value-2",
    )
    buttons = [c for c in _render(f, fonts) if isinstance(c, RadioDraw)]
    assert [b.selected for b in buttons] == [False, True]
    assert buttons[1].value == "empty-value-2"
    assert buttons[1].y == pytest.approx(704)


def test_rtl_group_mirrors_layout(fonts):
    f = _field(FieldType.CHECKBOX, field_meta=_options("Yes", SHALOM))
    calls = _render(f, fonts)
    boxes = [c for c in calls if isinstance(c, CheckboxDraw)]
    labels = [c for c in calls if isinstance(c, TextDraw)]
    assert all(b.x == pytest.approx(348) for b in boxes)
    # "Yes" at 12 pt is 18 pt wide and ends label_gap before the box
    assert labels[0].x == pytest.approx(324)
    assert labels[1].text == SHALOM[::-1]


def test_plan_option_rows_direction(fonts):
    f = _field(FieldType.CHECKBOX, field_meta=_options("A", SHALOM))
    items = parse_option_meta(f).values
    direction, rows = plan_option_rows(items, compute_field_box(f, PAGE), fonts.standard, DEFAULT_LAYOUT)
    assert direction is TextDirection.RTL
    assert [r.index for r in rows] == [0, 1]


def test_radio_group_one_button_per_option(fonts):
    f = _field(
        FieldType.RADIO,
        custom_text="B",
        field_meta=_options("A", "B", field_type=FieldType.RADIO),
    )
    buttons = [c for c in _render(f, fonts) if isinstance(c, RadioDraw)]
    assert [b.name for b in buttons] == ["radio.1.0", "radio.1.1"]
    assert [b.value for b in buttons] == ["A", "B"]
    assert [b.selected for b in buttons] == [False, True]


def test_option_field_without_meta_is_fatal(fonts):
    with pytest.raises(FieldMetaError):
        _render(_field(FieldType.CHECKBOX), fonts)


def test_option_field_without_values_draws_nothing(fonts):
    f = _field(FieldType.RADIO, field_meta={"type": "radio"})
    assert _render(f, fonts) == []


@pytest.mark.parametrize("field_type", list(FieldType), ids=lambda t: t.value)
def test_every_field_type_is_dispatched(fonts, field_type):
    meta = None
    if field_type in (FieldType.CHECKBOX, FieldType.RADIO):
        meta = _options("A", field_type=field_type)
    calls = _render(_field(field_type, custom_text="A", field_meta=meta), fonts)
    assert isinstance(calls, list)
