"""
Field renderers: one strategy per field kind.

Each renderer turns a field and its resolved box into draw calls and
touches nothing else, so the same field always yields the same calls.
Coordinates are worked out in display space (the page as the signer
saw it) and passed through ``FieldBox.to_draw_point`` last.

Layout of the text block (signature text and text-like fields)::

    +---------------- field box ----------------+
    |                                           |  <- (height - block) / 2
    | Hello                                     |  line 1, LTR: left edge
    |                                <RTL text> |  line 2, RTL: right edge
    |                                           |
    +-------------------------------------------+

Checkbox / radio groups stack one row per option, ``vertical_spacing``
apart.  LTR groups put the box on the left edge with the label to its
right; RTL groups mirror that, box on the right edge, label to its left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn

from .appearance.direction import TextDirection, group_direction, is_rtl, shape_for_display
from .appearance.fonts import resolve_font
from .appearance.image import decode_signature_image
from .appearance.sizing import compute_font_size, split_lines
from .draw import CheckboxDraw, DrawCall, ImageDraw, RadioDraw, TextDraw
from .fields import FieldType, OptionItem, parse_option_meta, parse_text_meta, selected_values

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config.layout import LayoutConfig
    from .appearance.fonts import Font, FontResources
    from .fields import Field
    from .pdf.geometry import FieldBox

__all__ = [
    "OptionRow",
    "plan_option_rows",
    "render_checkbox_group",
    "render_field",
    "render_radio_group",
    "render_signature",
    "render_text",
]

_logger = logging.getLogger(__name__)


def _unhandled_field_type(value: NoReturn) -> NoReturn:
    raise AssertionError(f"Unhandled field type: {value!r}")


def render_field(
    field: Field,
    box: FieldBox,
    fonts: FontResources,
    layout: LayoutConfig,
) -> list[DrawCall]:
    """Dispatch a field to the renderer for its kind.

    Raises:
        FieldMetaError: If a checkbox/radio field has no valid option list.
        ImageError: If a signature image payload cannot be decoded.
    """
    match field.type:
        case FieldType.SIGNATURE | FieldType.FREE_SIGNATURE:
            return render_signature(field, box, fonts.handwriting, layout)
        case FieldType.CHECKBOX:
            return render_checkbox_group(field, box, fonts.standard, layout)
        case FieldType.RADIO:
            return render_radio_group(field, box, fonts.standard, layout)
        case (
            FieldType.TEXT
            | FieldType.NUMBER
            | FieldType.DATE
            | FieldType.EMAIL
            | FieldType.NAME
            | FieldType.INITIALS
        ):
            return render_text(field, box, resolve_font(field.type, fonts), layout)
        case _:
            _unhandled_field_type(field.type)


# ── Text blocks ──────────────────────────────────────────────────────


def _draw_text_block(
    lines: Sequence[str],
    box: FieldBox,
    font: Font,
    size: float,
) -> list[DrawCall]:
    """Vertically centre *lines* in the box, aligning each by its own direction."""
    line_height = font.height_at_size(size)
    block_top = box.y + (box.height - len(lines) * line_height) / 2
    first_baseline = box.flip_y(block_top, line_height)

    calls: list[DrawCall] = []
    for i, line in enumerate(lines):
        if not line:
            continue
        line_width = font.text_width(line, size)
        x = box.x + box.width - line_width if is_rtl(line) else box.x
        y = first_baseline - i * line_height
        px, py = box.to_draw_point(x, y)
        calls.append(TextDraw(shape_for_display(line), px, py, size, font, box.rotation))
    return calls


def render_text(
    field: Field,
    box: FieldBox,
    font: Font,
    layout: LayoutConfig,
) -> list[DrawCall]:
    """TEXT, NUMBER, DATE, EMAIL, NAME and INITIALS fields."""
    meta = parse_text_meta(field)
    lines = split_lines(field.custom_text)
    min_size, max_size = layout.font_bounds(field.type)
    size = compute_font_size(
        font, lines, box.width, box.height, min_size, max_size, custom_size=meta.font_size
    )
    _logger.debug("Field %s: %d line(s) at %.2f pt", field.id, len(lines), size)
    return _draw_text_block(lines, box, font, size)


# ── Signatures ───────────────────────────────────────────────────────


def render_signature(
    field: Field,
    box: FieldBox,
    font: Font,
    layout: LayoutConfig,
) -> list[DrawCall]:
    """Drawn signature image, or the typed signature text when there is none."""
    signature = field.signature

    if signature is not None and signature.image_as_base64:
        image = decode_signature_image(signature.image_as_base64)
        scale = min(box.width / image.width, box.height / image.height, 1)
        width = image.width * scale
        height = image.height * scale
        left = box.x + (box.width - width) / 2
        top = box.y + (box.height - height) / 2
        x, y = box.to_draw_point(left, box.flip_y(top, height))
        return [ImageDraw(image, x, y, width, height, box.rotation)]

    typed = (signature.typed_signature if signature is not None else None) or ""
    if not typed:
        _logger.debug("Field %s: signature has neither image nor text", field.id)
    lines = split_lines(typed)
    min_size, max_size = layout.font_bounds(field.type)
    size = compute_font_size(font, lines, box.width, box.height, min_size, max_size)
    return _draw_text_block(lines, box, font, size)


# ── Checkbox / radio groups ──────────────────────────────────────────


@dataclass(frozen=True)
class OptionRow:
    """Placement of one option row in display space (bottom-left origin).

    ``y`` is shared by the box and the label baseline.
    """

    index: int
    item: OptionItem
    box_x: float
    label_x: float
    y: float
    label: str


def plan_option_rows(
    items: Sequence[OptionItem],
    box: FieldBox,
    font: Font,
    layout: LayoutConfig,
) -> tuple[TextDirection, list[OptionRow]]:
    """Lay out option rows for a checkbox or radio group.

    Returns:
        (group direction, rows in declaration order)
    """
    direction = group_direction(item.value for item in items)
    box_size = layout.box_size

    rows: list[OptionRow] = []
    for index, item in enumerate(items):
        label = item.label
        if direction is TextDirection.RTL:
            box_x = box.x + box.width - box_size
            label_x = box_x - layout.label_gap - font.text_width(label, layout.label_font_size)
        else:
            box_x = box.x
            label_x = box_x + box_size + layout.label_gap
        y = box.page_height - (box.y + index * layout.vertical_spacing)
        rows.append(OptionRow(index, item, box_x, label_x, y, label))
    return direction, rows


def _label_call(row: OptionRow, box: FieldBox, font: Font, layout: LayoutConfig) -> list[DrawCall]:
    if not row.label:
        return []
    x, y = box.to_draw_point(row.label_x, row.y)
    return [
        TextDraw(shape_for_display(row.label), x, y, layout.label_font_size, font, box.rotation)
    ]


def render_checkbox_group(
    field: Field,
    box: FieldBox,
    font: Font,
    layout: LayoutConfig,
) -> list[DrawCall]:
    """One checkbox widget plus label per option.

    Raises:
        FieldMetaError: If the option list is missing or malformed.
    """
    meta = parse_option_meta(field)
    selected = selected_values(field)
    _, rows = plan_option_rows(meta.values, box, font, layout)

    calls: list[DrawCall] = []
    for row in rows:
        calls.extend(_label_call(row, box, font, layout))
        x, y = box.to_draw_point(row.box_x, row.y)
        calls.append(
            CheckboxDraw(
                name=f"checkbox.{field.id}.{row.index}",
                x=x,
                y=y,
                size=layout.box_size,
                checked=row.item.value in selected,
                rotation=box.rotation,
            )
        )
    return calls


def render_radio_group(
    field: Field,
    box: FieldBox,
    font: Font,
    layout: LayoutConfig,
) -> list[DrawCall]:
    """One radio button plus label per option.

    Raises:
        FieldMetaError: If the option list is missing or malformed.
    """
    meta = parse_option_meta(field)
    selected = selected_values(field)
    _, rows = plan_option_rows(meta.values, box, font, layout)

    calls: list[DrawCall] = []
    for row in rows:
        calls.extend(_label_call(row, box, font, layout))
        x, y = box.to_draw_point(row.box_x, row.y)
        calls.append(
            RadioDraw(
                name=f"radio.{field.id}.{row.index}",
                value=row.item.value,
                x=x,
                y=y,
                size=layout.box_size,
                selected=row.item.value in selected,
                rotation=box.rotation,
            )
        )
    return calls
