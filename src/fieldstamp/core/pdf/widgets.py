"""
Interactive checkbox and radio widgets.

Each widget is a terminal AcroForm field with its own on/off appearance
streams.  Radio buttons follow the one-group-per-option model: every
option row is a separate radio field with a single kid whose on-state
is ``/0`` and whose export value is carried in ``/Opt``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...errors import PDFError
from .. import require_pikepdf as _require_pikepdf
from .content import checkbox_appearance, radio_appearance
from .rotation import rotated_bbox, rotation_matrix

if TYPE_CHECKING:
    import pikepdf

    from ..draw import CheckboxDraw, RadioDraw

__all__ = [
    "ANNOT_FLAG_PRINT",
    "FIELD_FLAG_NO_TOGGLE_TO_OFF",
    "FIELD_FLAG_RADIO",
    "add_checkbox_widget",
    "add_radio_widget",
    "check_unique_name",
    "existing_field_names",
]

_logger = logging.getLogger(__name__)

# PDF Reference 1.7, Table 165: Annotation flags
ANNOT_FLAG_PRINT = 4

# PDF Reference 1.7, Table 226: Field flags specific to button fields
FIELD_FLAG_NO_TOGGLE_TO_OFF = 1 << 14
FIELD_FLAG_RADIO = 1 << 15

_RADIO_ON_STATE = "/0"


def _acroform_fields(pdf: pikepdf.Pdf) -> pikepdf.Array:
    pikepdf = _require_pikepdf()
    root = pdf.Root
    if "/AcroForm" not in root:
        root.AcroForm = pdf.make_indirect(pikepdf.Dictionary(Fields=pikepdf.Array()))
    acroform = root.AcroForm
    if "/Fields" not in acroform:
        acroform.Fields = pikepdf.Array()
    return acroform.Fields


def existing_field_names(pdf: pikepdf.Pdf) -> set[str]:
    """Fully qualified names of the form fields already in *pdf*."""
    names: set[str] = set()
    acroform = pdf.Root.get("/AcroForm")
    if acroform is None:
        return names

    stack = [(field, "") for field in acroform.get("/Fields", [])]
    visited = 0
    while stack and visited < 10_000:
        field, prefix = stack.pop()
        visited += 1
        partial = field.get("/T")
        name = prefix
        if partial is not None:
            name = f"{prefix}.{partial}" if prefix else str(partial)
            names.add(name)
        for kid in field.get("/Kids", []):
            stack.append((kid, name))
    return names


def _appearance_xobject(
    pdf: pikepdf.Pdf,
    data: bytes,
    size: float,
    rotation: int,
) -> pikepdf.Object:
    pikepdf = _require_pikepdf()
    stream = pikepdf.Stream(pdf, data)
    stream.Type = pikepdf.Name.XObject
    stream.Subtype = pikepdf.Name.Form
    stream.BBox = pikepdf.Array([0, 0, size, size])
    stream.Matrix = pikepdf.Array([*rotation_matrix(rotation), 0, 0])
    stream.Resources = pikepdf.Dictionary()
    return pdf.make_indirect(stream)


def _widget_dict(
    pdf: pikepdf.Pdf,
    page: pikepdf.Page,
    rect: tuple[float, float, float, float],
    rotation: int,
    on_state: str,
    on_data: bytes,
    off_data: bytes,
    size: float,
    active: bool,
) -> pikepdf.Dictionary:
    pikepdf = _require_pikepdf()
    appearances = pikepdf.Dictionary(
        {
            on_state: _appearance_xobject(pdf, on_data, size, rotation),
            "/Off": _appearance_xobject(pdf, off_data, size, rotation),
        }
    )
    return pikepdf.Dictionary(
        Type=pikepdf.Name.Annot,
        Subtype=pikepdf.Name.Widget,
        Rect=pikepdf.Array(list(rect)),
        F=ANNOT_FLAG_PRINT,
        P=page.obj,
        MK=pikepdf.Dictionary(
            BC=pikepdf.Array([0, 0, 0]),
            BG=pikepdf.Array([1, 1, 1]),
            R=rotation,
        ),
        AP=pikepdf.Dictionary(N=appearances),
        AS=pikepdf.Name(on_state if active else "/Off"),
    )


def _attach(page: pikepdf.Page, widget: pikepdf.Object) -> None:
    pikepdf = _require_pikepdf()
    if "/Annots" not in page.obj:
        page.obj.Annots = pikepdf.Array()
    page.obj.Annots.append(widget)


def add_checkbox_widget(
    pdf: pikepdf.Pdf,
    page: pikepdf.Page,
    call: CheckboxDraw,
    x: float,
    y: float,
) -> pikepdf.Object:
    """Add a checkbox field whose widget box starts at (x, y).

    ``x``/``y`` are the call's coordinates already shifted by the page
    origin.
    """
    pikepdf = _require_pikepdf()
    rect = rotated_bbox(x, y, call.size, call.size, call.rotation)
    widget = _widget_dict(
        pdf,
        page,
        rect,
        call.rotation,
        "/Yes",
        checkbox_appearance(call.size, True),
        checkbox_appearance(call.size, False),
        call.size,
        call.checked,
    )
    widget.FT = pikepdf.Name.Btn
    widget.T = pikepdf.String(call.name)
    widget.V = pikepdf.Name("/Yes" if call.checked else "/Off")
    widget = pdf.make_indirect(widget)

    _acroform_fields(pdf).append(widget)
    _attach(page, widget)
    _logger.debug("Checkbox %s at %s (checked=%s)", call.name, rect, call.checked)
    return widget


def add_radio_widget(
    pdf: pikepdf.Pdf,
    page: pikepdf.Page,
    call: RadioDraw,
    x: float,
    y: float,
) -> pikepdf.Object:
    """Add a single-option radio group whose button starts at (x, y).

    Returns the parent field.
    """
    pikepdf = _require_pikepdf()
    parent = pdf.make_indirect(
        pikepdf.Dictionary(
            FT=pikepdf.Name.Btn,
            Ff=FIELD_FLAG_RADIO | FIELD_FLAG_NO_TOGGLE_TO_OFF,
            T=pikepdf.String(call.name),
            Opt=pikepdf.Array([pikepdf.String(call.value)]),
            V=pikepdf.Name(_RADIO_ON_STATE if call.selected else "/Off"),
            Kids=pikepdf.Array(),
        )
    )

    rect = rotated_bbox(x, y, call.size, call.size, call.rotation)
    widget = _widget_dict(
        pdf,
        page,
        rect,
        call.rotation,
        _RADIO_ON_STATE,
        radio_appearance(call.size, True),
        radio_appearance(call.size, False),
        call.size,
        call.selected,
    )
    widget.Parent = parent
    widget = pdf.make_indirect(widget)
    parent.Kids.append(widget)

    _acroform_fields(pdf).append(parent)
    _attach(page, widget)
    _logger.debug("Radio %s=%r at %s (selected=%s)", call.name, call.value, rect, call.selected)
    return parent


def check_unique_name(name: str, taken: set[str]) -> None:
    """Reserve *name*, raising if a field with that name already exists.

    Raises:
        PDFError: On a duplicate field name.
    """
    if name in taken:
        raise PDFError(f"Form field {name!r} already exists in the document")
    taken.add(name)
