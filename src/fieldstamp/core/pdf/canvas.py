"""
Draw-call execution against an open pikepdf document.

``FieldCanvas`` is the only place that mutates the document.  It
buffers content operators per page and registers fonts and images once
per document; ``finish`` then writes the buffered content (with the
page's original content wrapped in q/Q so its graphics state cannot
leak into ours) and completes the embedded fonts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NoReturn

from ...errors import PDFError
from .. import require_pikepdf as _require_pikepdf
from ..draw import CheckboxDraw, ImageDraw, RadioDraw, TextDraw
from .content import image_operators, text_operators
from .font_objects import EmbeddedFont
from .geometry import PageGeometry, get_page_geometry
from .widgets import add_checkbox_widget, add_radio_widget, check_unique_name, existing_field_names

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    import pikepdf

    from ..appearance.fonts import Font
    from ..appearance.image import SignatureImage
    from ..draw import DrawCall

__all__ = ["FieldCanvas"]

_logger = logging.getLogger(__name__)


def _unhandled_draw_call(call: NoReturn) -> NoReturn:
    raise AssertionError(f"Unhandled draw call: {call!r}")


class FieldCanvas:
    """Accumulates field drawing for one document.

    Usage::

        canvas = FieldCanvas(pdf)
        geometry = canvas.page_geometry(1)
        canvas.apply(1, calls)
        canvas.finish()
        pdf.save(out)
    """

    def __init__(self, pdf: pikepdf.Pdf) -> None:
        self._pdf = pdf
        self._geometry: dict[int, PageGeometry] = {}
        self._ops: dict[int, list[str]] = {}
        self._fonts: dict[Font, EmbeddedFont] = {}
        self._images: dict[SignatureImage, pikepdf.Object] = {}
        self._resources: dict[tuple[int, int], str] = {}
        self._field_names = existing_field_names(pdf)
        self._finished = False

    @property
    def pdf(self) -> pikepdf.Pdf:
        return self._pdf

    def page_geometry(self, page_number: int) -> PageGeometry:
        """Geometry of a 1-based page (cached).

        Raises:
            PDFError: If the page does not exist.
        """
        geometry = self._geometry.get(page_number)
        if geometry is None:
            geometry = get_page_geometry(self._pdf, page_number)
            self._geometry[page_number] = geometry
        return geometry

    def apply(self, page_number: int, calls: Sequence[DrawCall]) -> None:
        """Execute *calls* on a 1-based page.

        Widget names are checked before anything is drawn, so a rejected
        batch leaves the document untouched.

        Raises:
            PDFError: If the canvas is finished, the page does not exist,
                or a widget name is already taken.
        """
        if self._finished:
            raise PDFError("Canvas is already finished")
        geometry = self.page_geometry(page_number)
        self._reserve_names(calls)

        page = self._pdf.pages[page_number - 1]
        ops = self._ops.setdefault(page_number, [])
        ox, oy = geometry.origin_x, geometry.origin_y

        for call in calls:
            match call:
                case TextDraw():
                    embedded = self._embedded_font(call.font)
                    glyphs = embedded.encode(call.text)
                    if not glyphs:
                        continue
                    name = self._resource_name(page_number, page, embedded.type0, "/Font", "F")
                    ops.append(
                        text_operators(name, call.size, glyphs, call.x + ox, call.y + oy, call.rotation)
                    )
                case ImageDraw():
                    xobject = self._image_xobject(call.image)
                    name = self._resource_name(page_number, page, xobject, "/XObject", "Im")
                    ops.append(
                        image_operators(
                            name, call.x + ox, call.y + oy, call.width, call.height, call.rotation
                        )
                    )
                case CheckboxDraw():
                    add_checkbox_widget(self._pdf, page, call, call.x + ox, call.y + oy)
                case RadioDraw():
                    add_radio_widget(self._pdf, page, call, call.x + ox, call.y + oy)
                case _:
                    _unhandled_draw_call(call)

    def finish(self) -> None:
        """Write buffered page content and complete embedded fonts."""
        if self._finished:
            return
        pikepdf = _require_pikepdf()
        for page_number, ops in sorted(self._ops.items()):
            if not ops:
                continue
            page = self._pdf.pages[page_number - 1]
            page.contents_add(pikepdf.Stream(self._pdf, b"q\n"), prepend=True)
            body = "Q\n" + "\n".join(ops) + "\n"
            page.contents_add(pikepdf.Stream(self._pdf, body.encode("ascii")))
            _logger.debug("Page %d: %d drawing operation(s)", page_number, len(ops))

        for embedded in self._fonts.values():
            embedded.finalize()
        self._finished = True

    # ── Registration ─────────────────────────────────────────────────

    def _reserve_names(self, calls: Iterable[DrawCall]) -> None:
        names = [call.name for call in calls if isinstance(call, (CheckboxDraw, RadioDraw))]
        pending = set(self._field_names)
        for name in names:
            check_unique_name(name, pending)
        self._field_names = pending

    def _embedded_font(self, font: Font) -> EmbeddedFont:
        embedded = self._fonts.get(font)
        if embedded is None:
            embedded = EmbeddedFont(self._pdf, font)
            self._fonts[font] = embedded
        return embedded

    def _image_xobject(self, image: SignatureImage) -> pikepdf.Object:
        xobject = self._images.get(image)
        if xobject is not None:
            return xobject

        pikepdf = _require_pikepdf()
        stream = pikepdf.Stream(self._pdf, b"")
        stream.write(image.samples, filter=pikepdf.Name.FlateDecode)
        stream.Type = pikepdf.Name.XObject
        stream.Subtype = pikepdf.Name.Image
        stream.Width = image.width
        stream.Height = image.height
        stream.ColorSpace = pikepdf.Name.DeviceRGB
        stream.BitsPerComponent = image.bpc

        if image.smask is not None:
            smask = pikepdf.Stream(self._pdf, b"")
            smask.write(image.smask, filter=pikepdf.Name.FlateDecode)
            smask.Type = pikepdf.Name.XObject
            smask.Subtype = pikepdf.Name.Image
            smask.Width = image.width
            smask.Height = image.height
            smask.ColorSpace = pikepdf.Name.DeviceGray
            smask.BitsPerComponent = image.bpc
            stream.SMask = self._pdf.make_indirect(smask)

        xobject = self._pdf.make_indirect(stream)
        self._images[image] = xobject
        return xobject

    def _resource_name(
        self,
        page_number: int,
        page: pikepdf.Page,
        obj: pikepdf.Object,
        res_type: str,
        prefix: str,
    ) -> str:
        """Name under which *obj* is registered in the page's resources."""
        key = (page_number, obj.objgen[0])
        name = self._resources.get(key)
        if name is None:
            pikepdf = _require_pikepdf()
            name = str(page.add_resource(obj, pikepdf.Name(res_type), prefix=prefix))
            self._resources[key] = name
        return name
