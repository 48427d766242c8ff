"""High-level API for placing fields into PDF documents.

Provides :func:`insert_fields_in_pdf` for a whole export and
:func:`insert_text_in_pdf` for stamping a single line of text.  Font
programs are resolved from config and fetched by
:func:`fetch_font_resources`.

For lower-level control, open the document with pikepdf yourself and
drive a :class:`~fieldstamp.core.pdf.canvas.FieldCanvas` with
:func:`insert_field_in_pdf`.
"""

from __future__ import annotations

__all__ = [
    "fetch_font_bytes",
    "fetch_font_resources",
    "insert_field_in_pdf",
    "insert_fields_in_pdf",
    "insert_text_in_pdf",
]

import io
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from .config import DEFAULT_LAYOUT, get_font_sources, get_layout_config
from .constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_FONT_FETCH,
    MAX_FONT_SIZE,
    PDF_MAGIC,
    STAMP_BOX_HEIGHT,
    STAMP_BOX_WIDTH,
    STAMP_HANDWRITING_FONT_SIZE,
    STAMP_STANDARD_FONT_SIZE,
)
from .core import require_pikepdf as _require_pikepdf
from .core.appearance.direction import shape_for_display
from .core.appearance.fonts import FontResources, load_font_resources
from .core.draw import TextDraw
from .core.pdf.canvas import FieldCanvas
from .core.pdf.geometry import FieldBox, compute_field_box
from .core.render import render_field
from .errors import ExportError, FieldError, FieldStampError, PDFError
from .network import fetch_bytes

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    import pikepdf

    from .config import LayoutConfig
    from .core.fields import Field

_logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------


def fetch_font_bytes(
    uri: str,
    *,
    timeout: int = DEFAULT_TIMEOUT_FONT_FETCH,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> bytes:
    """Fetch one font program from a path, ``file:`` URI or HTTP(S) URL.

    Raises:
        FontError: If the font cannot be read or downloaded.
    """
    data = fetch_bytes(uri, timeout=timeout, max_retries=max_retries)
    _logger.debug("Fetched font %s (%d bytes)", uri, len(data))
    return data


def fetch_font_resources(
    handwriting: str | None = None,
    standard: str | None = None,
    *,
    timeout: int = DEFAULT_TIMEOUT_FONT_FETCH,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> FontResources:
    """Fetch and parse both fonts an export draws with.

    Locations not given explicitly are taken from config
    (env vars > ~/.fieldstamp/config.json).  A location shared by both
    fonts is fetched once.

    Raises:
        ConfigError: If a font location is not configured.
        FontError: If a font cannot be fetched or parsed.
    """
    if handwriting is None or standard is None:
        configured_handwriting, configured_standard = get_font_sources()
        handwriting = handwriting or configured_handwriting
        standard = standard or configured_standard

    fetched: dict[str, bytes] = {}
    for uri in (handwriting, standard):
        if uri not in fetched:
            fetched[uri] = fetch_font_bytes(uri, timeout=timeout, max_retries=max_retries)
    return load_font_resources(fetched[handwriting], fetched[standard])


# ---------------------------------------------------------------------------
# Document helpers
# ---------------------------------------------------------------------------


@contextmanager
def _open_pdf(pdf_bytes: bytes) -> Iterator[pikepdf.Pdf]:
    """Open PDF bytes with pikepdf, mapping parse failures to PDFError."""
    if PDF_MAGIC not in pdf_bytes[:1024]:
        raise PDFError("Input is not a PDF document (missing %PDF- header)")

    pikepdf = _require_pikepdf()
    try:
        pdf = pikepdf.open(io.BytesIO(pdf_bytes))
    except (ValueError, RuntimeError, OSError, pikepdf.PdfError) as e:
        raise PDFError(f"Cannot open PDF: {e}") from e
    with pdf:
        yield pdf


def _save_pdf(pdf: pikepdf.Pdf) -> bytes:
    pikepdf = _require_pikepdf()
    buf = io.BytesIO()
    try:
        pdf.save(buf)
    except (ValueError, RuntimeError, OSError, pikepdf.PdfError) as e:
        raise PDFError(f"Cannot save PDF: {e}") from e
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def insert_field_in_pdf(
    canvas: FieldCanvas,
    field: Field,
    fonts: FontResources,
    layout: LayoutConfig = DEFAULT_LAYOUT,
) -> None:
    """Place one field on its page of an open document.

    Raises:
        PDFError: If the field's page does not exist or a widget name is taken.
        FieldMetaError: If a checkbox/radio field has no valid option list.
        ImageError: If a signature image cannot be decoded.
    """
    geometry = canvas.page_geometry(field.page)
    box = compute_field_box(field, geometry)
    calls = render_field(field, box, fonts, layout)
    canvas.apply(field.page, calls)
    _logger.debug(
        "Field %s (%s) on page %d: %d draw call(s)",
        field.id,
        field.type.value,
        field.page,
        len(calls),
    )


def insert_fields_in_pdf(
    pdf_bytes: bytes,
    fields: Iterable[Field],
    fonts: FontResources,
    layout: LayoutConfig | None = None,
) -> bytes:
    """Place every field into a PDF and return the resulting document.

    Fields are processed in order on one canvas.  The first failure
    aborts the export; no partial document is returned.

    Args:
        pdf_bytes: The source document.
        fields: Fields to place.
        fonts: Parsed handwriting and standard fonts.
        layout: Layout constants (defaults to the configured layout).

    Raises:
        PDFError: If the document cannot be opened or saved.
        ExportError: If a field cannot be placed (``field_id`` names it).
    """
    if layout is None:
        layout = get_layout_config()
    pikepdf = _require_pikepdf()

    with _open_pdf(pdf_bytes) as pdf:
        canvas = FieldCanvas(pdf)
        count = 0
        for field in fields:
            try:
                insert_field_in_pdf(canvas, field, fonts, layout)
            except (FieldStampError, pikepdf.PdfError) as e:
                raise ExportError(
                    f"Failed to insert field {field.id}: {e}", field_id=field.id
                ) from e
            count += 1
        canvas.finish()
        result = _save_pdf(pdf)

    _logger.info("Inserted %d field(s) into %d-byte document", count, len(pdf_bytes))
    return result


def insert_text_in_pdf(
    pdf_bytes: bytes,
    text: str,
    x: float,
    y: float,
    page: int = 0,
    *,
    fonts: FontResources,
    use_handwriting_font: bool = True,
    custom_font_size: float | None = None,
) -> bytes:
    """Stamp one line of text, right-aligned in a fixed 250x64 pt box.

    Args:
        pdf_bytes: The source document.
        text: Text to draw.
        x: Left edge of the box, in points from the page's left.
        y: Top edge of the box, in points from the page's top.
        page: 0-based page index.
        fonts: Parsed fonts; the handwriting or standard one is used.
        use_handwriting_font: Draw with the handwriting font (size 50)
            rather than the standard font (size 15).
        custom_font_size: Explicit size overriding the default.

    Raises:
        FieldError: If *custom_font_size* is not a positive size up to 512 pt.
        PDFError: If the document cannot be opened or the page does not exist.
    """
    if custom_font_size is None:
        size = STAMP_HANDWRITING_FONT_SIZE if use_handwriting_font else STAMP_STANDARD_FONT_SIZE
    elif 0 < custom_font_size <= MAX_FONT_SIZE:
        size = custom_font_size
    else:
        raise FieldError(
            f"Font size must be above 0 and at most {MAX_FONT_SIZE:.0f} pt, got {custom_font_size}"
        )
    font = fonts.handwriting if use_handwriting_font else fonts.standard

    with _open_pdf(pdf_bytes) as pdf:
        canvas = FieldCanvas(pdf)
        geometry = canvas.page_geometry(page + 1)
        display_width, display_height = geometry.display_size
        box = FieldBox(
            display_width,
            display_height,
            x,
            y,
            STAMP_BOX_WIDTH,
            STAMP_BOX_HEIGHT,
            geometry.rotation,
        )

        # Baseline: box centre lowered by a quarter of the text height
        baseline = display_height - y - (STAMP_BOX_HEIGHT + font.height_at_size(size) / 2) / 2
        left = x + STAMP_BOX_WIDTH - font.text_width(text, size)
        draw_x, draw_y = box.to_draw_point(left, baseline)

        canvas.apply(
            page + 1,
            [TextDraw(shape_for_display(text), draw_x, draw_y, size, font, geometry.rotation)],
        )
        canvas.finish()
        return _save_pdf(pdf)
