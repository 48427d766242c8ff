"""
fieldstamp -- place filled-in form fields into PDF documents.

Draws text, signatures, checkboxes and radio buttons at their recorded
positions, honouring page rotation and right-to-left labels.
"""

from __future__ import annotations

from .api import (
    fetch_font_resources,
    insert_field_in_pdf,
    insert_fields_in_pdf,
    insert_text_in_pdf,
)
from .config import DEFAULT_LAYOUT, LayoutConfig
from .constants import __version__
from .core.appearance.fonts import Font, FontResources, load_font_resources
from .core.fields import Field, FieldType, Signature
from .core.pdf import FieldCanvas
from .errors import (
    ConfigError,
    ExportError,
    FieldError,
    FieldMetaError,
    FieldStampError,
    FontError,
    ImageError,
    PDFError,
)

__all__ = [
    "DEFAULT_LAYOUT",
    "ConfigError",
    "ExportError",
    "Field",
    "FieldCanvas",
    "FieldError",
    "FieldMetaError",
    "FieldStampError",
    "FieldType",
    "Font",
    "FontError",
    "FontResources",
    "ImageError",
    "LayoutConfig",
    "PDFError",
    "Signature",
    "__version__",
    "fetch_font_resources",
    "insert_field_in_pdf",
    "insert_fields_in_pdf",
    "insert_text_in_pdf",
    "load_font_resources",
]
