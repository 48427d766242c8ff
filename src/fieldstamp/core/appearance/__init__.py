"""Fonts, sizing, script direction and signature images."""

from .direction import TextDirection, classify, group_direction, is_rtl, shape_for_display
from .fonts import Font, FontResources, load_font_resources, resolve_font
from .image import SignatureImage, decode_signature_image
from .sizing import compute_font_size, split_lines

__all__ = [
    "Font",
    "FontResources",
    "SignatureImage",
    "TextDirection",
    "classify",
    "compute_font_size",
    "decode_signature_image",
    "group_direction",
    "is_rtl",
    "load_font_resources",
    "resolve_font",
    "shape_for_display",
    "split_lines",
]
