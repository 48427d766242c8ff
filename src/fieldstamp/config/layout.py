"""
Layout constants shared by every view that draws fields.

The editor, the signing page and the PDF export must place checkbox and
radio rows identically, so the constants live in one immutable value
that is passed to whoever draws.  Units are PDF points (1 px = 1 pt in
the web views).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields

from ..constants import MAX_FONT_SIZE
from ..core.fields import FieldType, is_signature_field_type
from ..errors import ConfigError

__all__ = ["DEFAULT_LAYOUT", "LayoutConfig"]


@dataclass(frozen=True)
class LayoutConfig:
    """Immutable layout settings.

    Attributes:
        box_size: Side of the checkbox/radio square.
        vertical_spacing: Distance between consecutive option rows.
        label_gap: Horizontal gap between a box and its label.
        label_font_size: Font size of option labels.
        standard_font_size: Auto-fit ceiling for standard-font text.
        min_standard_font_size: Auto-fit floor for standard-font text.
        handwriting_font_size: Auto-fit ceiling for signature text.
        min_handwriting_font_size: Auto-fit floor for signature text.
    """

    box_size: float = 12.0
    vertical_spacing: float = 16.0
    label_gap: float = 6.0
    label_font_size: float = 12.0
    standard_font_size: float = 12.0
    min_standard_font_size: float = 8.0
    handwriting_font_size: float = 50.0
    min_handwriting_font_size: float = 20.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"Layout {f.name} must be a number, got {value!r}")
            if value <= 0:
                raise ConfigError(f"Layout {f.name} must be positive, got {value}")
        for name in ("label_font_size", "standard_font_size", "handwriting_font_size"):
            if getattr(self, name) > MAX_FONT_SIZE:
                raise ConfigError(f"Layout {name} exceeds {MAX_FONT_SIZE:.0f} pt")
        if self.min_standard_font_size > self.standard_font_size:
            raise ConfigError("Layout min_standard_font_size exceeds standard_font_size")
        if self.min_handwriting_font_size > self.handwriting_font_size:
            raise ConfigError("Layout min_handwriting_font_size exceeds handwriting_font_size")

    def font_bounds(self, field_type: FieldType) -> tuple[float, float]:
        """(min, max) auto-fit font size for the field's font kind."""
        if is_signature_field_type(field_type):
            return self.min_handwriting_font_size, self.handwriting_font_size
        return self.min_standard_font_size, self.standard_font_size

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


DEFAULT_LAYOUT = LayoutConfig()
