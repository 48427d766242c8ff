"""
Field records as handed over by the data layer.

A field is read-only input: nothing in the rendering pipeline mutates
it.  Kind-specific meta arrives as a loosely typed mapping and is
validated here, right before the renderer that needs it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..constants import EMPTY_VALUE_PREFIX, MAX_META_FONT_SIZE, MIN_META_FONT_SIZE
from ..errors import FieldError, FieldMetaError

__all__ = [
    "Field",
    "FieldType",
    "OptionItem",
    "OptionMeta",
    "Signature",
    "TextMeta",
    "is_signature_field_type",
    "parse_option_meta",
    "parse_text_meta",
    "selected_values",
]

_logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    EMAIL = "EMAIL"
    NAME = "NAME"
    INITIALS = "INITIALS"
    SIGNATURE = "SIGNATURE"
    FREE_SIGNATURE = "FREE_SIGNATURE"
    CHECKBOX = "CHECKBOX"
    RADIO = "RADIO"


_SIGNATURE_TYPES = frozenset({FieldType.SIGNATURE, FieldType.FREE_SIGNATURE})

# Meta "type" discriminator expected for each text-like field type
_TEXT_META_TYPES = {
    FieldType.TEXT: "text",
    FieldType.NUMBER: "number",
    FieldType.DATE: "date",
    FieldType.EMAIL: "email",
    FieldType.NAME: "name",
    FieldType.INITIALS: "initials",
}

_OPTION_META_TYPES = {
    FieldType.CHECKBOX: "checkbox",
    FieldType.RADIO: "radio",
}


def is_signature_field_type(field_type: FieldType) -> bool:
    """True for the kinds drawn with the handwriting font."""
    return field_type in _SIGNATURE_TYPES


@dataclass(frozen=True)
class Signature:
    """Signature payload captured at signing time.

    Attributes:
        image_as_base64: Drawn signature as base64 PNG/JPEG, optionally
            wrapped in a ``data:`` URL.
        typed_signature: Typed signature text, used when no image exists.
    """

    image_as_base64: str | None = None
    typed_signature: str | None = None


@dataclass(frozen=True)
class Field:
    """A placeholder region on one page, positioned in percent of the page.

    Percentages are relative to the page as displayed in the editor,
    which for pages rotated by 90 or 270 degrees is the stored page with
    width and height swapped.
    """

    id: str | int
    type: FieldType
    page: int
    position_x: float
    position_y: float
    width: float
    height: float
    custom_text: str = ""
    field_meta: Mapping[str, Any] | None = None
    signature: Signature | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, FieldType):
            try:
                object.__setattr__(self, "type", FieldType(self.type))
            except ValueError as exc:
                raise FieldError(f"Field {self.id}: unknown field type {self.type!r}") from exc
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise FieldError(f"Field {self.id}: page must be an integer >= 1, got {self.page!r}")
        for name in ("position_x", "position_y", "width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FieldError(f"Field {self.id}: {name} must be a number, got {value!r}")
            if not math.isfinite(value) or not 0 <= value <= 100:
                raise FieldError(f"Field {self.id}: {name} must be within [0, 100], got {value}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Field:
        """Build a Field from a data-layer record (camelCase keys).

        Positions may be numeric strings, since the data layer stores
        them as decimals.

        Raises:
            FieldError: If a required key is missing or a value is invalid.
        """
        try:
            field_id = data["id"]
            raw_type = data["type"]
            page = data["page"]
        except KeyError as exc:
            raise FieldError(f"Field record is missing {exc.args[0]!r}") from exc

        coords: dict[str, float] = {}
        for key, attr in (
            ("positionX", "position_x"),
            ("positionY", "position_y"),
            ("width", "width"),
            ("height", "height"),
        ):
            raw = data.get(key)
            try:
                coords[attr] = float(raw)  # type: ignore[arg-type]  # validated below
            except (TypeError, ValueError) as exc:
                raise FieldError(f"Field {field_id}: {key} must be a number, got {raw!r}") from exc

        raw_sig = data.get("signature", data.get("Signature"))
        signature = None
        if isinstance(raw_sig, Mapping):
            signature = Signature(
                image_as_base64=raw_sig.get("signatureImageAsBase64") or None,
                typed_signature=raw_sig.get("typedSignature"),
            )

        meta = data.get("fieldMeta")
        custom_text = data.get("customText") or ""
        if not isinstance(custom_text, str):
            raise FieldError(f"Field {field_id}: customText must be a string")

        return cls(
            id=field_id,
            type=raw_type,
            page=page,
            custom_text=custom_text,
            field_meta=meta if isinstance(meta, Mapping) else None,
            signature=signature,
            **coords,
        )


def selected_values(field: Field) -> list[str]:
    """Values named in the comma-joined ``custom_text`` of a multi-select field."""
    return field.custom_text.split(",")


# ── Text meta ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextMeta:
    font_size: float | None = None


def parse_text_meta(field: Field) -> TextMeta:
    """Read the optional font size override of a text-like field.

    Missing or invalid meta is not an error: the renderer auto-fits.
    """
    meta = field.field_meta
    if meta is None:
        return TextMeta()

    expected = _TEXT_META_TYPES.get(field.type)
    if expected is None or meta.get("type") != expected:
        _logger.debug(
            "Field %s: meta type %r does not match %s, using defaults",
            field.id,
            meta.get("type"),
            field.type.value,
        )
        return TextMeta()

    size = meta.get("fontSize")
    if size is None:
        return TextMeta()
    if (
        isinstance(size, bool)
        or not isinstance(size, (int, float))
        or not MIN_META_FONT_SIZE <= size <= MAX_META_FONT_SIZE
    ):
        _logger.debug("Field %s: ignoring invalid fontSize %r", field.id, size)
        return TextMeta()
    return TextMeta(font_size=float(size))


# ── Option meta (checkbox / radio) ────────────────────────────────────


@dataclass(frozen=True)
class OptionItem:
    """One checkbox/radio option.

    Empty values are replaced by ``empty-value-<id>`` so that layout and
    selection always work on a non-empty key; ``is_placeholder`` marks
    those rows, which draw no label.
    """

    id: int
    value: str
    checked: bool = False
    is_placeholder: bool = False

    @property
    def label(self) -> str:
        return "" if self.is_placeholder else self.value


@dataclass(frozen=True)
class OptionMeta:
    values: tuple[OptionItem, ...] = field(default_factory=tuple)


def _parse_option_item(field_id: str | int, index: int, raw: object) -> OptionItem:
    if not isinstance(raw, Mapping):
        raise FieldMetaError(f"Field {field_id}: option {index} is not an object")
    item_id = raw.get("id")
    value = raw.get("value")
    checked = raw.get("checked", False)
    if isinstance(item_id, bool) or not isinstance(item_id, int):
        raise FieldMetaError(f"Field {field_id}: option {index} has invalid id {item_id!r}")
    if not isinstance(value, str):
        raise FieldMetaError(f"Field {field_id}: option {index} has invalid value {value!r}")
    if not isinstance(checked, bool):
        raise FieldMetaError(f"Field {field_id}: option {index} has invalid checked {checked!r}")
    if not value:
        return OptionItem(
            id=item_id, value=f"{EMPTY_VALUE_PREFIX}{item_id}", checked=checked, is_placeholder=True
        )
    return OptionItem(id=item_id, value=value, checked=checked)


def parse_option_meta(field: Field) -> OptionMeta:
    """Validate the option list of a CHECKBOX or RADIO field.

    Raises:
        FieldMetaError: If the meta is missing or malformed.  The field
            cannot be drawn without its options, so this is fatal.
    """
    expected = _OPTION_META_TYPES.get(field.type)
    if expected is None:
        raise FieldMetaError(f"Field {field.id}: {field.type.value} has no option list")

    meta = field.field_meta
    if meta is None:
        raise FieldMetaError(f"Invalid {expected} field meta for field {field.id}: missing")
    if meta.get("type") != expected:
        raise FieldMetaError(
            f"Invalid {expected} field meta for field {field.id}: "
            f"type is {meta.get('type')!r}, expected {expected!r}"
        )

    raw_values = meta.get("values")
    if raw_values is None:
        return OptionMeta()
    if not isinstance(raw_values, (list, tuple)):
        raise FieldMetaError(f"Invalid {expected} field meta for field {field.id}: values")

    return OptionMeta(
        values=tuple(_parse_option_item(field.id, i, raw) for i, raw in enumerate(raw_values))
    )
