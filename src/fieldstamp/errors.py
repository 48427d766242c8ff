"""Fieldstamp error types."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConfigError",
    "ExportError",
    "FieldError",
    "FieldMetaError",
    "FieldStampError",
    "FontError",
    "ImageError",
    "PDFError",
]


class FieldStampError(Exception):
    """Base error for Fieldstamp operations."""


class FieldError(FieldStampError):
    """A field record violates the data contract (page, percentages, type)."""


class FieldMetaError(FieldStampError):
    """Field meta failed schema validation where the renderer cannot do without it."""


class PDFError(FieldStampError):
    """PDF structure error: missing page, unreadable document, widget clash."""


class FontError(FieldStampError):
    """Font resource could not be fetched or parsed.

    Args:
        message: Human-readable error description.
        retryable: Whether this error is transient and worth retrying.
            True for timeouts and connection failures;
            False for missing files and unusable font programs.
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable

    def __reduce__(self) -> tuple[type[FontError], tuple[str], dict[str, bool]]:
        """Preserve retryable flag across pickle/unpickle."""
        return (type(self), (str(self),), {"retryable": self.retryable})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.retryable = state.get("retryable", False)


class ImageError(FieldStampError):
    """Signature image could not be decoded."""


class ConfigError(FieldStampError):
    """Configuration validation error."""


class ExportError(FieldStampError):
    """A document export failed; no partial output was produced.

    Args:
        message: Human-readable error description.
        field_id: Id of the field whose placement failed, if any.
    """

    def __init__(self, message: str, *, field_id: str | int | None = None) -> None:
        super().__init__(message)
        self.field_id = field_id

    def __reduce__(
        self,
    ) -> tuple[type[ExportError], tuple[str], dict[str, str | int | None]]:
        """Preserve field_id across pickle/unpickle."""
        return (type(self), (str(self),), {"field_id": self.field_id})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.field_id = state.get("field_id")
