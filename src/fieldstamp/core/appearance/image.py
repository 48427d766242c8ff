# pyright: reportUnknownMemberType=false
"""
Signature image decoding for PDF embedding.

Drawn signatures arrive as base64 (optionally a ``data:`` URL).  The
image is decoded with Pillow, its alpha channel split off as a soft
mask, and both planes deflate-compressed ready for an image XObject.
"""

from __future__ import annotations

import base64
import binascii
import io
import re
import zlib
from dataclasses import dataclass

from ...constants import BYTES_PER_MB, MAX_IMAGE_BYTES, MAX_IMAGE_PIXELS
from ...errors import ImageError

__all__ = ["SignatureImage", "decode_signature_image"]

# Allowed image formats (Pillow format names).
_ALLOWED_FORMATS = {"PNG", "JPEG", "GIF", "BMP", "TIFF", "WEBP"}

_DATA_URL = re.compile(r"^data:[\w/+.-]*(;[\w=-]+)*;base64,", re.IGNORECASE)


@dataclass(frozen=True)
class SignatureImage:
    """Decoded signature image.

    Width and height are in pixels; the renderer treats one pixel as one
    point before scaling to the field box.
    """

    samples: bytes  # Deflate-compressed RGB pixel data
    smask: bytes | None  # Deflate-compressed alpha channel, or None if opaque
    width: int
    height: int
    bpc: int = 8


def _decode_base64(payload: str) -> bytes:
    payload = _DATA_URL.sub("", payload.strip(), count=1)
    try:
        raw = base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ImageError(f"Signature image is not valid base64: {exc}") from exc
    if not raw:
        raise ImageError("Signature image is empty")
    if len(raw) > MAX_IMAGE_BYTES:
        raise ImageError(
            f"Signature image too large: {len(raw) / BYTES_PER_MB:.1f} MB "
            f"(max {MAX_IMAGE_BYTES / BYTES_PER_MB:.0f} MB)"
        )
    return raw


def decode_signature_image(payload: str) -> SignatureImage:
    """Decode a base64 signature image for embedding.

    Args:
        payload: Base64 image bytes, optionally with a ``data:`` URL prefix.

    Returns:
        SignatureImage with compressed RGB samples and optional soft mask.

    Raises:
        ImageError: If the payload cannot be decoded or is not an allowed image.
    """
    from PIL import Image

    raw = _decode_base64(payload)

    try:
        img = Image.open(io.BytesIO(raw))
    except Image.DecompressionBombError as exc:
        raise ImageError(f"Signature image too large: {exc}") from exc
    except OSError as exc:
        # UnidentifiedImageError is a subclass of OSError
        raise ImageError(f"Cannot load signature image: {exc}") from exc

    try:
        # Image.open() only reads the header; reject huge dimensions before
        # any pixel data is decompressed.
        pixel_count = img.width * img.height
        if pixel_count > MAX_IMAGE_PIXELS:
            raise ImageError(
                f"Image too large: {img.width}x{img.height} ({pixel_count:,} pixels). "
                f"Maximum: {MAX_IMAGE_PIXELS:,} pixels."
            )
        if img.width == 0 or img.height == 0:
            raise ImageError("Signature image has no pixels")

        if not img.format or img.format not in _ALLOWED_FORMATS:
            actual = img.format or "unknown"
            raise ImageError(
                f"Unsupported image format: {actual}. "
                f"Supported: {', '.join(sorted(_ALLOWED_FORMATS))}"
            )

        # Palette images may carry transparency in info["transparency"]
        if img.mode == "P" and "transparency" in img.info:
            img = img.convert("RGBA")

        smask_data = None
        if img.mode in ("RGBA", "LA", "PA"):
            alpha = img.split()[-1]
            smask_data = zlib.compress(alpha.tobytes())
            img = img.convert("RGB")
        elif img.mode != "RGB":
            img = img.convert("RGB")

        return SignatureImage(
            samples=zlib.compress(img.tobytes()),
            smask=smask_data,
            width=img.width,
            height=img.height,
        )
    except OSError as exc:
        raise ImageError(f"Cannot decode signature image: {exc}") from exc
    finally:
        img.close()
